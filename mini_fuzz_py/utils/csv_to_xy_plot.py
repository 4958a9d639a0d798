#!/usr/bin/env python3
"""
csv_to_xy_plot.py

小工具：把 fuzz 运行导出的 `run_timeline.csv` 画成 x-y 图（支持 line / scatter）。

用法示例:
  python csv_to_xy_plot.py out/run_timeline.csv --y wall_time,exit_code -o runs.png
  python csv_to_xy_plot.py out/run_timeline.csv --x time_sec --y wall_time --kind line

默认 X 为 candidate_id、Y 为 wall_time；--highlight-faults 会把 fault=1 的点用红色标出。
"""
from __future__ import annotations
import argparse
import csv
import sys
from typing import List, Optional, Sequence, Tuple

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

try:
    import pandas as pd
    _HAS_PANDAS = True
except ImportError:
    _HAS_PANDAS = False


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description='run timeline CSV -> X/Y plot tool')
    p.add_argument('csvfile', help='输入 CSV 文件路径（通常是 run_timeline.csv）')
    p.add_argument('--x', default='candidate_id', help='X 列名或列索引（从0开始），默认 candidate_id')
    p.add_argument('--y', default='wall_time', help='Y 列名或列索引, 多列用逗号分隔，默认 wall_time')
    p.add_argument('-o', '--output', default='runs.png', help='输出文件，例如 runs.png 或 runs.pdf')
    p.add_argument('--kind', choices=['line', 'scatter'], default='scatter', help='图类型')
    p.add_argument('--title', default='', help='图标题')
    p.add_argument('--xlabel', default='', help='X 轴标题（默认使用列名）')
    p.add_argument('--ylabel', default='', help='Y 轴标题')
    p.add_argument('--dpi', type=int, default=150, help='输出分辨率 DPI')
    p.add_argument('--ylog', action='store_true', help='Y 轴对数刻度')
    p.add_argument('--highlight-faults', action='store_true', help='把 fault 列为 1 的点标红')
    return p.parse_args(argv)


def read_columns(path: str) -> Tuple[List[str], List[List[str]]]:
    """读取 CSV，返回 (表头, 按列组织的数据)。"""
    if _HAS_PANDAS:
        df = pd.read_csv(path)
        hdr = [str(c) for c in df.columns]
        cols = [[str(v) for v in df.iloc[:, i].tolist()] for i in range(len(hdr))]
        return hdr, cols
    with open(path, newline='') as f:
        rows = list(csv.reader(f))
    if not rows:
        return [], []
    hdr, body = rows[0], rows[1:]
    cols = [list(c) for c in zip(*body)] if body else [[] for _ in hdr]
    return hdr, cols


def select_column(hdr: List[str], cols: List[List[str]], key: str) -> List[str]:
    # key: 列名或整数索引
    if key in hdr:
        return cols[hdr.index(key)]
    if key.isdigit() and int(key) < len(cols):
        return cols[int(key)]
    raise KeyError(f'找不到列: {key}')


def to_floats(seq):
    out = []
    for v in seq:
        try:
            out.append(float(v))
        except ValueError:
            out.append(float('nan'))
    return out


def plot_xy(x, ys: List[Tuple[str, List[float]]], args: argparse.Namespace,
            fault_mask: Optional[List[bool]] = None):
    fig, ax = plt.subplots()
    for label, yvals in ys:
        if args.kind == 'scatter':
            ax.scatter(x, yvals, label=label, s=12)
        else:
            ax.plot(x, yvals, marker='o', label=label)
        if fault_mask:
            fx = [xv for xv, m in zip(x, fault_mask) if m]
            fy = [yv for yv, m in zip(yvals, fault_mask) if m]
            if fx:
                ax.scatter(fx, fy, color='red', s=24, label=f'{label} (fault)')
    if args.title:
        ax.set_title(args.title)
    ax.set_xlabel(args.xlabel or args.x)
    if args.ylabel:
        ax.set_ylabel(args.ylabel)
    if args.ylog:
        ax.set_yscale('log')
    ax.grid(True)
    if len(ys) > 1 or fault_mask:
        ax.legend()
    fig.tight_layout()
    fig.savefig(args.output, dpi=args.dpi)
    plt.close(fig)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    y_keys = [k.strip() for k in args.y.split(',') if k.strip()]

    hdr, cols = read_columns(args.csvfile)
    if not hdr:
        print('CSV 内容为空或无法读取', file=sys.stderr)
        return 2
    try:
        x_vals = to_floats(select_column(hdr, cols, args.x))
        ys = [(yk, to_floats(select_column(hdr, cols, yk))) for yk in y_keys]
    except KeyError as e:
        print(f'error: {e}', file=sys.stderr)
        return 2

    fault_mask = None
    if args.highlight_faults and 'fault' in hdr:
        fault_mask = [v == 1.0 for v in to_floats(select_column(hdr, cols, 'fault'))]

    plot_xy(x_vals, ys, args, fault_mask)
    return 0


if __name__ == '__main__':
    sys.exit(main())
