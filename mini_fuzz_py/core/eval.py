"""
评估组件：运行时间线

把 `Monitor` 中的运行记录转换为按执行顺序排列的时间线，并导出为 CSV，
可直接交给 `utils/csv_to_xy_plot.py` 绘图（例如 `--x time_sec --y wall_time`）。
"""
from __future__ import annotations

import csv
from typing import List, Optional, Tuple

from .monitor import Monitor

TIMELINE_HEADER = ["candidate_id", "time_sec", "wall_time", "exit_code", "fault"]


def run_timeline(monitor: Monitor) -> List[Tuple[int, float, float, Optional[int], int]]:
    """基于 Monitor.records 生成时间线。

    返回列表：(candidate_id, elapsed_seconds_from_start, wall_time, exit_code, fault)
    退出码缺失（执行错误）时为 None，CSV 中写为空单元格，与负数信号退出码区分；fault 为 0/1。
    """
    if not monitor.records:
        return []
    start = monitor.records[0].timestamp
    rows = []
    for r in monitor.records:
        rows.append((r.candidate_id, r.timestamp - start, r.wall_time, r.exit_code,
                     1 if r.fault else 0))
    return rows


def export_timeline_csv(rows: List[Tuple[int, float, float, Optional[int], int]], path: str) -> None:
    """把时间线导出为 CSV（即使为空也写入表头）。"""
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(TIMELINE_HEADER)
        for cid, t, wall, code, fault in rows:
            writer.writerow([cid, f"{t:.6f}", f"{wall:.6f}", "" if code is None else code, fault])


__all__ = ["run_timeline", "export_timeline_csv", "TIMELINE_HEADER"]
