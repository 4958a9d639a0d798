"""miniFuzz - fuzzer 入口模块。
"""
from __future__ import annotations

import sys
import argparse
import random
from typing import List, Optional
from pathlib import Path

# 兼容性：允许直接用 `python fuzzer.py` 运行而不报相对导入错误。
# 当脚本作为顶级模块执行（__package__ is None）时，把包的父目录加入 sys.path
# 并设置 __package__ 为包名，这样后续的相对导入会正常工作。
if __name__ == "__main__" and __package__ is None:
	import sys as _sys, os as _os
	_this_dir = _os.path.dirname(_os.path.abspath(__file__))
	_pkg_parent = _os.path.dirname(_this_dir)
	if _pkg_parent not in _sys.path:
		_sys.path.insert(0, _pkg_parent)
	__package__ = "mini_fuzz_py"


from .core.seed import load_seed, SeedMismatch, Seed
from .core.corpus import Candidate, generate_candidates, seed_candidate
from .core.monitor import Monitor
from .core.eval import run_timeline, export_timeline_csv
from .mutators.registry import build_default_mutators
from .targets.command_target import CommandTarget
from .utils.config import load_config, ConfigError


class _ArgumentParser(argparse.ArgumentParser):
	"""用法错误以退出码 1 结束（argparse 默认为 2）。"""

	def error(self, message):
		self.print_usage(sys.stderr)
		self.exit(1, f"{self.prog}: error: {message}\n")


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
	parser = _ArgumentParser(description="miniFuzz - mutation-based stdin fuzzer")
	parser.add_argument("command", help="command to fuzz, resolved relative to --workdir and run through the shell")
	parser.add_argument("--workdir", help="working directory for the command (default: ./)")
	parser.add_argument("--seed-input", help="structured seed input, e.g. '<html a=\"value\">...</html>'")
	parser.add_argument("--timeout", type=float, help="per-run timeout in seconds (<=0 disables)")
	parser.add_argument("--trials", type=int, help="independent trials per randomized strategy and field")
	parser.add_argument("--rng-seed", type=int, help="random seed for reproducible mutations")
	parser.add_argument("--config", help="JSON config file overriding the defaults")
	parser.add_argument("--outdir", help="export run records (JSON) and timeline (CSV) to this directory")
	return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> dict:
	"""配置文件覆盖默认值，命令行再覆盖配置文件。"""
	config = load_config(args.config)
	overrides = {
		"workdir": args.workdir,
		"seed_input": args.seed_input,
		"timeout": args.timeout,
		"trials": args.trials,
		"rng_seed": args.rng_seed,
	}
	for key, value in overrides.items():
		if value is not None:
			config[key] = value
	return config


def fuzz_loop(target: CommandTarget, monitor: Monitor, seed: Seed,
			 candidates: List[Candidate], timeout: Optional[float] = None) -> bool:
	"""核心 fuzz 循环。

	顺序执行：先运行未变异的种子，再按生成顺序运行每条候选；每条候选一个独立进程，
	上一进程结束后才启动下一个。执行错误由 monitor 记录后继续。
	返回是否发现故障。
	"""
	runs = [seed_candidate(seed)] + list(candidates)
	print(f"fuzz loop starting, candidates={len(runs)}", flush=True)
	try:
		for cand in runs:
			res = target.run(cand.encode(), timeout=timeout)
			monitor.record_run(cand, res)
	except KeyboardInterrupt:
		print("interrupted by user, shutting down fuzz loop", file=sys.stderr)
	return monitor.fault_found


def print_summary(monitor: Monitor) -> None:
	s = monitor.summary()
	print("======== fuzz summary ========")
	print(f"  total runs: {s['total_runs']}")
	print(f"  faults: {s['faults']} (timeouts: {s['timeouts']}), errors: {s['errors']}")
	print("===== fuzz loop finished =====", flush=True)


def export_results(monitor: Monitor, out_dir: Path) -> None:
	outpath = monitor.export_records(str(out_dir / "run_records.json"))
	print(f"run records exported to: {outpath}")
	csv_path = str(out_dir / "run_timeline.csv")
	export_timeline_csv(run_timeline(monitor), csv_path)
	print(f"run timeline exported to: {csv_path}")


def main(argv: Optional[list] = None) -> int:
	"""解析参数、做启动前校验并运行 fuzz 循环，返回进程退出码。

	- 1：用法错误、配置错误、命令不存在、种子不匹配，或至少一条输入触发故障；
	- 0：所有输入均以退出码 0 结束。
	"""
	args = parse_args(argv)

	try:
		config = build_config(args)
	except ConfigError as e:
		print(f"error: {e}", file=sys.stderr)
		return 1

	workdir = Path(config["workdir"])
	if not (workdir / args.command).is_file():
		print(f"error: could not find command '{args.command}' in {workdir}", file=sys.stderr)
		return 1

	try:
		seed = load_seed(config["seed_input"])
	except SeedMismatch as e:
		print(f"error: {e}", file=sys.stderr)
		return 1

	fields = seed.fields
	print(f"tagName: {fields.name}")
	print(f"attributes: {fields.attributes}")
	print(f"content: {fields.content}")

	target = CommandTarget(command=args.command, workdir=str(workdir), timeout_default=config["timeout"])
	print(f"Command: {target.cmd}")

	rng = random.Random(config["rng_seed"])
	mutators = build_default_mutators(seed, trials=config["trials"],
									  substitute_count=config["substitute_count"],
									  delete_count=config["delete_count"],
									  special=config["insert_special"])
	candidates = generate_candidates(seed, mutators, rng)

	out_dir = Path(args.outdir) if args.outdir else None
	if out_dir is not None:
		try:
			out_dir.mkdir(parents=True, exist_ok=True)
		except OSError as e:
			print(f"error: cannot create outdir {out_dir}: {e}", file=sys.stderr)
			return 1
	monitor = Monitor(out_dir=str(out_dir) if out_dir else None)

	fault_found = fuzz_loop(target, monitor, seed, candidates)
	print_summary(monitor)

	if out_dir is not None:
		try:
			export_results(monitor, out_dir)
		except OSError as e:
			print(f"error: failed to export run records: {e}", file=sys.stderr)

	if fault_found:
		print("At least one input caused a non-zero exit code.", file=sys.stderr)
		return 1
	print("No input caused a non-zero exit code.")
	return 0


if __name__ == "__main__":
	sys.exit(main())
