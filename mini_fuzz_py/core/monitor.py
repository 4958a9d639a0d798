"""
运行结果监控组件（判定 + 汇总）

功能：
- 判定每次执行：退出码 0 为通过，非 0 为故障，超时为 timeout 类故障；
- 记录每次执行的元数据（时间戳、候选序号、变异器、状态、退出码、耗时）；
- 故障时打印退出码、输入与输出，并追加到故障日志；
- 执行错误（启动失败、管道 I/O 失败）单独记录并输出到 stderr，不计入故障；
- 提供 JSON 导出接口供评估模块使用。

判定结果 `fault_found` 为所有候选故障标志的析取。记录所有故障，而不只是第一个。
"""
from __future__ import annotations

import os
import sys
import time
import json
from dataclasses import dataclass, asdict
from typing import Optional, List

from .corpus import Candidate
from ..targets.command_target import CommandTargetResult

FAULT_EXIT = "exit"
FAULT_TIMEOUT = "timeout"


@dataclass
class RunRecord:
    timestamp: float
    candidate_id: int
    mutator: str
    status: str
    exit_code: Optional[int]
    wall_time: float
    fault: Optional[str] = None


@dataclass
class FaultRecord:
    candidate: Candidate
    kind: str
    exit_code: Optional[int]
    output: str


def classify(result: CommandTargetResult) -> Optional[str]:
    """返回故障类型；通过或执行错误返回 None。"""
    if result.status == "hang":
        return FAULT_TIMEOUT
    if result.status == "error":
        return None
    if result.exit_code is not None and result.exit_code != 0:
        return FAULT_EXIT
    return None


class Monitor:
    """监控器：维护运行历史、故障日志与总判定。"""

    def __init__(self, out_dir: Optional[str] = None, quiet: bool = False):
        self.out_dir = out_dir
        if self.out_dir:
            os.makedirs(self.out_dir, exist_ok=True)
        self.quiet = quiet
        self.records: List[RunRecord] = []
        self.faults: List[FaultRecord] = []
        self.errors: List[RunRecord] = []

    @property
    def fault_found(self) -> bool:
        return bool(self.faults)

    def record_run(self, candidate: Candidate, result: CommandTargetResult) -> RunRecord:
        """判定并记录一次运行，返回创建的 RunRecord。"""
        kind = classify(result)
        rec = RunRecord(timestamp=time.time(), candidate_id=candidate.id,
                        mutator=candidate.mutator, status=result.status,
                        exit_code=result.exit_code, wall_time=result.wall_time,
                        fault=kind)
        self.records.append(rec)

        if result.status == "error":
            self.errors.append(rec)
            print(f"error: candidate #{candidate.id} ({candidate.mutator}): {result.error}",
                  file=sys.stderr, flush=True)
        elif kind is not None:
            fault = FaultRecord(candidate=candidate, kind=kind,
                                exit_code=result.exit_code, output=result.output_text)
            self.faults.append(fault)
            self._report_fault(fault)
        return rec

    def _report_fault(self, fault: FaultRecord) -> None:
        if self.quiet:
            return
        if fault.kind == FAULT_TIMEOUT:
            print(f"Timeout: candidate #{fault.candidate.id} ({fault.candidate.mutator})")
        else:
            print(f"Exit code: {fault.exit_code}")
        print(f"Input: {fault.candidate.data}\nOutput: {fault.output}", flush=True)

    def summary(self) -> dict:
        return {
            "total_runs": len(self.records),
            "faults": len(self.faults),
            "timeouts": sum(1 for f in self.faults if f.kind == FAULT_TIMEOUT),
            "errors": len(self.errors),
            "fault_found": self.fault_found,
        }

    def export_records(self, path: Optional[str] = None) -> str:
        """把记录导出为 JSON 文件，返回文件路径。"""
        if path is None:
            if not self.out_dir:
                raise ValueError("no output path given and monitor has no out_dir")
            path = os.path.join(self.out_dir, "run_records.json")
        payload = {
            "summary": self.summary(),
            "records": [asdict(r) for r in self.records],
            "faults": [
                {"candidate_id": f.candidate.id, "mutator": f.candidate.mutator,
                 "kind": f.kind, "exit_code": f.exit_code,
                 "input": f.candidate.data, "output": f.output}
                for f in self.faults
            ],
        }
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        return path


__all__ = ["Monitor", "RunRecord", "FaultRecord", "classify", "FAULT_EXIT", "FAULT_TIMEOUT"]
