"""
CommandTarget：通过 shell 启动被测程序，把候选输入写入其标准输入。

职责：
- 每条候选单独启动新进程（POSIX 上为 `sh -c <command>`，Windows 上为 `cmd.exe /c <command>`），
- 标准错误合并到标准输出，写完输入后关闭 stdin 作为结束信号，
- 处理超时（终止整个进程组），任何退出路径上都不遗留子进程，
- 返回最小且稳定的运行结果供监控器分类。
"""

from dataclasses import dataclass
import os
import subprocess
import sys
import time
from typing import List, Optional

RUNNING_WINDOWS = sys.platform == "win32"


@dataclass
class CommandTargetResult:
    """最小化的运行结果结构。

    字段：
    - status: 'ok'|'crash'|'hang'|'error'
    - exit_code: 退出码（若可得；被信号终止时为负数）
    - timed_out: 是否超时
    - output: 合并后的 stdout+stderr（bytes）
    - wall_time: 运行耗时（秒）
    - error: 启动或 I/O 失败时的错误描述
    """

    status: str
    exit_code: Optional[int] = None
    timed_out: bool = False
    output: bytes = b""
    wall_time: float = 0.0
    error: Optional[str] = None

    @property
    def output_text(self) -> str:
        return self.output.decode("utf-8", errors="replace")


def shell_command(command: str) -> List[str]:
    """把命令字符串包装为平台对应的 shell 调用。"""
    if RUNNING_WINDOWS:
        return ["cmd.exe", "/c", command]
    return ["sh", "-c", command]


class CommandTarget:
    """针对单条命令的执行器。

    参数：
    - command: 命令字符串，交给 shell 解释
    - workdir: 子进程工作目录
    - timeout_default: 默认超时（秒），None 表示不限时
    """

    def __init__(self, command: str, workdir: str = "./", timeout_default: Optional[float] = 5.0):
        self.command = command
        self.cmd = shell_command(command)
        self.workdir = workdir
        self.timeout_default = timeout_default

    def _kill(self, proc: subprocess.Popen, sig: int) -> None:
        try:
            if not RUNNING_WINDOWS:
                # setsid 后进程组号即子进程 pid；组长已被回收时组内后台进程仍可寻址
                os.killpg(proc.pid, sig)
            elif sig == 9:
                proc.kill()
            else:
                proc.terminate()
        except (ProcessLookupError, PermissionError):
            # 进程已退出
            pass

    def run(self, input_data: bytes, timeout: Optional[float] = None) -> CommandTargetResult:
        """执行目标并返回结果。

        简要流程：
        1) 启动子进程（POSIX 上 setsid 建立新进程组以便整体终止）；
        2) communicate() 写入全部输入、关闭 stdin、读取合并输出并等待退出；
        3) 超时时先 SIGTERM 再 SIGKILL 整个进程组，并排空管道；
           若目标本身已退出（仅后台子进程未关闭输出），按其退出码判定而非 hang；
        4) 启动失败或管道 I/O 失败返回 status='error'，不视为目标故障。
        """
        timeout = timeout if timeout is not None else self.timeout_default
        if timeout is not None and timeout <= 0:
            timeout = None

        preexec_fn = None if RUNNING_WINDOWS else os.setsid
        timed_out = False
        out = b""

        start = time.time()
        try:
            proc = subprocess.Popen(self.cmd,
                                    stdin=subprocess.PIPE,
                                    stdout=subprocess.PIPE,
                                    stderr=subprocess.STDOUT,
                                    cwd=self.workdir,
                                    preexec_fn=preexec_fn)
        except OSError as e:
            return CommandTargetResult(status="error", wall_time=time.time() - start,
                                       error=f"failed to start {self.cmd!r}: {e}")

        try:
            try:
                out, _ = proc.communicate(input=input_data, timeout=timeout)
            except subprocess.TimeoutExpired:
                # 目标已退出但后台子进程仍占用输出管道：按真实退出码判定，只清理残留进程
                timed_out = proc.poll() is None
                self._kill(proc, 15)  # SIGTERM
                try:
                    out, _ = proc.communicate(timeout=0.5)
                except subprocess.TimeoutExpired:
                    self._kill(proc, 9)  # SIGKILL
                    out, _ = proc.communicate()
        except OSError as e:
            return CommandTargetResult(status="error", exit_code=proc.returncode,
                                       wall_time=time.time() - start,
                                       error=f"I/O error while running {self.command!r}: {e}")
        finally:
            if proc.poll() is None:
                self._kill(proc, 9)
                proc.wait()

        wall_time = time.time() - start
        exit_code = proc.returncode

        if timed_out:
            status = "hang"
        elif exit_code != 0:
            status = "crash"
        else:
            status = "ok"

        return CommandTargetResult(status=status,
                                   exit_code=exit_code,
                                   timed_out=timed_out,
                                   output=out or b"",
                                   wall_time=wall_time)


__all__ = ["CommandTarget", "CommandTargetResult", "shell_command", "RUNNING_WINDOWS"]
