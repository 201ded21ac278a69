"""Shell 命令执行工具 - 统一子进程调用

通过 CommandExecutor 协议抽象子进程执行，测试时注入假执行器即可，
无需 patch subprocess。所有调用都是同步阻塞的，不设超时。
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Protocol

from xrepo_bridge.core.exceptions import ExecutionError

logger = logging.getLogger(__name__)


# =========================================================================
# 命令执行结果
# =========================================================================

@dataclass
class CommandResult:
    """命令执行结果（与 subprocess 解耦）"""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


# =========================================================================
# 命令执行器协议
# =========================================================================

class CommandExecutor(Protocol):
    """命令执行器协议

    capture_output=False 时输出直接透传到终端（xrepo install 的进度需要用户看到），
    此时 CommandResult.stdout / stderr 为空串。
    """

    def execute(
        self,
        cmd: str | list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        capture_output: bool = True,
    ) -> CommandResult:
        """执行命令并返回结果"""
        ...


class LocalExecutor:
    """本地子进程执行器（默认实现）"""

    def execute(
        self,
        cmd: str | list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        capture_output: bool = True,
    ) -> CommandResult:
        args = shlex.split(cmd) if isinstance(cmd, str) else cmd
        r = subprocess.run(
            args, capture_output=capture_output, text=True,
            cwd=cwd, env=env, check=False,
        )
        return CommandResult(
            returncode=r.returncode,
            stdout=r.stdout or "",
            stderr=r.stderr or "",
        )


# =========================================================================
# 全局默认执行器（可替换）
# =========================================================================

_default_executor: CommandExecutor = LocalExecutor()


def get_executor() -> CommandExecutor:
    """获取全局默认命令执行器"""
    return _default_executor


def set_executor(executor: CommandExecutor) -> None:
    """替换全局默认命令执行器"""
    global _default_executor  # noqa: PLW0603
    _default_executor = executor


def format_cmd(args: list[str]) -> str:
    return " ".join(shlex.quote(a) for a in args)


def run_cmd(
    cmd: str | list[str], *, cwd: str = ".",
    env: dict[str, str] | None = None,
    label: str = "cmd",
    capture_output: bool = True,
    executor: CommandExecutor | None = None,
) -> CommandResult:
    """执行命令，非零退出或无法启动时抛 ExecutionError

    Args:
        cmd: 命令字符串或参数列表
        cwd: 工作目录
        env: 环境变量（不传则继承当前进程）
        label: 日志与错误信息中的步骤名
        capture_output: 是否捕获输出
        executor: 指定执行器，默认使用全局执行器
    """
    args = shlex.split(cmd) if isinstance(cmd, str) else list(cmd)
    logger.info("  %s: %s (cwd=%s)", label, format_cmd(args), cwd)
    ex = executor or get_executor()
    try:
        r = ex.execute(args, cwd=cwd, env=env, capture_output=capture_output)
    except OSError as e:
        raise ExecutionError(f"{label}失败: 无法启动 {args[0]}: {e}") from e
    if not r.success:
        detail = f": {r.stderr[:500]}" if r.stderr else ""
        raise ExecutionError(
            f"{label}失败 (exit code: {r.returncode}){detail}",
            returncode=r.returncode,
        )
    return r
