"""xrepo install 调用"""

from __future__ import annotations

import logging

from xrepo_bridge.core.exceptions import InstallError
from xrepo_bridge.utils.shell import CommandExecutor, format_cmd

logger = logging.getLogger(__name__)


def install(
    executor: CommandExecutor, xrepo_cmd: list[str], args: list[str], package: str,
) -> None:
    """执行 `xrepo install --yes <args> <package>`，非零退出即失败，不重试

    输出直接透传到终端，便于用户看到下载与编译进度。
    """
    logger.info("xrepo install %s '%s'", " ".join(args), package)
    cmd = [*xrepo_cmd, "install", "--yes", *args, package]
    try:
        r = executor.execute(cmd, capture_output=False)
    except OSError as e:
        raise InstallError(f"xrepo install failed: {format_cmd(cmd)}: {e}") from e
    if not r.success:
        raise InstallError(
            f"xrepo install failed, exit code: {r.returncode}",
            returncode=r.returncode,
        )
