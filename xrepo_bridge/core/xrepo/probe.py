"""xrepo fetch --json 能力探测"""

from __future__ import annotations

import logging
import re

from xrepo_bridge.core.exceptions import ProbeError
from xrepo_bridge.utils.shell import CommandExecutor, format_cmd

logger = logging.getLogger(__name__)

JSON_FLAG = "--json"
# 调用方 CMake 从 3.19 起才有 string(JSON)
MIN_JSON_CMAKE_VERSION = (3, 19)


def parse_version(text: str) -> tuple[int, ...]:
    """"3.19.2" -> (3, 19, 2)；忽略 "-rc1" 之类的后缀"""
    parts = []
    for piece in text.strip().split("."):
        m = re.match(r"\d+", piece)
        if not m:
            break
        parts.append(int(m.group()))
    return tuple(parts)


def supports_json_output(
    xrepo_cmd: list[str],
    executor: CommandExecutor,
    *,
    cmake_version: str = "",
) -> bool:
    """判断能否用 xrepo fetch --json 获取包信息

    cmake_version 低于 3.19 时直接返回 False，不启动子进程。
    """
    if cmake_version and parse_version(cmake_version) < MIN_JSON_CMAKE_VERSION:
        logger.warning(
            "CMake version < 3.19 has no JSON support, "
            "xrepo_package maybe unreliable to setup package variables",
        )
        return False

    cmd = [*xrepo_cmd, "fetch", "--help"]
    try:
        r = executor.execute(cmd)
    except OSError as e:
        raise ProbeError(f"xrepo fetch --help failed: {format_cmd(cmd)}: {e}") from e
    if not r.success:
        raise ProbeError(
            f"xrepo fetch --help failed, exit code: {r.returncode}",
            returncode=r.returncode,
        )

    supported = JSON_FLAG in r.stdout
    if not supported:
        logger.warning(
            "xrepo fetch does not support --json (please upgrade), "
            "xrepo_package maybe unreliable to setup package variables",
        )
    logger.info("xrepo fetch --json support: %s", "ON" if supported else "OFF")
    return supported
