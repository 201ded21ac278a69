"""xrepo fetch 结果获取与解析

两条路径:
- JSON: `xrepo fetch --json`，返回每个包一个对象的数组
- cflags: 旧版 xrepo 不支持 --json 时，从 `xrepo fetch --cflags` 的第一个
  -I 参数反推安装目录，最多只能得到一个 include 目录和一个 lib 目录

两条路径的结果并不等价，这是已知差异。
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from xrepo_bridge.core.exceptions import ParseError, QueryError
from xrepo_bridge.core.models import FetchResult
from xrepo_bridge.utils.shell import CommandExecutor, format_cmd

logger = logging.getLogger(__name__)

_INCLUDE_SUFFIX = re.compile(r"^(.*)([/\\])include")


def _query(
    executor: CommandExecutor, xrepo_cmd: list[str], flag: str,
    args: list[str], package: str,
) -> str:
    cmd = [*xrepo_cmd, "fetch", flag, *args, package]
    logger.debug("xrepo fetch: %s", format_cmd(cmd))
    try:
        r = executor.execute(cmd)
    except OSError as e:
        raise QueryError(f"xrepo fetch {flag} failed: {format_cmd(cmd)}: {e}") from e
    if not r.success:
        raise QueryError(
            f"xrepo fetch {flag} failed, exit code: {r.returncode}",
            returncode=r.returncode,
        )
    return r.stdout


# =========================================================================
# JSON 路径
# =========================================================================

def _string_list(entry: dict[str, Any], key: str, index: int) -> list[str]:
    value = entry.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ParseError(
            f"xrepo fetch --json: [{index}].{key} 应为字符串数组，实际为 {value!r}"
        )
    return value


def discover_config_dirs(link_dir: str) -> dict[str, str]:
    """扫描 <link_dir>/cmake 下的直接子目录，按目录名登记为配置模块目录"""
    cmake_dir = Path(link_dir) / "cmake"
    if not cmake_dir.is_dir():
        return {}
    try:
        entries = sorted(cmake_dir.iterdir())
    except OSError as e:
        raise ParseError(f"无法读取配置模块目录 {cmake_dir}: {e}") from e
    return {d.name: str(d) for d in entries if d.is_dir()}


def parse_json_output(text: str) -> FetchResult:
    """解析 `xrepo fetch --json` 的输出

    数组第一个元素是请求的包，其后（如有）是传递依赖。依赖可能是以不同
    configs 构建的，但这里仍然把所有元素的 includedirs / linkdirs 扁平合并，
    不按包名归属。
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"xrepo fetch --json 输出不是合法 JSON: {e}") from e
    if not isinstance(data, list):
        raise ParseError(
            f"xrepo fetch --json 输出应为数组，实际为 {type(data).__name__}"
        )

    result = FetchResult()
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ParseError(f"xrepo fetch --json: [{index}] 不是对象")
        result.include_dirs.extend(_string_list(entry, "includedirs", index))
        for link_dir in _string_list(entry, "linkdirs", index):
            result.link_dirs.append(link_dir)
            result.config_dirs.update(discover_config_dirs(link_dir))
    return result


def fetch_json(
    executor: CommandExecutor, xrepo_cmd: list[str],
    args: list[str], package: str,
) -> FetchResult:
    output = _query(executor, xrepo_cmd, "--json", args, package)
    return parse_json_output(output)


# =========================================================================
# cflags 路径
# =========================================================================

def _match_include(text: str) -> re.Match[str]:
    for token in text.split():
        if not token.startswith("-I"):
            continue
        m = _INCLUDE_SUFFIX.match(token[2:])
        if m:
            return m
    raise ParseError(f"xrepo fetch --cflags 输出中没有 -I<path>/include: {text.strip()!r}")


def install_root_from_cflags(text: str) -> str:
    """取第一个带 include 目录的 -I 参数，去掉结尾的 /include... 得到安装根目录"""
    return _match_include(text).group(1)


def parse_cflags_output(text: str, package_name: str) -> FetchResult:
    """由安装根目录推出 include / lib / lib/cmake/<包名>

    拼接时沿用 -I 参数里 include 前面的分隔符，Windows 上 `-IC:\\pkg\\include`
    得到的仍是反斜杠路径。
    """
    m = _match_include(text)
    root, sep = m.group(1), m.group(2)
    result = FetchResult(include_dirs=[sep.join((root, "include"))])

    lib_dir = sep.join((root, "lib"))
    if Path(lib_dir).exists():
        result.link_dirs.append(lib_dir)
    config_dir = sep.join((lib_dir, "cmake", package_name))
    if Path(config_dir).exists():
        result.config_dirs[package_name] = config_dir
    return result


def fetch_text(
    executor: CommandExecutor, xrepo_cmd: list[str],
    args: list[str], package: str, package_name: str,
) -> FetchResult:
    output = _query(executor, xrepo_cmd, "--cflags", args, package)
    return parse_cflags_output(output, package_name)
