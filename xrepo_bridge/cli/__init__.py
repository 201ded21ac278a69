"""xrepo-bridge 命令行接口

全局选项对应 CMake 侧的缓存变量，优先级: CLI > 环境变量 > 配置文件 > 默认值。
子命令按领域拆分到 cmd_*.py，各自注册到 main group。
"""

import os
import sys
from typing import Any, Callable

import click

from xrepo_bridge import __version__
from xrepo_bridge.core.config import DEFAULT_CONFIG_FILE, Config, init_config
from xrepo_bridge.core.exceptions import XrepoError
from xrepo_bridge.services.xrepo_service import XrepoService
from xrepo_bridge.utils.logger import setup_logging


def _service(ctx: click.Context) -> XrepoService:
    """按当前命令的全局选项构造服务"""
    cfg: Config = ctx.obj["config"]
    return XrepoService(cfg)


def run_or_fail(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """执行操作，任何 XrepoError 都输出诊断并以状态 1 退出"""
    try:
        return fn(*args, **kwargs)
    except XrepoError as e:
        click.secho(f"xrepo [{e.code}]: {e}", fg="red", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", default=DEFAULT_CONFIG_FILE,
              show_default=True, help="配置文件路径")
@click.option("--disable/--no-disable", default=None, help="关闭全部 xrepo 包（XREPO_PACKAGE_DISABLE）")
@click.option("--verbose/--no-verbose", default=None, help="所有 install 使用 -vD（XREPO_PACKAGE_VERBOSE）")
@click.option("--bootstrap/--no-bootstrap", default=None, help="找不到 xmake 时自动安装（XREPO_BOOTSTRAP_XMAKE）")
@click.option("--xmake-cmd", default=None, help="xmake 可执行文件路径（XMAKE_CMD）")
@click.option("--build-dir", default=None, help="构建输出目录（CMAKE_BINARY_DIR）")
@click.option("--build-type", default=None, help="构建类型，Debug 时默认 --mode=debug（CMAKE_BUILD_TYPE）")
@click.option("--cmake-version", default=None, help="调用方 CMake 版本（CMAKE_VERSION）")
@click.pass_context
def main(ctx: click.Context, config_path: str, **overrides: Any) -> None:
    """xrepo-bridge - 通过 xrepo 安装依赖包并导出构建变量"""
    setup_logging(
        level=os.getenv("XREPO_BRIDGE_LOG_LEVEL", "INFO"),
        json_output=os.getenv("XREPO_BRIDGE_LOG_JSON", "") == "1",
    )
    ctx.ensure_object(dict)
    ctx.obj["config"] = run_or_fail(init_config, config_path, **overrides)


# 注册各领域子命令
from xrepo_bridge.cli.cmd_misc import register as _reg_misc  # noqa: E402
from xrepo_bridge.cli.cmd_package import register as _reg_package  # noqa: E402

_reg_package(main)
_reg_misc(main)
