"""xmake 可执行文件定位

查找顺序:
  1. 配置里显式指定的 xmake_cmd
  2. PATH 中的 xmake
  3. 之前自动安装到 <build_dir>/xmake 的 xmake
  4. 开启 bootstrap 时自动下载安装
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Callable

from xrepo_bridge.core.config import Config
from xrepo_bridge.core.exceptions import LocatorError
from xrepo_bridge.core.xrepo.bootstrap import (
    XmakeBootstrapper,
    bootstrapped_binary,
    is_windows,
)
from xrepo_bridge.utils.shell import CommandExecutor

logger = logging.getLogger(__name__)

INSTALL_HINT = "xmake not found, Please install it first from https://xmake.io"


class ExecutableLocator:
    """定位或自动安装 xmake"""

    def __init__(
        self,
        config: Config,
        executor: CommandExecutor | None = None,
        *,
        windows: bool | None = None,
        which: Callable[[str], str | None] = shutil.which,
        bootstrapper: XmakeBootstrapper | None = None,
    ) -> None:
        self.config = config
        self.windows = is_windows() if windows is None else windows
        self._which = which
        self._bootstrapper = bootstrapper or XmakeBootstrapper(
            config, executor, windows=self.windows,
        )

    def _explicit(self) -> str | None:
        cmd = self.config.xmake_cmd
        if not cmd:
            return None
        if Path(cmd).exists():
            return cmd
        found = self._which(cmd)
        if found:
            return found
        raise LocatorError(f"XMAKE_CMD 指定的 xmake 不存在: {cmd}")

    def locate(self) -> str | None:
        """只查找不安装"""
        explicit = self._explicit()
        if explicit:
            return explicit

        found = self._which("xmake")
        if found:
            return found

        local = bootstrapped_binary(self.config, self.windows)
        if local.exists():
            logger.debug("使用已自动安装的 xmake: %s", local)
            return str(local)
        return None

    def locate_or_install(self) -> str:
        path = self.locate()
        if path is None and self.config.bootstrap:
            installed = self._bootstrapper.install()
            path = str(installed) if installed else None
        if path is None:
            raise LocatorError(INSTALL_HINT)
        logger.info("xmake: %s", path)
        return path
