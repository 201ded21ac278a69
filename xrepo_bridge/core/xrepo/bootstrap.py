"""xmake 自动安装

下载固定版本的 xmake 发布包，解压到 <build_dir>/xmake；
POSIX 平台在解压目录内 make && make install，Windows 发布包直接带 xmake.exe。
"""

from __future__ import annotations

import logging
import os
import shutil
import zipfile
from pathlib import Path
from typing import Callable

from xrepo_bridge.core.config import Config
from xrepo_bridge.core.exceptions import BootstrapError, ExecutionError
from xrepo_bridge.utils.net import download_file
from xrepo_bridge.utils.shell import CommandExecutor, run_cmd

logger = logging.getLogger(__name__)

RELEASE_URL = "https://github.com/xmake-io/xmake/releases/download"


def is_windows() -> bool:
    return os.name == "nt"


def bootstrap_root(config: Config) -> Path:
    return Path(config.build_dir) / "xmake"


def bootstrapped_binary(config: Config, windows: bool) -> Path:
    """自动安装后 xmake 可执行文件的位置"""
    root = bootstrap_root(config)
    if windows:
        return root / "xmake.exe"
    return root / "install" / "bin" / "xmake"


def extract_zip(archive: Path, dest: Path) -> None:
    """解压 zip 并还原 unix 权限位（zipfile.extractall 默认会丢掉可执行位）"""
    with zipfile.ZipFile(archive) as zf:
        for info in zf.infolist():
            target = Path(zf.extract(info, dest))
            mode = (info.external_attr >> 16) & 0o777
            if mode and not info.is_dir():
                target.chmod(mode)


class XmakeBootstrapper:
    """固定版本 xmake 的下载、解压、编译与安装"""

    def __init__(
        self,
        config: Config,
        executor: CommandExecutor | None = None,
        *,
        windows: bool | None = None,
        downloader: Callable[..., Path] = download_file,
    ) -> None:
        self.config = config
        self.executor = executor
        self.windows = is_windows() if windows is None else windows
        self._download = downloader

    @property
    def root(self) -> Path:
        return bootstrap_root(self.config)

    @property
    def archive_name(self) -> str:
        ver = self.config.xmake_version
        suffix = ".win32.zip" if self.windows else ".zip"
        return f"xmake-{ver}{suffix}"

    @property
    def archive_url(self) -> str:
        return f"{RELEASE_URL}/{self.config.xmake_version}/{self.archive_name}"

    @property
    def archive_file(self) -> Path:
        return Path(self.config.build_dir) / self.archive_name

    @property
    def binary(self) -> Path:
        return bootstrapped_binary(self.config, self.windows)

    def install(self) -> Path | None:
        """执行完整安装流程，返回 xmake 路径；安装后仍找不到二进制时返回 None"""
        logger.info("xmake not found, Install it to %s automatically!", self.root)
        if self.root.exists():
            shutil.rmtree(self.root)

        self._fetch_archive()
        self._extract()
        if not self.windows:
            self._build()

        if self.binary.exists():
            return self.binary
        logger.warning("自动安装完成但未找到 xmake: %s", self.binary)
        return None

    def _fetch_archive(self) -> None:
        if self.archive_file.exists():
            logger.info("使用已下载的 %s", self.archive_file)
            return
        logger.info("Downloading xmake from %s", self.archive_url)
        try:
            self._download(
                self.archive_url, self.archive_file, context="xmake bootstrap",
            )
        except ConnectionError as e:
            raise BootstrapError(f"download xmake failed: {e}") from e

    def _extract(self) -> None:
        logger.info("Extracting %s", self.archive_file)
        self.root.mkdir(parents=True, exist_ok=True)
        try:
            extract_zip(self.archive_file, self.root)
        except (zipfile.BadZipFile, OSError) as e:
            raise BootstrapError(f"unzip {self.archive_file} failed: {e}") from e

    def _build(self) -> None:
        cwd = str(self.root)
        prefix = self.root / "install"
        steps = [
            ("Building xmake", "Build xmake", ["make"]),
            ("Installing xmake", "Install xmake", ["make", "install", f"PREFIX={prefix}"]),
        ]
        for status, label, cmd in steps:
            logger.info(status)
            try:
                run_cmd(
                    cmd, cwd=cwd, label=label,
                    capture_output=False, executor=self.executor,
                )
            except ExecutionError as e:
                raise BootstrapError(str(e), returncode=e.returncode) from e
