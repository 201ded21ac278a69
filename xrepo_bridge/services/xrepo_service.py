"""xrepo 包服务 - 串起 定位 → 探测 → 安装 → 查询 → 发布

每个包走一遍完整的 install + fetch，多个包严格串行；任何一步失败都直接抛出，
不做重试，也不继续处理后面的包。

用法:
    svc = XrepoService(Config(build_type="Debug"))
    published = svc.package(PackageRequest.create("zlib 1.2.11"))
    scope = published.apply(BuildScope())

    # 关闭后所有操作都是空操作
    XrepoService(Config(disable=True)).package(req).empty  # True
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from xrepo_bridge.core.config import Config
from xrepo_bridge.core.manifest import PackageManifest
from xrepo_bridge.core.models import FetchResult, PackageRequest
from xrepo_bridge.core.options import query_args, translate
from xrepo_bridge.core.publisher import PublishedVariables, publish
from xrepo_bridge.core.xrepo import (
    ExecutableLocator,
    XrepoContext,
    fetch_json,
    fetch_text,
    install,
)
from xrepo_bridge.utils.shell import CommandExecutor, get_executor

logger = logging.getLogger(__name__)


class XrepoService:
    """xrepo_package 的 Python 实现"""

    def __init__(
        self,
        config: Config,
        executor: CommandExecutor | None = None,
        *,
        locator: ExecutableLocator | None = None,
    ) -> None:
        self.config = config
        self.executor = executor or get_executor()
        self.context = XrepoContext(
            config=config, executor=self.executor, locator=locator,
        )

    @property
    def enabled(self) -> bool:
        return not self.config.disable

    def setup(self) -> None:
        """定位 xmake 并探测 --json 支持，只做一次"""
        if not self.enabled:
            logger.info("xrepo packages disabled")
            return
        _ = self.context.executable
        _ = self.context.json_support

    def locate(self) -> str | None:
        if not self.enabled:
            return None
        return self.context.executable

    def json_support(self) -> bool | None:
        if not self.enabled:
            return None
        return self.context.json_support

    def fetch(self, request: PackageRequest) -> FetchResult:
        args = query_args(request, self.config)
        if self.context.json_support:
            return fetch_json(
                self.executor, self.context.xrepo_cmd, args, request.spec,
            )
        return fetch_text(
            self.executor, self.context.xrepo_cmd, args,
            request.spec, request.name,
        )

    def package(self, request: PackageRequest) -> PublishedVariables:
        """安装并查询一个包，返回发布结果（不写入任何作用域）"""
        if not self.enabled:
            return PublishedVariables(package_name=request.name)

        # 先翻译参数：非法 MODE 要在启动任何子进程之前报错
        install_args = translate(request, self.config)
        self.setup()
        install(self.executor, self.context.xrepo_cmd, install_args, request.spec)
        result = self.fetch(request)
        return publish(request.name, result, request.directory_scope)

    def package_all(
        self, requests: Iterable[PackageRequest],
    ) -> list[PublishedVariables]:
        return [self.package(r) for r in requests]

    def sync(self, manifest_path: str | Path) -> list[PublishedVariables]:
        """安装清单中的全部包"""
        if not self.enabled:
            logger.info("xrepo packages disabled, skip %s", manifest_path)
            return []
        return self.package_all(PackageManifest(manifest_path).load())
