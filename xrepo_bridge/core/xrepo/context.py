"""运行期状态 - xmake 路径与 --json 能力

两者都在首次使用时解析一次，之后只读。整个上下文显式传给各个操作，
不依赖进程级全局变量。
"""

from __future__ import annotations

from dataclasses import dataclass, field

from xrepo_bridge.core.config import Config
from xrepo_bridge.core.xrepo.locator import ExecutableLocator
from xrepo_bridge.core.xrepo.probe import supports_json_output
from xrepo_bridge.utils.shell import CommandExecutor, get_executor

# xrepo 是 xmake 的一个 lua 脚本入口
XREPO_SUBCOMMAND = ("lua", "private.xrepo")


@dataclass
class XrepoContext:
    config: Config
    executor: CommandExecutor = field(default_factory=get_executor)
    locator: ExecutableLocator | None = None
    _executable: str | None = field(default=None, init=False, repr=False)
    _json_support: bool | None = field(default=None, init=False, repr=False)

    @property
    def executable(self) -> str:
        if self._executable is None:
            locator = self.locator or ExecutableLocator(self.config, self.executor)
            self._executable = locator.locate_or_install()
        return self._executable

    @property
    def xrepo_cmd(self) -> list[str]:
        return [self.executable, *XREPO_SUBCOMMAND]

    @property
    def json_support(self) -> bool:
        if self._json_support is None:
            self._json_support = supports_json_output(
                self.xrepo_cmd, self.executor,
                cmake_version=self.config.cmake_version,
            )
        return self._json_support
