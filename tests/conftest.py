"""共享 fixture - 假命令执行器 + 假 xmake

FakeExecutor 按命令行子串匹配预设结果，并记录每次调用，
测试无需 patch subprocess，也不需要真实安装 xmake。
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from xrepo_bridge.core.config import Config
from xrepo_bridge.utils.shell import CommandResult

HELP_WITH_JSON = "Usage: xrepo fetch [options] packages\n    --json  Output package info as json\n"
HELP_WITHOUT_JSON = "Usage: xrepo fetch [options] packages\n    --cflags  Fetch cflags\n"


class FakeExecutor:
    """按子串匹配返回预设 CommandResult；未匹配的命令返回成功空输出"""

    def __init__(self, responses: dict[str, CommandResult] | None = None) -> None:
        self.responses = dict(responses or {})
        self.calls: list[list[str]] = []
        self.capture_flags: list[bool] = []

    def respond(self, pattern: str, returncode: int = 0, stdout: str = "") -> None:
        self.responses[pattern] = CommandResult(returncode=returncode, stdout=stdout)

    def execute(
        self,
        cmd: str | list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        capture_output: bool = True,
    ) -> CommandResult:
        args = cmd.split() if isinstance(cmd, str) else list(cmd)
        self.calls.append(args)
        self.capture_flags.append(capture_output)
        joined = " ".join(args)
        for pattern, result in self.responses.items():
            if pattern in joined:
                return result
        return CommandResult(returncode=0)

    def subcommands(self) -> list[str]:
        """每次调用里 private.xrepo 之后的第一个参数（install / fetch）"""
        out = []
        for args in self.calls:
            if "private.xrepo" in args:
                out.append(args[args.index("private.xrepo") + 1])
        return out


@pytest.fixture()
def fake_executor() -> FakeExecutor:
    ex = FakeExecutor()
    ex.respond("fetch --help", stdout=HELP_WITH_JSON)
    return ex


@pytest.fixture()
def xmake_bin(tmp_path: Path) -> Path:
    """磁盘上存在的假 xmake，满足 XMAKE_CMD 存在性检查"""
    path = tmp_path / "bin" / "xmake"
    path.parent.mkdir(parents=True)
    path.write_text("#!/bin/sh\n")
    path.chmod(0o755)
    return path


@pytest.fixture()
def config(tmp_path: Path, xmake_bin: Path) -> Config:
    return Config(xmake_cmd=str(xmake_bin), build_dir=str(tmp_path / "build"))


def json_output(*entries: dict) -> str:
    return json.dumps(list(entries))
