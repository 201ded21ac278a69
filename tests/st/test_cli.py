"""CLI 系统测试 - click CliRunner + 假执行器"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner
from conftest import FakeExecutor, json_output

from xrepo_bridge import __version__
from xrepo_bridge.cli import main
from xrepo_bridge.utils.logger import reset_logging
from xrepo_bridge.utils.shell import get_executor, set_executor

_ENV_VARS = (
    "XREPO_PACKAGE_DISABLE", "XREPO_PACKAGE_VERBOSE", "XREPO_BOOTSTRAP_XMAKE",
    "XMAKE_CMD", "CMAKE_BINARY_DIR", "CMAKE_BUILD_TYPE", "CMAKE_VERSION",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    yield
    reset_logging()


@pytest.fixture()
def executor(fake_executor: FakeExecutor):
    original = get_executor()
    set_executor(fake_executor)
    yield fake_executor
    set_executor(original)


def _invoke(tmp_path: Path, xmake_bin: Path, *args: str):
    base = [
        "--config", str(tmp_path / "xrepo.yml"),
        "--xmake-cmd", str(xmake_bin),
        "--build-dir", str(tmp_path / "build"),
    ]
    return CliRunner().invoke(main, [*base, *args])


class TestGlobal:
    def test_help(self) -> None:
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "xrepo" in result.output

    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestPackageCommand:
    def test_cmake_output(self, tmp_path: Path, xmake_bin: Path, executor: FakeExecutor) -> None:
        executor.respond("fetch --json", stdout=json_output(
            {"includedirs": ["/a/inc"], "linkdirs": ["/a/lib"]},
        ))
        result = _invoke(
            tmp_path, xmake_bin, "package", "foo 1.2.3",
            "--configs", "shared=true", "--mode", "debug", "--directory-scope",
        )
        assert result.exit_code == 0, result.output
        assert 'set(foo_INCLUDE_DIR "/a/inc")' in result.output
        assert 'link_directories("/a/lib")' in result.output
        install = next(c for c in executor.calls if "install" in c)
        assert install[-3:] == ["--mode=debug", "--configs=shared=true", "foo 1.2.3"]

    def test_json_to_file(self, tmp_path: Path, xmake_bin: Path, executor: FakeExecutor) -> None:
        executor.respond("fetch --json", stdout=json_output({"includedirs": ["/a/inc"]}))
        out = tmp_path / "gen" / "foo.json"
        result = _invoke(
            tmp_path, xmake_bin, "package", "foo", "--format", "json", "--out", str(out),
        )
        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["packages"][0]["variables"] == {"foo_INCLUDE_DIR": ["/a/inc"]}

    def test_global_verbose(self, tmp_path: Path, xmake_bin: Path, executor: FakeExecutor) -> None:
        executor.respond("fetch --json", stdout="[]")
        result = _invoke(
            tmp_path, xmake_bin, "--verbose", "package", "foo", "--output", "quiet",
        )
        assert result.exit_code == 0, result.output
        install = next(c for c in executor.calls if "install" in c)
        assert "-vD" in install
        assert "-q" not in install

    def test_build_type_from_env(
        self, tmp_path: Path, xmake_bin: Path, executor: FakeExecutor,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("CMAKE_BUILD_TYPE", "Debug")
        executor.respond("fetch --json", stdout="[]")
        result = _invoke(tmp_path, xmake_bin, "package", "foo")
        assert result.exit_code == 0, result.output
        install = next(c for c in executor.calls if "install" in c)
        assert "--mode=debug" in install

    def test_invalid_mode_exits_1(self, tmp_path: Path, xmake_bin: Path, executor: FakeExecutor) -> None:
        result = _invoke(tmp_path, xmake_bin, "package", "foo", "--mode", "fast")
        assert result.exit_code == 1
        assert "VALIDATION_ERROR" in result.output
        assert executor.calls == []

    def test_install_failure_exits_1(self, tmp_path: Path, xmake_bin: Path, executor: FakeExecutor) -> None:
        executor.respond("install --yes", returncode=7)
        result = _invoke(tmp_path, xmake_bin, "package", "foo")
        assert result.exit_code == 1
        assert "exit code: 7" in result.output

    def test_disabled(self, tmp_path: Path, xmake_bin: Path, executor: FakeExecutor) -> None:
        result = _invoke(tmp_path, xmake_bin, "--disable", "package", "foo")
        assert result.exit_code == 0
        assert "set(" not in result.output
        assert executor.calls == []

    def test_unreadable_cmake_dir_is_diagnostic(
        self, tmp_path: Path, xmake_bin: Path, executor: FakeExecutor,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        lib = tmp_path / "pkg" / "lib"
        (lib / "cmake").mkdir(parents=True)
        executor.respond("fetch --json", stdout=json_output({"linkdirs": [str(lib)]}))

        def deny(self):
            raise PermissionError(13, "Permission denied", str(self))

        monkeypatch.setattr(Path, "iterdir", deny)
        result = _invoke(tmp_path, xmake_bin, "package", "foo")
        assert result.exit_code == 1
        assert "PARSE_ERROR" in result.output
        assert not isinstance(result.exception, PermissionError)


class TestSyncCommand:
    def test_sync_yaml(self, tmp_path: Path, xmake_bin: Path, executor: FakeExecutor) -> None:
        manifest = tmp_path / "xrepo-packages.yml"
        manifest.write_text(
            yaml.dump({"packages": ["zlib 1.2.11", {"spec": "fmt", "mode": "release"}]}),
            encoding="utf-8",
        )
        executor.respond("fetch --json", stdout=json_output({"includedirs": ["/i"]}))
        result = _invoke(tmp_path, xmake_bin, "sync", str(manifest), "--format", "yaml")
        assert result.exit_code == 0, result.output
        assert "zlib_INCLUDE_DIR" in result.output
        assert "fmt_INCLUDE_DIR" in result.output

    def test_missing_manifest(self, tmp_path: Path, xmake_bin: Path, executor: FakeExecutor) -> None:
        result = _invoke(tmp_path, xmake_bin, "sync", str(tmp_path / "none.yml"))
        assert result.exit_code == 1
        assert "CONFIG_ERROR" in result.output


class TestMiscCommands:
    def test_locate(self, tmp_path: Path, xmake_bin: Path, executor: FakeExecutor) -> None:
        result = _invoke(tmp_path, xmake_bin, "locate")
        assert result.exit_code == 0
        assert str(xmake_bin) in result.output

    def test_locate_missing(self, tmp_path: Path, executor: FakeExecutor) -> None:
        result = _invoke(tmp_path, tmp_path / "nope", "locate")
        assert result.exit_code == 1
        assert "LOCATOR_ERROR" in result.output

    def test_probe(self, tmp_path: Path, xmake_bin: Path, executor: FakeExecutor) -> None:
        result = _invoke(tmp_path, xmake_bin, "probe")
        assert result.exit_code == 0
        assert "support: ON" in result.output

    def test_probe_old_cmake(self, tmp_path: Path, xmake_bin: Path, executor: FakeExecutor) -> None:
        result = _invoke(tmp_path, xmake_bin, "--cmake-version", "3.18", "probe")
        assert "support: OFF" in result.output
        assert executor.calls == []
