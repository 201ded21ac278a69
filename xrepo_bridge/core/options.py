"""选项翻译 - PackageRequest -> xrepo 命令行参数"""

from __future__ import annotations

from xrepo_bridge.core.config import Config
from xrepo_bridge.core.exceptions import ValidationError
from xrepo_bridge.core.models import VALID_MODES, PackageRequest, Verbosity

_VERBOSITY_FLAGS = {
    Verbosity.DIAGNOSIS: "-vD",
    Verbosity.VERBOSE: "-v",
    Verbosity.QUIET: "-q",
    Verbosity.NORMAL: "",
}


def validate_mode(mode: str) -> str:
    """大小写不敏感校验 MODE，返回小写形式"""
    lowered = mode.lower()
    if lowered not in VALID_MODES:
        raise ValidationError(
            f"xrepo_package invalid MODE: {mode}, "
            f"valid values: {', '.join(VALID_MODES)}"
        )
    return lowered


def mode_flag(request: PackageRequest, config: Config) -> str:
    if request.mode is not None:
        return f"--mode={validate_mode(request.mode)}"
    if config.build_type.lower() == "debug":
        return "--mode=debug"
    return "--mode=release"


def verbosity_flag(request: PackageRequest, config: Config) -> str:
    """全局 verbose 开关优先于单次调用的 output"""
    if config.verbose:
        return "-vD"
    return _VERBOSITY_FLAGS[request.output]


def configs_flag(request: PackageRequest) -> str:
    if not request.configs:
        return ""
    return f"--configs={request.configs_arg()}"


def query_args(request: PackageRequest, config: Config) -> list[str]:
    """xrepo fetch 使用的参数: [mode] [configs]"""
    args = [mode_flag(request, config), configs_flag(request)]
    return [a for a in args if a]


def translate(request: PackageRequest, config: Config) -> list[str]:
    """xrepo install 使用的参数: [verbosity] [mode] [configs]"""
    verbose = verbosity_flag(request, config)
    return ([verbose] if verbose else []) + query_args(request, config)
