"""集中配置管理

对应 CMake 侧的 XREPO_PACKAGE_DISABLE / XREPO_PACKAGE_VERBOSE /
XREPO_BOOTSTRAP_XMAKE / XMAKE_CMD 等开关。优先级从低到高:
默认值 < YAML 文件 < 环境变量 < CLI 参数。
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from typing import Any

import yaml

from xrepo_bridge.core.exceptions import ConfigError
from xrepo_bridge.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "xrepo.yml"

_TRUE_VALUES = frozenset(("1", "on", "yes", "true", "y"))
_FALSE_VALUES = frozenset(("0", "off", "no", "false", "n", ""))

# 环境变量 -> 配置字段
_ENV_FIELDS = {
    "XREPO_PACKAGE_DISABLE": "disable",
    "XREPO_PACKAGE_VERBOSE": "verbose",
    "XREPO_BOOTSTRAP_XMAKE": "bootstrap",
    "XMAKE_CMD": "xmake_cmd",
    "CMAKE_BINARY_DIR": "build_dir",
    "CMAKE_BUILD_TYPE": "build_type",
    "CMAKE_VERSION": "cmake_version",
}


def parse_bool(value: Any, *, name: str = "") -> bool:
    """按 CMake option() 的习惯解析布尔值 (ON/OFF, 1/0, yes/no)"""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(f"无法解析布尔配置 {name or '?'}={value!r}")


@dataclass
class Config:
    """全局配置"""

    # 开关
    disable: bool = False
    verbose: bool = False
    bootstrap: bool = False

    # xmake 可执行文件路径，空表示自动查找
    xmake_cmd: str = ""
    # 构建输出目录，自动安装的 xmake 放在 <build_dir>/xmake
    build_dir: str = "build"
    # 未显式指定 MODE 时据此推断 debug / release
    build_type: str = ""
    # 调用方构建工具版本，低于 3.19 时不使用 --json
    cmake_version: str = ""
    # 自动安装时固定的 xmake 版本
    xmake_version: str = "v2.6.2"

    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = DEFAULT_CONFIG_FILE) -> Config:
        """从 YAML 文件加载配置，文件不存在则返回默认值"""
        try:
            data = load_yaml(path)
        except (ValueError, yaml.YAMLError, OSError) as e:
            raise ConfigError(f"配置文件无效: {path}: {e}") from e
        if not data:
            return cls()
        known = {f.name for f in fields(cls)} - {"extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        cfg = cls().override(**matched)
        cfg.extra = extra
        return cfg

    def override(self, **values: Any) -> Config:
        """返回覆盖了非 None 字段的新配置，布尔字段按 CMake 习惯解析"""
        updates: dict[str, Any] = {}
        for name, value in values.items():
            if value is None:
                continue
            if name in ("disable", "verbose", "bootstrap"):
                updates[name] = parse_bool(value, name=name)
            else:
                updates[name] = str(value)
        return replace(self, **updates)

    def apply_env(self, environ: dict[str, str] | None = None) -> Config:
        """用环境变量覆盖配置"""
        env = os.environ if environ is None else environ
        values = {
            attr: env[var] for var, attr in _ENV_FIELDS.items() if var in env
        }
        return self.override(**values)


# 全局单例，由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(
    path: str = DEFAULT_CONFIG_FILE, **overrides: Any,
) -> Config:
    """文件 -> 环境变量 -> 显式参数，依次叠加后设为全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path).apply_env().override(**overrides)
    logger.debug("配置已加载: %s", path)
    return _current
