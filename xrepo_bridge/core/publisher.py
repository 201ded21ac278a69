"""变量发布

publish() 只返回数据；写入调用方作用域、注册目录级搜索路径都要显式调用
PublishedVariables.apply()，副作用在调用处可见。

发布的变量:
  <P>_INCLUDE_DIR   头文件目录列表
  <P>_LINK_DIR      库目录列表（非空时）
  <module>_DIR      每个发现的 CMake 配置模块目录，键是模块自己的名字
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Union

from xrepo_bridge.core.models import FetchResult
from xrepo_bridge.utils.yaml_io import dump_yaml

logger = logging.getLogger(__name__)

VariableValue = Union[str, list[str]]


@dataclass
class BuildScope:
    """调用方作用域：变量表 + 目录级 include / link 搜索路径

    child() 创建的子作用域在创建时继承父作用域的全部内容，之后互不影响，
    与 add_subdirectory 的语义一致。
    """

    variables: dict[str, VariableValue] = field(default_factory=dict)
    include_directories: list[str] = field(default_factory=list)
    link_directories: list[str] = field(default_factory=list)

    def set(self, name: str, value: VariableValue) -> None:
        self.variables[name] = list(value) if isinstance(value, list) else value

    def get(self, name: str, default: Any = None) -> Any:
        return self.variables.get(name, default)

    def add_include_directories(self, dirs: list[str]) -> None:
        self.include_directories.extend(
            d for d in dirs if d not in self.include_directories
        )

    def add_link_directories(self, dirs: list[str]) -> None:
        self.link_directories.extend(
            d for d in dirs if d not in self.link_directories
        )

    def child(self) -> BuildScope:
        return BuildScope(
            variables={
                k: list(v) if isinstance(v, list) else v
                for k, v in self.variables.items()
            },
            include_directories=list(self.include_directories),
            link_directories=list(self.link_directories),
        )


def _cmake_quote(value: str) -> str:
    # CMake 引号参数里 \ 是转义符，路径统一用 /
    value = value.replace("\\", "/")
    return '"' + value.replace('"', '\\"').replace("$", "\\$") + '"'


def _cmake_value(value: VariableValue) -> str:
    if isinstance(value, list):
        return _cmake_quote(";".join(value))
    return _cmake_quote(value)


@dataclass
class PublishedVariables:
    """一个包发布给调用方的全部结果"""

    package_name: str
    variables: dict[str, VariableValue] = field(default_factory=dict)
    directory_scope: bool = False
    include_dirs: list[str] = field(default_factory=list)
    link_dirs: list[str] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.variables

    def apply(self, scope: BuildScope) -> BuildScope:
        """写入变量；directory_scope 时同时注册目录级搜索路径"""
        for name, value in self.variables.items():
            scope.set(name, value)
        if self.directory_scope:
            logger.info(
                "xrepo: directory scope include_directories(%s)",
                ";".join(self.include_dirs),
            )
            scope.add_include_directories(self.include_dirs)
            if self.link_dirs:
                logger.info(
                    "xrepo: directory scope link_directories(%s)",
                    ";".join(self.link_dirs),
                )
                scope.add_link_directories(self.link_dirs)
        return scope

    def to_dict(self) -> dict[str, Any]:
        return {
            "package": self.package_name,
            "variables": dict(self.variables),
            "directory_scope": self.directory_scope,
        }

    def to_cmake(self) -> str:
        lines = [f"# xrepo package: {self.package_name}"]
        for name, value in self.variables.items():
            lines.append(f"set({name} {_cmake_value(value)})")
        if self.directory_scope:
            if self.include_dirs:
                dirs = " ".join(_cmake_quote(d) for d in self.include_dirs)
                lines.append(f"include_directories({dirs})")
            if self.link_dirs:
                dirs = " ".join(_cmake_quote(d) for d in self.link_dirs)
                lines.append(f"link_directories({dirs})")
        return "\n".join(lines) + "\n"


def publish(
    package_name: str, result: FetchResult, directory_scope: bool = False,
) -> PublishedVariables:
    published = PublishedVariables(
        package_name=package_name,
        directory_scope=directory_scope,
        include_dirs=list(result.include_dirs),
        link_dirs=list(result.link_dirs),
    )
    variables = published.variables

    if result.include_dirs:
        variables[f"{package_name}_INCLUDE_DIR"] = list(result.include_dirs)
        logger.info(
            "xrepo: %s_INCLUDE_DIR %s", package_name, ";".join(result.include_dirs),
        )
    else:
        logger.info("xrepo fetch: %s includedirs not found", package_name)

    if result.link_dirs:
        variables[f"{package_name}_LINK_DIR"] = list(result.link_dirs)
        logger.info(
            "xrepo: %s_LINK_DIR %s", package_name, ";".join(result.link_dirs),
        )
    else:
        logger.info("xrepo fetch: %s linkdirs not found", package_name)

    for module, path in result.config_dirs.items():
        variables[f"{module}_DIR"] = path
        logger.info("xrepo: %s_DIR %s", module, path)

    return published


# =========================================================================
# 多个包的汇总输出
# =========================================================================

OUTPUT_FORMATS = ("cmake", "json", "yaml")


def render(results: list[PublishedVariables], fmt: str = "cmake") -> str:
    """把一组发布结果渲染为 CMake 脚本 / JSON / YAML 文本"""
    if fmt == "cmake":
        return "\n".join(r.to_cmake() for r in results if not r.empty)
    payload = {"packages": [r.to_dict() for r in results if not r.empty]}
    if fmt == "json":
        return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
    if fmt == "yaml":
        return dump_yaml(payload)
    raise ValueError(f"不支持的输出格式: {fmt}")
