"""数据模型

- PackageRequest: 一次 xrepo_package 调用的参数（不可变）
- FetchResult: xrepo fetch 解析出的目录信息
- Verbosity: install 输出级别
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from xrepo_bridge.core.exceptions import ValidationError

VALID_MODES = ("debug", "release")


class Verbosity(str, Enum):
    """xrepo install 的输出级别"""

    NORMAL = "normal"
    VERBOSE = "verbose"
    DIAGNOSIS = "diagnosis"
    QUIET = "quiet"

    @classmethod
    def parse(cls, value: str | Verbosity | None) -> Verbosity:
        """大小写不敏感解析，None / 空串视为 NORMAL"""
        if isinstance(value, Verbosity):
            return value
        if not value:
            return cls.NORMAL
        try:
            return cls(str(value).lower())
        except ValueError:
            valid = ", ".join(v.value for v in cls)
            raise ValidationError(
                f"xrepo_package invalid OUTPUT: {value}, valid values: {valid}"
            ) from None


def _config_value(value: Any) -> str:
    # YAML 里的 true/false 会被解析成 bool，xrepo 只认小写
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class PackageRequest:
    """一次包请求

    spec 为 xrepo 识别的 "名称 版本" 字符串，例如 "zlib 1.2.11"。
    mode 为 None 时由配置里的 build_type 推断。
    """

    spec: str
    configs: str = ""
    mode: str | None = None
    output: Verbosity = Verbosity.NORMAL
    directory_scope: bool = False

    def __post_init__(self) -> None:
        if not self.spec or not self.spec.strip():
            raise ValidationError("package spec 不能为空")

    @classmethod
    def create(
        cls,
        spec: str,
        *,
        configs: Mapping[str, Any] | str | None = None,
        mode: str | None = None,
        output: str | Verbosity | None = None,
        directory_scope: bool = False,
    ) -> PackageRequest:
        """从宽松参数构造请求

        configs 为字符串时原样保留: xrepo 把它当作 Lua table 的内容解析，
        引号或花括号里的逗号都是合法的，例如 "cxflags='-DA,-DB'"。
        configs 为映射时按 k=v 以逗号拼接。
        """
        if isinstance(configs, str):
            configs_text = configs.strip()
        else:
            configs_text = ",".join(
                f"{k}={_config_value(v)}" for k, v in (configs or {}).items()
            )
        return cls(
            spec=spec.strip(),
            configs=configs_text,
            mode=mode or None,
            output=Verbosity.parse(output),
            directory_scope=directory_scope,
        )

    @property
    def name(self) -> str:
        """包名，即 spec 的第一个空白分隔片段"""
        return self.spec.split()[0]

    def configs_arg(self) -> str:
        return self.configs


@dataclass
class FetchResult:
    """xrepo fetch 的解析结果

    include_dirs / link_dirs 是所有数组元素（包本身及其依赖）的扁平合并，
    不区分来源包。config_dirs 的键是模块目录自己的名字，不一定等于请求的包名。
    """

    include_dirs: list[str] = field(default_factory=list)
    link_dirs: list[str] = field(default_factory=list)
    config_dirs: dict[str, str] = field(default_factory=dict)
