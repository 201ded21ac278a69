"""包清单加载

清单格式:

    packages:
      - "zlib 1.2.11"
      - spec: "gflags 2.2.2"
        configs:
          mt: true
          shared: true
        mode: release
        output: quiet
        directory_scope: true

configs 也可以直接写成 "mt=true,shared=true" 字符串。
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from xrepo_bridge.core.exceptions import ConfigError, ValidationError
from xrepo_bridge.core.models import PackageRequest
from xrepo_bridge.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

_ENTRY_KEYS = frozenset(("spec", "configs", "mode", "output", "directory_scope"))


def _request_from_entry(entry: object, index: int) -> PackageRequest:
    if isinstance(entry, str):
        return PackageRequest.create(entry)
    if not isinstance(entry, dict):
        raise ConfigError(f"packages[{index}] 应为字符串或映射")
    unknown = set(entry) - _ENTRY_KEYS
    if unknown:
        raise ConfigError(
            f"packages[{index}] 含未知字段: {', '.join(sorted(unknown))}"
        )
    if not entry.get("spec"):
        raise ConfigError(f"packages[{index}] 缺少 spec")
    return PackageRequest.create(
        str(entry["spec"]),
        configs=entry.get("configs"),
        mode=entry.get("mode"),
        output=entry.get("output"),
        directory_scope=bool(entry.get("directory_scope", False)),
    )


class PackageManifest:
    """从 YAML 清单加载一组 PackageRequest"""

    def __init__(self, manifest_path: str | Path) -> None:
        self.manifest_path = Path(manifest_path)

    def load(self) -> list[PackageRequest]:
        if not self.manifest_path.exists():
            raise ConfigError(f"清单文件不存在: {self.manifest_path}")
        try:
            data = load_yaml(self.manifest_path)
        except (ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"清单文件解析失败: {self.manifest_path}: {e}") from e

        entries = data.get("packages") or []
        if not isinstance(entries, list):
            raise ConfigError(f"{self.manifest_path}: packages 应为列表")

        requests: list[PackageRequest] = []
        for index, entry in enumerate(entries):
            try:
                requests.append(_request_from_entry(entry, index))
            except ValidationError as e:
                raise ConfigError(f"packages[{index}]: {e}") from e
        logger.info("已加载 %d 个包: %s", len(requests), self.manifest_path)
        return requests
