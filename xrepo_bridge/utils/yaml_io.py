"""YAML / 文本文件读写工具

配置文件、包清单读取统一走 load_yaml；发布结果写盘统一走 atomic_write，
避免构建中断时留下半截的 .cmake 文件被下一次 include。
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# 配置与清单都很小，超过 1MB 基本是传错了文件
MAX_YAML_SIZE = 1024 * 1024


def atomic_write(path: str | Path, content: str) -> None:
    """先写同目录临时文件再 os.replace，目标文件要么是旧内容要么是新内容"""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=str(p.parent), suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, str(p))
    except Exception:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


def load_yaml(path: str | Path) -> dict[str, Any]:
    """读取 YAML 映射

    返回:
        dict: 文件不存在或为空时返回空字典

    异常:
        ValueError: 文件过大，或顶层不是映射
        yaml.YAMLError: YAML 语法错误
    """
    p = Path(path)
    if not p.exists():
        return {}

    size = p.stat().st_size
    if size > MAX_YAML_SIZE:
        raise ValueError(f"YAML 文件过大: {p} ({size} 字节)")

    try:
        with open(p, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error("解析 YAML 文件失败: %s, 错误: %s", p, e)
        raise

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(
            f"{p} 顶层应为映射，实际为 {type(data).__name__}"
        )
    return data


def dump_yaml(data: Any) -> str:
    """序列化为块风格 YAML，保持键顺序"""
    return yaml.dump(
        data, default_flow_style=False,
        allow_unicode=True, sort_keys=False,
    )
