"""网络工具 - URL 校验与归档下载"""

from __future__ import annotations

import logging
import urllib.error
import urllib.request
from pathlib import Path
from urllib.parse import urlparse

from xrepo_bridge.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

_ALLOWED_SCHEMES = frozenset(("http", "https"))


def validate_url_scheme(url: str, *, context: str = "") -> None:
    """校验 URL 仅使用 http/https，拒绝 file:// 等协议

    Raises:
        ValidationError: URL scheme 不在白名单内
    """
    parsed = urlparse(url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        label = f" ({context})" if context else ""
        raise ValidationError(
            f"不允许的 URL 协议 '{parsed.scheme}'{label}，"
            f"仅支持 http/https: {url}"
        )


def download_file(url: str, dest: Path, *, context: str = "") -> Path:
    """下载 url 到 dest，失败时删除残留文件并抛 ConnectionError

    TLS 证书由 urllib 默认上下文校验。
    """
    validate_url_scheme(url, context=context)
    dest.parent.mkdir(parents=True, exist_ok=True)
    logger.info("下载: %s -> %s", url, dest)
    try:
        urllib.request.urlretrieve(url, str(dest))  # nosec B310
    except (urllib.error.HTTPError, urllib.error.URLError, OSError) as e:
        dest.unlink(missing_ok=True)
        raise ConnectionError(f"下载失败: {url} - {e}") from e
    return dest
