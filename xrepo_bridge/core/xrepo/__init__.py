"""xrepo 外部命令封装

- locator.py / bootstrap.py: 定位或自动安装 xmake
- probe.py: 探测 xrepo fetch --json 支持
- installer.py: xrepo install
- fetcher.py: xrepo fetch 输出解析
- context.py: 以上结果的运行期缓存
"""

from xrepo_bridge.core.xrepo.context import XrepoContext
from xrepo_bridge.core.xrepo.fetcher import (
    fetch_json,
    fetch_text,
    parse_cflags_output,
    parse_json_output,
)
from xrepo_bridge.core.xrepo.installer import install
from xrepo_bridge.core.xrepo.locator import ExecutableLocator
from xrepo_bridge.core.xrepo.probe import supports_json_output

__all__ = [
    "ExecutableLocator",
    "XrepoContext",
    "fetch_json",
    "fetch_text",
    "install",
    "parse_cflags_output",
    "parse_json_output",
    "supports_json_output",
]
