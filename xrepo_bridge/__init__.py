"""xrepo_bridge - 构建系统与 xrepo 包管理器的集成桥接"""

__version__ = "0.1.0"
