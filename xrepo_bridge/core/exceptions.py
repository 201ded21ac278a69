"""统一异常体系

所有失败都继承 XrepoError，并且都是致命的：调用方不做重试、不做局部恢复，
CLI 层统一输出诊断信息后以非零状态退出，避免半装好的依赖污染构建。
"""

from __future__ import annotations


class XrepoError(Exception):
    """框架基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class StepError(XrepoError):
    """某个外部步骤失败，可携带子进程退出码"""

    code = "STEP_ERROR"

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class ConfigError(XrepoError):
    """配置文件或包清单缺失、内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(XrepoError):
    """输入参数校验失败（如非法 MODE）"""

    code = "VALIDATION_ERROR"


class ExecutionError(StepError):
    """通用 shell 命令执行失败"""

    code = "EXECUTION_ERROR"


class LocatorError(XrepoError):
    """找不到 xmake 可执行文件且未开启自动安装"""

    code = "LOCATOR_ERROR"


class BootstrapError(StepError):
    """xmake 自动安装的下载/解压/编译/安装某一步失败"""

    code = "BOOTSTRAP_ERROR"


class ProbeError(StepError):
    """xrepo fetch --help 执行失败"""

    code = "PROBE_ERROR"


class InstallError(StepError):
    """xrepo install 返回非零"""

    code = "INSTALL_ERROR"


class QueryError(StepError):
    """xrepo fetch 查询返回非零"""

    code = "QUERY_ERROR"


class ParseError(XrepoError):
    """xrepo fetch 输出无法解析"""

    code = "PARSE_ERROR"
