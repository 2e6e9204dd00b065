"""
McFetch 统一异常体系

提供分层的异常结构，支持错误代码、上下文信息和 JSON 序列化。
"""

from typing import Any, Dict, Optional


class McFetchError(Exception):
    """McFetch 基础异常类"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self._get_default_code()
        self.context = context or {}

    def _get_default_code(self) -> str:
        """获取默认错误代码"""
        return "E000"

    @property
    def kind(self) -> str:
        """错误类型名称"""
        return self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        """将异常转换为字典格式"""
        return {
            "error": True,
            "code": self.code,
            "message": self.message,
            "context": self.context,
            "type": self.kind,
        }

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class ConfigError(McFetchError):
    """配置相关错误"""

    def _get_default_code(self) -> str:
        return "E100"


class InvalidDirectoryError(ConfigError):
    """无法解析安装目录"""

    def _get_default_code(self) -> str:
        return "E101"


class DirectoryCreationError(ConfigError):
    """目录创建失败"""

    def _get_default_code(self) -> str:
        return "E102"


class ConfigValidationError(ConfigError):
    """配置验证错误"""

    def _get_default_code(self) -> str:
        return "E103"


class APIError(McFetchError):
    """镜像 API 相关错误"""

    def _get_default_code(self) -> str:
        return "E200"


class VersionNotFoundError(APIError):
    """版本列表中不存在该版本"""

    def _get_default_code(self) -> str:
        return "E201"


class InvalidURLError(APIError):
    """URL 无法解析或无法改写为镜像地址"""

    def _get_default_code(self) -> str:
        return "E202"


class InvalidResponseError(APIError):
    """HTTP 状态码非 200"""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, code, context)
        self.status = status
        if status is not None:
            self.context["status_code"] = status

    def _get_default_code(self) -> str:
        return "E203"


class InvalidManifestError(APIError):
    """清单 JSON 无法解析"""

    def _get_default_code(self) -> str:
        return "E204"


class DownloadError(McFetchError):
    """下载相关错误"""

    def _get_default_code(self) -> str:
        return "E300"


class DownloadNetworkError(DownloadError):
    """下载网络错误"""

    def _get_default_code(self) -> str:
        return "E301"


class FileSizeMismatchError(DownloadError):
    """文件大小与清单声明不符"""

    def _get_default_code(self) -> str:
        return "E302"


class DigestMismatchError(DownloadError):
    """SHA1 校验失败"""

    def _get_default_code(self) -> str:
        return "E303"


class NativesError(McFetchError):
    """Native 库处理错误"""

    def _get_default_code(self) -> str:
        return "E400"


class MissingArtifactError(NativesError):
    """库既没有平台 classifier 也没有通用 artifact"""

    def _get_default_code(self) -> str:
        return "E401"


class InvalidArchiveError(NativesError):
    """压缩包不可读或已损坏"""

    def _get_default_code(self) -> str:
        return "E402"


class ExtractionError(NativesError):
    """解压单个条目失败"""

    def _get_default_code(self) -> str:
        return "E403"


__all__ = [
    # 基础异常
    "McFetchError",
    # 配置异常
    "ConfigError",
    "InvalidDirectoryError",
    "DirectoryCreationError",
    "ConfigValidationError",
    # API 异常
    "APIError",
    "VersionNotFoundError",
    "InvalidURLError",
    "InvalidResponseError",
    "InvalidManifestError",
    # 下载异常
    "DownloadError",
    "DownloadNetworkError",
    "FileSizeMismatchError",
    "DigestMismatchError",
    # Native 异常
    "NativesError",
    "MissingArtifactError",
    "InvalidArchiveError",
    "ExtractionError",
]
