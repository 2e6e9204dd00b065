"""
配置数据模型

定义安装目录、镜像、下载参数等配置，以及安装目录的解析规则。
"""

import os
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from mcfetch.exceptions import ConfigValidationError, InvalidDirectoryError


DEFAULT_MIRROR = "https://bmclapi2.bangbang93.com"


class DirectoryMode(Enum):
    """安装目录模式"""

    DOCUMENTS = "documents"
    APP_LOCAL = "app_local"
    APP_PARENT = "app_parent"
    CUSTOM = "custom"


def default_app_dir() -> Path:
    """当前程序所在目录"""
    return Path(sys.argv[0] or ".").resolve().parent


def resolve_base_path(
    mode: DirectoryMode,
    custom_path: Optional[str] = None,
    home: Optional[Path] = None,
    app_dir: Optional[Path] = None,
) -> Path:
    """
    根据目录模式解析安装根目录

    Args:
        mode: 目录模式
        custom_path: 自定义路径（仅 CUSTOM 模式使用）
        home: 用户主目录，默认 Path.home()
        app_dir: 程序所在目录，默认 default_app_dir()

    Returns:
        绝对路径
    """
    if mode == DirectoryMode.DOCUMENTS:
        home = home if home is not None else Path.home()
        return Path(home) / "Documents" / ".minecraft"

    if mode == DirectoryMode.APP_LOCAL:
        app_dir = app_dir if app_dir is not None else default_app_dir()
        return Path(app_dir) / "minecraft"

    if mode == DirectoryMode.APP_PARENT:
        app_dir = app_dir if app_dir is not None else default_app_dir()
        return Path(app_dir).parent / ".minecraft"

    if mode == DirectoryMode.CUSTOM:
        if not custom_path or not custom_path.strip():
            raise InvalidDirectoryError("自定义目录为空")
        path = Path(os.path.expanduser(custom_path.strip()))
        if not path.is_absolute():
            raise InvalidDirectoryError(
                f"自定义目录必须是绝对路径: {custom_path}",
                context={"path": custom_path},
            )
        return path

    raise InvalidDirectoryError(f"未知的目录模式: {mode}")


@dataclass
class DirectoryConfig:
    """安装目录配置"""

    mode: DirectoryMode = DirectoryMode.DOCUMENTS
    custom_path: Optional[str] = None

    @property
    def base_path(self) -> Path:
        return resolve_base_path(self.mode, self.custom_path)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DirectoryConfig":
        mode = data.get("mode", DirectoryMode.DOCUMENTS.value)
        try:
            mode = DirectoryMode(mode)
        except ValueError:
            raise ConfigValidationError(
                f"directory.mode 必须为 {'/'.join(m.value for m in DirectoryMode)}",
                context={"mode": mode},
            )
        return cls(mode=mode, custom_path=data.get("custom_path"))


@dataclass
class MirrorConfig:
    """镜像配置"""

    base_url: str = DEFAULT_MIRROR
    version_list_path: str = "/mc/game/version_manifest_v2.json"
    maven_prefix: str = "/maven"
    assets_prefix: str = "/assets"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MirrorConfig":
        defaults = cls()
        return cls(
            base_url=str(data.get("base_url", defaults.base_url)).rstrip("/"),
            version_list_path=data.get(
                "version_list_path", defaults.version_list_path
            ),
            maven_prefix=data.get("maven_prefix", defaults.maven_prefix),
            assets_prefix=data.get("assets_prefix", defaults.assets_prefix),
        )


@dataclass
class DownloadConfig:
    """下载参数"""

    max_retries: int = 3
    retry_delay: float = 1.0
    asset_batch_size: int = 10
    connection_limit: int = 10
    timeout: float = 30.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DownloadConfig":
        defaults = cls()
        cfg = cls(
            max_retries=data.get("max_retries", defaults.max_retries),
            retry_delay=data.get("retry_delay", defaults.retry_delay),
            asset_batch_size=data.get("asset_batch_size", defaults.asset_batch_size),
            connection_limit=data.get("connection_limit", defaults.connection_limit),
            timeout=data.get("timeout", defaults.timeout),
        )
        cfg.validate()
        return cfg

    def validate(self):
        for name in ("max_retries", "asset_batch_size", "connection_limit"):
            value = getattr(self, name)
            if not isinstance(value, int) or value <= 0:
                raise ConfigValidationError(
                    f"download.{name} 必须为正整数", context={name: value}
                )
        if not isinstance(self.retry_delay, (int, float)) or self.retry_delay < 0:
            raise ConfigValidationError(
                "download.retry_delay 不能为负数",
                context={"retry_delay": self.retry_delay},
            )
        if not isinstance(self.timeout, (int, float)) or self.timeout <= 0:
            raise ConfigValidationError(
                "download.timeout 必须大于 0", context={"timeout": self.timeout}
            )


@dataclass
class McFetchConfig:
    """McFetch 总配置"""

    version: Optional[str] = None
    platform: Optional[str] = None
    directory: DirectoryConfig = field(default_factory=DirectoryConfig)
    mirror: MirrorConfig = field(default_factory=MirrorConfig)
    download: DownloadConfig = field(default_factory=DownloadConfig)

    @property
    def base_path(self) -> Path:
        return self.directory.base_path

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "McFetchConfig":
        """从配置字典创建（toml/json/yaml 解析结果）"""
        platform = data.get("platform")
        if platform is not None and platform not in ("osx", "linux", "windows"):
            raise ConfigValidationError(
                "platform 必须为 osx/linux/windows", context={"platform": platform}
            )
        return cls(
            version=data.get("version"),
            platform=platform,
            directory=DirectoryConfig.from_dict(data.get("directory", {})),
            mirror=MirrorConfig.from_dict(data.get("mirror", {})),
            download=DownloadConfig.from_dict(data.get("download", {})),
        )
