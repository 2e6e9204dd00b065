"""
McFetch 数据模型包

包含配置模型、清单模型和进度模型定义。
"""

from mcfetch.models.config import (
    DEFAULT_MIRROR,
    DirectoryMode,
    DirectoryConfig,
    MirrorConfig,
    DownloadConfig,
    McFetchConfig,
    resolve_base_path,
)
from mcfetch.models.manifest import (
    Artifact,
    Rule,
    Library,
    AssetIndexInfo,
    VersionManifest,
    VersionEntry,
    VersionManifestList,
    AssetObject,
    AssetIndex,
)
from mcfetch.models.progress import InstallStage, InstallProgress, ProgressObserver

__all__ = [
    # 配置模型
    "DEFAULT_MIRROR",
    "DirectoryMode",
    "DirectoryConfig",
    "MirrorConfig",
    "DownloadConfig",
    "McFetchConfig",
    "resolve_base_path",
    # 清单模型
    "Artifact",
    "Rule",
    "Library",
    "AssetIndexInfo",
    "VersionManifest",
    "VersionEntry",
    "VersionManifestList",
    "AssetObject",
    "AssetIndex",
    # 进度模型
    "InstallStage",
    "InstallProgress",
    "ProgressObserver",
]
