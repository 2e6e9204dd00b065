"""
McFetch 安装阶段

库文件下载、Native 库解压、资源文件下载。
"""

from mcfetch.stages.natives import NativeStage
from mcfetch.stages.libraries import LibraryStage
from mcfetch.stages.assets import AssetStage

__all__ = [
    "LibraryStage",
    "NativeStage",
    "AssetStage",
]
