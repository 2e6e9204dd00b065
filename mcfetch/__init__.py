"""
McFetch - Minecraft 游戏文件下载工具

从镜像站下载指定版本的库文件、Native 库和资源文件，并校验完整性。
"""

from mcfetch.orchestrator import InstallOrchestrator
from mcfetch.models import McFetchConfig, InstallProgress, InstallStage

__version__ = "0.1.0"

__all__ = [
    "InstallOrchestrator",
    "McFetchConfig",
    "InstallProgress",
    "InstallStage",
]
