"""
进度数据模型

安装流程的阶段状态与计数器，供外部观察者读取。
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Optional

from mcfetch.exceptions import McFetchError


class InstallStage(Enum):
    """安装阶段"""

    IDLE = "idle"
    RESOLVING_MANIFEST = "resolving_manifest"
    DOWNLOADING_LIBRARIES = "downloading_libraries"
    EXTRACTING_NATIVES = "extracting_natives"
    DOWNLOADING_ASSETS = "downloading_assets"
    DONE = "done"
    FAILED = "failed"


@dataclass
class InstallProgress:
    """安装进度"""

    stage: InstallStage = InstallStage.IDLE
    downloading_libraries: bool = False
    extracting_natives: bool = False
    downloading_assets: bool = False
    library_completed: int = 0
    library_total: int = 0
    asset_completed: int = 0
    asset_total: int = 0
    error: Optional[McFetchError] = None

    @property
    def finished(self) -> bool:
        return self.stage in (InstallStage.DONE, InstallStage.FAILED)

    def snapshot(self) -> "InstallProgress":
        """返回当前状态的副本"""
        return replace(self)

    def clear_flags(self):
        self.downloading_libraries = False
        self.extracting_natives = False
        self.downloading_assets = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stage": self.stage.value,
            "downloading_libraries": self.downloading_libraries,
            "extracting_natives": self.extracting_natives,
            "downloading_assets": self.downloading_assets,
            "library_completed": self.library_completed,
            "library_total": self.library_total,
            "asset_completed": self.asset_completed,
            "asset_total": self.asset_total,
            "error": self.error.to_dict() if self.error else None,
        }


ProgressObserver = Callable[[InstallProgress], None]
