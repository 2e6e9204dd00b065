"""
主协调器

依次执行清单解析、库文件下载、Native 库解压和资源下载，并维护进度状态。
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from mcfetch.download import DownloadManager
from mcfetch.exceptions import ConfigError, McFetchError
from mcfetch.models import (
    InstallProgress,
    InstallStage,
    McFetchConfig,
    ProgressObserver,
    VersionManifest,
)
from mcfetch.services import ManifestResolver, MirrorClient
from mcfetch.stages import AssetStage, LibraryStage, NativeStage
from mcfetch.utils import ensure_dir


class InstallOrchestrator:
    """McFetch 安装协调器"""

    def __init__(
        self,
        config: McFetchConfig,
        client: Optional[MirrorClient] = None,
        observer: Optional[ProgressObserver] = None,
        base_path: Optional[Path] = None,
    ):
        self.config = config
        self.client = client or MirrorClient(config.mirror, config.download)
        self._owned_client = client is None
        self.observer = observer
        self.progress = InstallProgress()
        self._base_path = base_path
        self.resolver = ManifestResolver(self.client)
        self.download_manager: Optional[DownloadManager] = None
        self.manifest: Optional[VersionManifest] = None

    @property
    def base_path(self) -> Path:
        if self._base_path is None:
            self._base_path = self.config.base_path
        return self._base_path

    def _notify(self):
        if self.observer:
            self.observer(self.progress.snapshot())

    def _enter(self, stage: InstallStage):
        self.progress.stage = stage
        self.progress.clear_flags()
        if stage == InstallStage.DOWNLOADING_LIBRARIES:
            self.progress.downloading_libraries = True
        elif stage == InstallStage.EXTRACTING_NATIVES:
            self.progress.extracting_natives = True
        elif stage == InstallStage.DOWNLOADING_ASSETS:
            self.progress.downloading_assets = True
        logger.debug(f"[阶段] {stage.value}")
        self._notify()

    def _on_library_done(self):
        self.progress.library_completed += 1
        self._notify()

    def _on_asset_total(self, total: int):
        self.progress.asset_total = total
        self._notify()

    def _on_asset_done(self):
        self.progress.asset_completed += 1
        self._notify()

    def _fail(self, error: McFetchError):
        self.progress.error = error
        self.progress.stage = InstallStage.FAILED
        self.progress.clear_flags()
        self._notify()

    async def run(self, version: Optional[str] = None) -> InstallProgress:
        """运行完整的安装流程"""
        version = version or self.config.version
        self.progress = InstallProgress()

        try:
            if not version:
                raise ConfigError("请指定 Minecraft 版本")
            logger.info(f"开始安装 Minecraft {version} 到 {self.base_path}")
            ensure_dir(self.base_path)

            self.download_manager = DownloadManager(
                self.client.session,
                max_retries=self.config.download.max_retries,
                retry_delay=self.config.download.retry_delay,
            )

            # 第一阶段：解析版本清单
            self._enter(InstallStage.RESOLVING_MANIFEST)
            self.manifest, total = await self.resolver.resolve(version)
            self.progress.library_total = total

            # 第二阶段：下载库文件
            self._enter(InstallStage.DOWNLOADING_LIBRARIES)
            await LibraryStage(
                self.base_path,
                self.client,
                self.download_manager,
                platform=self.config.platform,
                on_progress=self._on_library_done,
            ).run(self.manifest)

            # 第三阶段：解压 Native 库
            self._enter(InstallStage.EXTRACTING_NATIVES)
            await NativeStage(self.base_path, platform=self.config.platform).run(
                version, self.manifest
            )

            # 第四阶段：下载资源
            self._enter(InstallStage.DOWNLOADING_ASSETS)
            await AssetStage(
                self.base_path,
                self.client,
                self.download_manager,
                batch_size=self.config.download.asset_batch_size,
                on_progress=self._on_asset_done,
            ).run(version, self.manifest, on_total=self._on_asset_total)

            self._enter(InstallStage.DONE)
            stats = self.download_manager.get_stats()
            logger.success(
                f"安装完成: {stats.downloaded} 下载, {stats.skipped} 跳过, "
                f"{stats.retried} 重试"
            )
            return self.progress

        except McFetchError as e:
            logger.error(f"任务执行失败: {e}")
            self._fail(e)
            raise
        except Exception as e:
            logger.exception(f"任务执行失败: {e}")
            error = McFetchError(str(e), context={"type": type(e).__name__})
            self._fail(error)
            raise error from e
        finally:
            if self._owned_client:
                await self.client.close()

    def get_stats(self) -> dict:
        """获取统计信息"""
        stats = self.download_manager.get_stats() if self.download_manager else None
        return {
            "progress": self.progress.to_dict(),
            "downloaded": stats.downloaded if stats else 0,
            "skipped": stats.skipped if stats else 0,
            "failed": self.download_manager.get_failed() if self.download_manager else [],
        }
