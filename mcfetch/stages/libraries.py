"""
库文件下载阶段

并发下载版本清单中的全部库文件，地址改写到镜像的 maven 路径。
"""

from pathlib import Path
from typing import Callable, List, Optional

from loguru import logger

from mcfetch.download import DownloadManager
from mcfetch.models import Artifact, Library, VersionManifest
from mcfetch.osinfo import classifier_keys, resolve_platform
from mcfetch.services import MirrorClient
from mcfetch.stages.natives import is_applicable
from mcfetch.utils import gather_fail_fast


class LibraryStage:
    """库文件下载"""

    def __init__(
        self,
        base_path: Path,
        client: MirrorClient,
        downloader: DownloadManager,
        platform: Optional[str] = None,
        on_progress: Optional[Callable[[], None]] = None,
    ):
        self.libraries_dir = Path(base_path) / "libraries"
        self.client = client
        self.downloader = downloader
        self.platform = resolve_platform(platform)
        self._on_progress = on_progress

    def _advance(self):
        if self._on_progress:
            self._on_progress()

    def artifacts_for(self, library: Library) -> List[Artifact]:
        """库需要下载的文件：通用 artifact 加上当前平台的 natives classifier"""
        artifacts = [library.artifact] if library.artifact else []
        if library.classifiers and is_applicable(library, self.platform):
            for key in classifier_keys(self.platform):
                native = library.classifiers.get(key)
                if native is not None:
                    if all(a.path != native.path for a in artifacts):
                        artifacts.append(native)
                    break
        return artifacts

    async def _process_library(self, index: int, artifacts: List[Artifact]):
        for artifact in artifacts:
            url = self.client.rewrite_maven(artifact.url)
            await self.downloader.download_file(
                url,
                str(self.libraries_dir / artifact.path),
                expected_size=artifact.size,
                expected_sha1=artifact.sha1,
                label=artifact.path,
            )
            logger.debug(f"[{index}] 库文件就绪: {Path(artifact.path).name}")
        self._advance()

    async def run(self, manifest: VersionManifest):
        """下载全部库文件，任一失败则取消其余下载"""
        logger.info(f"开始处理 {len(manifest.libraries)} 个库文件...")

        jobs = []
        for index, library in enumerate(manifest.libraries, start=1):
            artifacts = self.artifacts_for(library)
            if not artifacts:
                logger.info(f"跳过无 artifact 的库: {library.name}")
                self._advance()
                continue
            jobs.append(self._process_library(index, artifacts))

        await gather_fail_fast(jobs)
        logger.success(f"库文件下载完成 ({len(jobs)} 个)")
