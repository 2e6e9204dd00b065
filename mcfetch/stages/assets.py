"""
资源下载阶段

下载资源索引，并按哈希寻址分批下载全部资源对象。
"""

import json
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import aiofiles
from loguru import logger

from mcfetch.download import DownloadManager
from mcfetch.exceptions import InvalidManifestError, MissingArtifactError
from mcfetch.models import AssetIndex, VersionManifest
from mcfetch.services import MirrorClient
from mcfetch.utils import chunked, ensure_dir, gather_fail_fast


class AssetStage:
    """资源文件下载"""

    def __init__(
        self,
        base_path: Path,
        client: MirrorClient,
        downloader: DownloadManager,
        batch_size: int = 10,
        on_progress: Optional[Callable[[], None]] = None,
    ):
        self.assets_dir = Path(base_path) / "assets"
        self.indexes_dir = self.assets_dir / "indexes"
        self.objects_dir = self.assets_dir / "objects"
        self.client = client
        self.downloader = downloader
        self.batch_size = batch_size
        self._on_progress = on_progress

    async def fetch_index(self, version: str, manifest: VersionManifest) -> AssetIndex:
        """下载（或复用已缓存的）资源索引并解析"""
        info = manifest.asset_index
        if info is None:
            raise MissingArtifactError(
                f"版本清单缺少 assetIndex: {version}", context={"version": version}
            )

        ensure_dir(self.indexes_dir)
        index_path = self.indexes_dir / f"{version}.json"
        await self.downloader.download_file(
            self.client.rewrite_authority(info.url),
            str(index_path),
            expected_size=info.size,
            expected_sha1=info.sha1,
            label=f"assets/indexes/{version}.json",
        )

        async with aiofiles.open(index_path, "rb") as f:
            raw = await f.read()
        try:
            return AssetIndex.from_dict(json.loads(raw))
        except (UnicodeDecodeError, ValueError, KeyError, TypeError, AttributeError) as e:
            raise InvalidManifestError(
                f"资源索引格式错误: {version}",
                context={"path": str(index_path), "error": str(e)},
            ) from e

    def plan(self, index: AssetIndex) -> List[Tuple[str, Path, int, str]]:
        """
        生成 (下载地址, 存储路径, 大小, 哈希) 列表

        同一哈希只出现一次；哈希长度不足 2 的对象被忽略。
        """
        seen = set()
        jobs = []
        for name, obj in index.objects.items():
            if len(obj.hash) < 2:
                logger.warning(f"[资源] 忽略无效哈希: {name}")
                continue
            if obj.hash in seen:
                continue
            seen.add(obj.hash)
            jobs.append(
                (
                    self.client.asset_url(obj.hash),
                    self.objects_dir / obj.prefix / obj.hash,
                    obj.size,
                    obj.hash,
                )
            )
        return jobs

    async def _download_asset(self, url: str, path: Path, size: int, digest: str):
        await self.downloader.download_file(
            url,
            str(path),
            expected_size=size,
            expected_sha1=digest,
            label=f"assets/objects/{digest[:2]}/{digest}",
        )
        if self._on_progress:
            self._on_progress()

    async def download_all(self, jobs: List[Tuple[str, Path, int, str]]):
        """按批次下载，每批全部完成后再开始下一批"""
        for batch in chunked(jobs, self.batch_size):
            await gather_fail_fast(
                self._download_asset(url, path, size, digest)
                for url, path, size, digest in batch
            )

    async def run(
        self,
        version: str,
        manifest: VersionManifest,
        on_total: Optional[Callable[[int], None]] = None,
    ) -> int:
        """下载资源索引及全部资源对象，返回对象数量"""
        index = await self.fetch_index(version, manifest)
        jobs = self.plan(index)
        if on_total:
            on_total(len(jobs))
        logger.info(f"开始下载 {len(jobs)} 个资源文件 (每批 {self.batch_size} 个)...")
        await self.download_all(jobs)
        logger.success(f"资源文件下载完成 ({len(jobs)} 个)")
        return len(jobs)
