"""
清单解析服务

将版本号解析为具体的版本清单。
"""

from typing import Optional, Tuple

from loguru import logger

from mcfetch.models import VersionManifest, VersionManifestList
from mcfetch.services.api_client import MirrorClient
from mcfetch.exceptions import InvalidManifestError, VersionNotFoundError


class ManifestResolver:
    """版本清单解析器"""

    def __init__(self, client: MirrorClient):
        self.client = client

    async def fetch_version_list(self) -> VersionManifestList:
        """获取远程版本列表"""
        data = await self.client.get_json(self.client.version_list_url)
        try:
            return VersionManifestList.from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise InvalidManifestError(
                f"版本列表格式错误: {e}",
                context={"url": self.client.version_list_url},
            ) from e

    async def latest(
        self, kind: str = "release", versions: Optional[VersionManifestList] = None
    ) -> Optional[str]:
        """获取最新的正式版或快照版本号，可传入已获取的版本列表"""
        if versions is None:
            versions = await self.fetch_version_list()
        if kind == "snapshot":
            return versions.latest_snapshot or None
        return versions.latest_release or None

    async def resolve(self, version: str) -> Tuple[VersionManifest, int]:
        """
        解析版本清单

        Args:
            version: 版本号（区分大小写的精确匹配）

        Returns:
            (版本清单, 库数量)
        """
        versions = await self.fetch_version_list()
        entry = versions.find(version)
        if entry is None:
            raise VersionNotFoundError(
                f"版本不存在: {version}", context={"version": version}
            )

        url = self.client.rewrite_authority(entry.url)
        logger.info(f"[清单] 获取 {version} 的版本清单")
        data = await self.client.get_json(url)
        try:
            manifest = VersionManifest.from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise InvalidManifestError(
                f"版本清单格式错误: {e}", context={"version": version, "url": url}
            ) from e

        if not manifest.id:
            manifest.id = version
        return manifest, len(manifest.libraries)
