"""
镜像客户端

持有整个安装过程共享的 aiohttp session，负责 JSON 请求与镜像 URL 改写。
"""

import asyncio
import json
from typing import Any, Optional

import aiohttp
from loguru import logger
from yarl import URL

from mcfetch.models import MirrorConfig, DownloadConfig
from mcfetch.exceptions import (
    APIError,
    InvalidManifestError,
    InvalidResponseError,
    InvalidURLError,
)


def parse_url(raw: str) -> URL:
    """解析绝对 URL，失败时抛出 InvalidURLError"""
    try:
        url = URL(raw)
    except (TypeError, ValueError) as e:
        raise InvalidURLError(f"无效的 URL: {raw}", context={"url": raw}) from e
    if not url.host or url.scheme not in ("http", "https"):
        raise InvalidURLError(f"无效的 URL: {raw}", context={"url": raw})
    return url


class MirrorClient:
    """镜像站客户端"""

    def __init__(
        self,
        mirror: Optional[MirrorConfig] = None,
        download: Optional[DownloadConfig] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.mirror = mirror or MirrorConfig()
        self.download = download or DownloadConfig()
        self.base_url = parse_url(self.mirror.base_url)
        self._session = session
        self._owned_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit_per_host=self.download.connection_limit
            )
            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(
                    total=None,
                    sock_connect=self.download.timeout,
                    sock_read=self.download.timeout,
                ),
            )
            self._owned_session = True
        return self._session

    def _with_mirror_path(self, path: str) -> str:
        base_path = self.base_url.path.rstrip("/")
        return str(self.base_url.with_path(f"{base_path}{path}"))

    def rewrite_authority(self, raw: str) -> str:
        """将 URL 的主机替换为镜像主机，路径不变"""
        return self._with_mirror_path(parse_url(raw).path)

    def rewrite_maven(self, raw: str) -> str:
        """将库文件 URL 改写为镜像的 maven 路径"""
        return self._with_mirror_path(f"{self.mirror.maven_prefix}{parse_url(raw).path}")

    def asset_url(self, digest: str) -> str:
        """资源对象的镜像 URL"""
        return self._with_mirror_path(
            f"{self.mirror.assets_prefix}/{digest[:2]}/{digest}"
        )

    @property
    def version_list_url(self) -> str:
        return self._with_mirror_path(self.mirror.version_list_path)

    async def get_json(self, url: str) -> Any:
        """发送 GET 请求并解析 JSON"""
        logger.debug(f"[请求] {url}")
        try:
            async with self.session.get(url) as response:
                if response.status != 200:
                    raise InvalidResponseError(
                        f"请求失败 (状态码: {response.status})",
                        status=response.status,
                        context={"url": url},
                    )
                body = await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise APIError(
                f"请求失败: {e}", context={"url": url, "error": str(e)}
            ) from e

        try:
            return json.loads(body)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise InvalidManifestError(
                f"JSON 解析失败: {url}", context={"url": url, "error": str(e)}
            ) from e

    async def close(self):
        """关闭客户端"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()
