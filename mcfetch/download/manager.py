"""
下载管理器

单个文件的下载执行：本地校验跳过、失败重试、临时文件写入与原子替换。
"""

import asyncio
import os
import uuid
from dataclasses import dataclass
from typing import Optional

import aiofiles
import aiohttp
from loguru import logger

from mcfetch.download.verifier import FileVerifier
from mcfetch.exceptions import (
    DigestMismatchError,
    DownloadError,
    DownloadNetworkError,
    FileSizeMismatchError,
    InvalidResponseError,
)
from mcfetch.utils import ensure_dir

RETRYABLE_ERRORS = (
    aiohttp.ClientError,
    asyncio.TimeoutError,
    InvalidResponseError,
    FileSizeMismatchError,
    DigestMismatchError,
)


@dataclass
class DownloadStats:
    """下载统计"""

    downloaded: int = 0
    skipped: int = 0
    failed: int = 0
    retried: int = 0
    bytes_downloaded: int = 0


class DownloadManager:
    """下载管理器"""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        max_retries: int = 3,
        retry_delay: float = 1.0,
    ):
        self.session = session
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.verifier = FileVerifier()
        self.stats = DownloadStats()
        self._failed_downloads: list[str] = []

    async def download_file(
        self,
        url: str,
        file_path: str,
        expected_size: Optional[int] = None,
        expected_sha1: Optional[str] = None,
        label: Optional[str] = None,
    ) -> bool:
        """
        下载单个文件

        Args:
            url: 下载地址
            file_path: 目标路径
            expected_size: 预期大小
            expected_sha1: 预期 SHA1
            label: 日志和错误上下文中使用的名称，默认为文件名

        Returns:
            True 表示实际发生了下载，False 表示本地文件有效而跳过
        """
        label = label or os.path.basename(file_path)

        if await self.verifier.is_valid(file_path, expected_size, expected_sha1):
            self.stats.skipped += 1
            logger.debug(f"[跳过] '{label}' 已存在且校验通过")
            return False

        ensure_dir(os.path.dirname(file_path) or ".")
        logger.debug(f"[开始] 下载: {label}")

        last_error: Optional[BaseException] = None
        for attempt in range(1, self.max_retries + 1):
            try:
                await self._fetch_once(url, file_path, expected_size, expected_sha1)
                self.stats.downloaded += 1
                logger.debug(f"[完成] '{label}' 下载完成")
                return True
            except RETRYABLE_ERRORS as e:
                last_error = e
                if attempt < self.max_retries:
                    delay = self.retry_delay * attempt
                    self.stats.retried += 1
                    logger.warning(
                        f"[重试] 下载 '{label}' 失败 (第 {attempt} 次): {e}. "
                        f"{delay:.1f}s 后重试..."
                    )
                    await asyncio.sleep(delay)

        self.stats.failed += 1
        self._failed_downloads.append(label)
        logger.error(f"[错误] 下载 '{label}' 最终失败: {last_error}")

        if isinstance(last_error, (DownloadError, InvalidResponseError)):
            last_error.context["path"] = label
            last_error.context.setdefault("url", url)
            raise last_error
        raise DownloadNetworkError(
            f"下载失败: {label}",
            context={"path": label, "url": url, "error": str(last_error)},
        ) from last_error

    async def _fetch_once(
        self,
        url: str,
        file_path: str,
        expected_size: Optional[int],
        expected_sha1: Optional[str],
    ):
        """下载到临时文件，校验通过后替换到目标路径"""
        tmp_path = f"{file_path}.{uuid.uuid4().hex[:8]}.part"
        try:
            async with self.session.get(url) as response:
                if response.status != 200:
                    raise InvalidResponseError(
                        f"HTTP {response.status}",
                        status=response.status,
                        context={"url": url},
                    )

                async with aiofiles.open(tmp_path, "wb") as f:
                    async for chunk in response.content.iter_chunked(65536):
                        await f.write(chunk)
                        self.stats.bytes_downloaded += len(chunk)

            await self.verifier.verify(tmp_path, expected_size, expected_sha1)
            os.replace(tmp_path, file_path)
        finally:
            # 失败或被取消时清理临时文件
            if os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError:
                    logger.debug(f"[清理] 无法删除临时文件: {tmp_path}")

    def get_stats(self) -> DownloadStats:
        """获取下载统计"""
        return self.stats

    def get_failed(self) -> list[str]:
        """获取失败的下载列表"""
        return self._failed_downloads.copy()
