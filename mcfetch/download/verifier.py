"""
文件校验器

实现文件大小与 SHA1 校验，校验失败的本地文件会被删除。
"""

import hashlib
import os
from typing import Optional

import aiofiles
from loguru import logger

from mcfetch.exceptions import DigestMismatchError, FileSizeMismatchError

CHUNK_SIZE = 1024 * 1024


class FileVerifier:
    """文件校验器"""

    @staticmethod
    async def calc_sha1(file_path: str) -> Optional[str]:
        """
        计算文件的 SHA1 值（分块读取）

        Args:
            file_path: 文件路径

        Returns:
            SHA1 哈希值或 None（如果文件不存在）
        """
        if not os.path.exists(file_path):
            return None

        sha1 = hashlib.sha1()
        try:
            async with aiofiles.open(file_path, "rb") as f:
                while True:
                    data = await f.read(CHUNK_SIZE)
                    if not data:
                        break
                    sha1.update(data)
            return sha1.hexdigest()
        except (IOError, OSError):
            return None

    @staticmethod
    def get_size(file_path: str) -> int:
        """获取文件大小"""
        try:
            return os.path.getsize(file_path)
        except (IOError, OSError):
            return -1

    @staticmethod
    def _remove(file_path: str):
        try:
            os.remove(file_path)
        except FileNotFoundError:
            pass

    @staticmethod
    async def verify(
        file_path: str,
        expected_size: Optional[int] = None,
        expected_sha1: Optional[str] = None,
    ) -> None:
        """
        校验文件，不通过时抛出异常（不删除文件）

        Raises:
            FileSizeMismatchError: 大小不符
            DigestMismatchError: SHA1 不符
        """
        if expected_size is not None:
            size = FileVerifier.get_size(file_path)
            if size != expected_size:
                raise FileSizeMismatchError(
                    f"文件大小不符: {os.path.basename(file_path)}",
                    context={
                        "file": file_path,
                        "expected": expected_size,
                        "actual": size,
                    },
                )

        if expected_sha1:
            sha1 = await FileVerifier.calc_sha1(file_path)
            if sha1 is None or sha1 != expected_sha1.lower():
                raise DigestMismatchError(
                    f"SHA1 校验失败: {os.path.basename(file_path)}",
                    context={
                        "file": file_path,
                        "expected": expected_sha1,
                        "actual": sha1,
                    },
                )

    @staticmethod
    async def is_valid(
        file_path: str,
        expected_size: Optional[int] = None,
        expected_sha1: Optional[str] = None,
    ) -> bool:
        """
        检查文件是否有效（存在、大小一致且 SHA1 匹配）

        校验不通过的文件会被删除，避免之后被误认为有效。

        Args:
            file_path: 文件路径
            expected_size: 预期大小，None 表示不检查
            expected_sha1: 预期的 SHA1 值，为空表示只检查大小

        Returns:
            是否有效
        """
        if not os.path.isfile(file_path):
            return False

        try:
            await FileVerifier.verify(file_path, expected_size, expected_sha1)
        except (FileSizeMismatchError, DigestMismatchError) as e:
            logger.warning(f"[校验] {e.message}，删除本地文件")
            FileVerifier._remove(file_path)
            return False

        return True
