"""
McFetch 下载层

包含下载执行与文件校验功能。
"""

from mcfetch.download.manager import DownloadManager, DownloadStats
from mcfetch.download.verifier import FileVerifier

__all__ = [
    "DownloadManager",
    "DownloadStats",
    "FileVerifier",
]
