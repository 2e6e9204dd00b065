"""
McFetch 服务层

包含镜像客户端与版本清单解析。
"""

from mcfetch.services.api_client import MirrorClient, parse_url
from mcfetch.services.manifest_resolver import ManifestResolver

__all__ = [
    "MirrorClient",
    "ManifestResolver",
    "parse_url",
]
