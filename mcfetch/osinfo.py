"""
操作系统信息

清单中的平台名称、natives classifier 名称与原生库后缀。
"""

import sys
from typing import Optional, Tuple

NATIVE_SUFFIXES = {
    "osx": (".dylib", ".jnilib"),
    "linux": (".so",),
    "windows": (".dll",),
}

# 新版清单在 macOS 上使用 natives-macos
CLASSIFIER_ALIASES = {
    "osx": ("natives-osx", "natives-macos"),
    "linux": ("natives-linux",),
    "windows": ("natives-windows",),
}


def current_platform() -> str:
    """返回清单使用的平台名 (osx / linux / windows)"""
    if sys.platform == "darwin":
        return "osx"
    if sys.platform.startswith("win") or sys.platform == "cygwin":
        return "windows"
    return "linux"


def resolve_platform(name: Optional[str] = None) -> str:
    return name or current_platform()


def native_suffixes(platform: str) -> Tuple[str, ...]:
    return NATIVE_SUFFIXES.get(platform, ())


def classifier_keys(platform: str) -> Tuple[str, ...]:
    return CLASSIFIER_ALIASES.get(platform, (f"natives-{platform}",))
