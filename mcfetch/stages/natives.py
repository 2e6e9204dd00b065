"""
Native 库解压阶段

从已下载的库压缩包中解压当前平台的原生库到版本的 natives 目录。
"""

import asyncio
import os
import re
import shutil
import zipfile
import zlib
from pathlib import Path
from typing import List, Optional

from loguru import logger

from mcfetch.exceptions import ExtractionError, InvalidArchiveError, MissingArtifactError
from mcfetch.models import Artifact, Library, VersionManifest
from mcfetch.osinfo import classifier_keys, native_suffixes, resolve_platform
from mcfetch.utils import ensure_dir


def sanitize_entry_path(name: str) -> str:
    """去掉压缩包条目中的 .. 和 . 片段，合并重复分隔符"""
    parts = [p for p in re.split(r"[\\/]+", name) if p not in ("", ".", "..")]
    return "/".join(parts)


def is_applicable(library: Library, platform: str) -> bool:
    """无规则的库适用于所有平台；有规则时至少一条规则需指定当前平台"""
    if not library.rules:
        return True
    return any(
        rule.os_name and rule.os_name.lower() == platform for rule in library.rules
    )


def select_artifact(library: Library, platform: str) -> Artifact:
    """优先使用平台 classifier，其次使用通用 artifact"""
    for key in classifier_keys(platform):
        if key in library.classifiers:
            return library.classifiers[key]
    if library.artifact is None:
        raise MissingArtifactError(
            f"库缺少可解压的文件: {library.name}", context={"library": library.name}
        )
    return library.artifact


class NativeStage:
    """Native 库解压"""

    def __init__(self, base_path: Path, platform: Optional[str] = None):
        self.base_path = Path(base_path)
        self.libraries_dir = self.base_path / "libraries"
        self.platform = resolve_platform(platform)
        self.suffixes = native_suffixes(self.platform)

    def natives_dir(self, version: str) -> Path:
        return self.base_path / "versions" / version / f"{version}-natives"

    def candidates(self, manifest: VersionManifest) -> List[Library]:
        """需要解压的库（声明了 rules 或 classifiers 且适用于当前平台）"""
        return [
            lib
            for lib in manifest.libraries
            if lib.has_native_hints and is_applicable(lib, self.platform)
        ]

    def _target_path(self, entry_name: str, destination: Path) -> Optional[Path]:
        sanitized = sanitize_entry_path(entry_name)
        if not sanitized:
            return None
        root = destination.resolve()
        target = (root / sanitized).resolve()
        if root != target and root not in target.parents:
            return None
        return target

    def extract_archive(self, archive_path: Path, destination: Path) -> List[Path]:
        """解压单个压缩包中的原生库文件，返回写入的路径"""
        extracted = []
        try:
            archive = zipfile.ZipFile(archive_path)
        except (zipfile.BadZipFile, OSError) as e:
            raise InvalidArchiveError(
                f"无效的压缩包: {archive_path.name}",
                context={"archive": str(archive_path), "error": str(e)},
            ) from e

        with archive:
            for info in archive.infolist():
                if info.is_dir() or not info.filename.endswith(self.suffixes):
                    continue

                target = self._target_path(info.filename, destination)
                if target is None:
                    logger.warning(f"[解压] 忽略非法条目: {info.filename}")
                    continue

                ensure_dir(target.parent)
                try:
                    with archive.open(info) as src, open(target, "wb") as dst:
                        shutil.copyfileobj(src, dst)
                except (OSError, zipfile.BadZipFile, RuntimeError, zlib.error) as e:
                    logger.error(
                        f"[解压] 失败: {info.filename} -> {target}: {e}"
                    )
                    raise ExtractionError(
                        f"解压失败: {info.filename}",
                        context={
                            "archive": str(archive_path),
                            "entry": info.filename,
                            "target": str(target),
                            "error": str(e),
                        },
                    ) from e
                logger.debug(f"[解压] 成功: {target.name}")
                extracted.append(target)

        return extracted

    async def run(self, version: str, manifest: VersionManifest) -> List[Path]:
        """依次解压所有适用的库"""
        destination = self.natives_dir(version)
        ensure_dir(destination)

        extracted = []
        for library in self.candidates(manifest):
            artifact = select_artifact(library, self.platform)
            archive_path = self.libraries_dir / artifact.path
            logger.info(f"正在解压 Native 库: {os.path.basename(artifact.path)}")
            extracted.extend(
                await asyncio.to_thread(self.extract_archive, archive_path, destination)
            )

        logger.success(f"Native 库解压完成 ({len(extracted)} 个文件)")
        return extracted
