"""
清单数据模型

定义版本列表、版本清单、库文件和资源索引的数据类。
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class Artifact:
    """单个可下载文件"""

    path: str
    sha1: str
    size: int
    url: str

    @classmethod
    def from_dict(cls, data: dict) -> "Artifact":
        return cls(
            path=data["path"],
            sha1=data.get("sha1", ""),
            size=int(data["size"]),
            url=data["url"],
        )


@dataclass
class Rule:
    """库的平台规则"""

    os_name: Optional[str] = None
    action: str = "allow"

    @classmethod
    def from_dict(cls, data: dict) -> "Rule":
        os_info = data.get("os") or {}
        return cls(os_name=os_info.get("name"), action=data.get("action", "allow"))


@dataclass
class Library:
    """
    版本依赖的单个库。

    classifiers 同时兼容顶层和 downloads.classifiers 两种写法。
    """

    name: str
    artifact: Optional[Artifact] = None
    rules: List[Rule] = field(default_factory=list)
    classifiers: Dict[str, Artifact] = field(default_factory=dict)
    has_rules: bool = False
    has_classifiers: bool = False

    @property
    def has_native_hints(self) -> bool:
        return self.has_rules or self.has_classifiers

    @classmethod
    def from_dict(cls, data: dict) -> "Library":
        downloads = data.get("downloads") or {}
        artifact = downloads.get("artifact")
        raw_classifiers = data.get("classifiers")
        if raw_classifiers is None:
            raw_classifiers = downloads.get("classifiers")
        raw_rules = data.get("rules")

        return cls(
            name=data["name"],
            artifact=Artifact.from_dict(artifact) if artifact else None,
            rules=[Rule.from_dict(rule) for rule in raw_rules or []],
            classifiers={
                key: Artifact.from_dict(value)
                for key, value in (raw_classifiers or {}).items()
            },
            has_rules=raw_rules is not None,
            has_classifiers=raw_classifiers is not None,
        )


@dataclass
class AssetIndexInfo:
    """版本清单中的 assetIndex 描述"""

    id: str
    sha1: str
    size: int
    url: str

    @classmethod
    def from_dict(cls, data: dict) -> "AssetIndexInfo":
        return cls(
            id=data.get("id", ""),
            sha1=data.get("sha1", ""),
            size=int(data["size"]),
            url=data["url"],
        )


@dataclass
class VersionManifest:
    """
    单个版本的完整依赖清单。
    """

    id: str
    libraries: List[Library]
    asset_index: Optional[AssetIndexInfo] = None
    assets: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "VersionManifest":
        asset_index = data.get("assetIndex")
        return cls(
            id=data.get("id", ""),
            libraries=[Library.from_dict(lib) for lib in data.get("libraries", [])],
            asset_index=AssetIndexInfo.from_dict(asset_index) if asset_index else None,
            assets=data.get("assets"),
        )


@dataclass
class VersionEntry:
    """版本列表中的一项"""

    id: str
    type: str
    url: str
    time: str
    release_time: str

    @classmethod
    def from_dict(cls, data: dict) -> "VersionEntry":
        return cls(
            id=data["id"],
            type=data.get("type", ""),
            url=data["url"],
            time=data.get("time", ""),
            release_time=data.get("releaseTime", ""),
        )


@dataclass
class VersionManifestList:
    """远程版本列表"""

    latest_release: str
    latest_snapshot: str
    versions: List[VersionEntry]

    @classmethod
    def from_dict(cls, data: dict) -> "VersionManifestList":
        latest = data.get("latest") or {}
        return cls(
            latest_release=latest.get("release", ""),
            latest_snapshot=latest.get("snapshot", ""),
            versions=[VersionEntry.from_dict(v) for v in data.get("versions", [])],
        )

    def find(self, version_id: str) -> Optional[VersionEntry]:
        """按 id 精确匹配（区分大小写）"""
        for entry in self.versions:
            if entry.id == version_id:
                return entry
        return None

    def filter(self, version_type: Optional[str] = None) -> List[VersionEntry]:
        if version_type is None:
            return list(self.versions)
        return [v for v in self.versions if v.type == version_type]


@dataclass
class AssetObject:
    """单个资源对象，以哈希作为文件名"""

    hash: str
    size: int

    @property
    def prefix(self) -> str:
        return self.hash[:2]


@dataclass
class AssetIndex:
    """资源索引"""

    objects: Dict[str, AssetObject]

    @classmethod
    def from_dict(cls, data: dict) -> "AssetIndex":
        return cls(
            objects={
                name: AssetObject(hash=obj["hash"], size=int(obj["size"]))
                for name, obj in data.get("objects", {}).items()
            }
        )
