"""Shared test fixtures for McFetch."""

from __future__ import annotations

import asyncio
import hashlib
import io
import json
import zipfile
from collections import Counter
from pathlib import Path
from typing import Any

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from mcfetch.download import DownloadManager
from mcfetch.models import (
    DirectoryConfig,
    DirectoryMode,
    DownloadConfig,
    McFetchConfig,
    MirrorConfig,
)
from mcfetch.services import MirrorClient

VERSION_LIST_PATH = "/mc/game/version_manifest_v2.json"


def sha1_hex(data: bytes) -> str:
    return hashlib.sha1(data).hexdigest()


def make_zip(entries: dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, data in entries.items():
            zf.writestr(name, data)
    return buffer.getvalue()


class FakeMirror:
    """In-process mirror: serves registered bodies and records every hit."""

    def __init__(self) -> None:
        self.routes: dict[str, bytes] = {}
        self.failures: dict[str, int] = {}
        self.delays: dict[str, float] = {}
        self.hits: Counter[str] = Counter()
        self.server: TestServer | None = None

    def add(self, path: str, body: bytes | dict[str, Any]) -> None:
        if isinstance(body, dict):
            body = json.dumps(body).encode()
        self.routes[path] = body

    def fail(self, path: str, times: int) -> None:
        self.failures[path] = times

    def slow(self, path: str, seconds: float) -> None:
        self.delays[path] = seconds

    async def _handle(self, request: web.Request) -> web.Response:
        path = request.path
        self.hits[path] += 1
        if path in self.delays:
            await asyncio.sleep(self.delays[path])
        if self.failures.get(path, 0) > 0:
            self.failures[path] -= 1
            return web.Response(status=503)
        if path not in self.routes:
            return web.Response(status=404)
        return web.Response(body=self.routes[path])

    async def start(self) -> None:
        app = web.Application()
        app.router.add_route("GET", "/{tail:.*}", self._handle)
        self.server = TestServer(app)
        await self.server.start_server()

    async def close(self) -> None:
        if self.server is not None:
            await self.server.close()

    @property
    def base_url(self) -> str:
        return str(self.server.make_url("/")).rstrip("/")


@pytest.fixture
async def mirror():
    fake = FakeMirror()
    await fake.start()
    yield fake
    await fake.close()


@pytest.fixture
def base_dir(tmp_path: Path) -> Path:
    return tmp_path / ".minecraft"


@pytest.fixture
def config(mirror: FakeMirror, base_dir: Path) -> McFetchConfig:
    return McFetchConfig(
        platform="osx",
        directory=DirectoryConfig(mode=DirectoryMode.CUSTOM, custom_path=str(base_dir)),
        mirror=MirrorConfig(base_url=mirror.base_url),
        download=DownloadConfig(retry_delay=0, asset_batch_size=2),
    )


@pytest.fixture
async def client(config: McFetchConfig):
    async with MirrorClient(config.mirror, config.download) as mirror_client:
        yield mirror_client


@pytest.fixture
async def downloader(client: MirrorClient) -> DownloadManager:
    return DownloadManager(client.session, max_retries=3, retry_delay=0)


def artifact(path: str, data: bytes, host: str = "https://libraries.minecraft.net") -> dict:
    return {
        "path": path,
        "sha1": sha1_hex(data),
        "size": len(data),
        "url": f"{host}/{path}",
    }


class InstallFixture:
    """A complete version published on the fake mirror."""

    def __init__(self, mirror: FakeMirror, version: str, assets: dict[str, bytes]):
        self.mirror = mirror
        self.version = version
        self.jar = b"plain library jar " + version.encode()
        self.native_zip = make_zip(
            {
                "liblwjgl.dylib": b"dylib-bytes",
                "libjinput.jnilib": b"jnilib-bytes",
                "META-INF/MANIFEST.MF": b"Manifest-Version: 1.0\n",
                "../../evil.dylib": b"evil",
                "linux/liblwjgl.so": b"so-bytes",
            }
        )
        self.linux_zip = make_zip({"liblwjgl.so": b"linux-only"})

        self.libraries = [
            {
                "name": "com.mojang:brigadier:1.0.18",
                "downloads": {
                    "artifact": artifact("com/mojang/brigadier/1.0.18/brigadier.jar", self.jar)
                },
            },
            {
                "name": "org.lwjgl:lwjgl:3.3.3:natives-macos",
                "downloads": {
                    "artifact": artifact(
                        "org/lwjgl/lwjgl/3.3.3/lwjgl-3.3.3-natives-macos.jar",
                        self.native_zip,
                    )
                },
                "rules": [{"action": "allow", "os": {"name": "osx"}}],
            },
            {
                "name": "org.lwjgl:lwjgl:3.3.3:natives-linux",
                "downloads": {
                    "artifact": artifact(
                        "org/lwjgl/lwjgl/3.3.3/lwjgl-3.3.3-natives-linux.jar",
                        self.linux_zip,
                    )
                },
                "rules": [{"action": "allow", "os": {"name": "linux"}}],
            },
        ]
        for lib, body in zip(self.libraries, (self.jar, self.native_zip, self.linux_zip)):
            mirror.add(f"/maven/{lib['downloads']['artifact']['path']}", body)

        self.objects = {}
        for name, data in assets.items():
            digest = sha1_hex(data)
            self.objects[name] = {"hash": digest, "size": len(data)}
            mirror.add(f"/assets/{digest[:2]}/{digest}", data)
        index_body = json.dumps({"objects": self.objects}).encode()
        index_path = f"/v1/packages/{sha1_hex(index_body)}/{version}-assets.json"
        mirror.add(index_path, index_body)

        self.manifest = {
            "id": version,
            "libraries": self.libraries,
            "assetIndex": {
                "id": version,
                "sha1": sha1_hex(index_body),
                "size": len(index_body),
                "url": f"https://piston-meta.mojang.com{index_path}",
            },
            "assets": version,
        }
        self.manifest_path = f"/v1/packages/manifest/{version}.json"
        mirror.add(self.manifest_path, self.manifest)

    @property
    def entry(self) -> dict:
        return {
            "id": self.version,
            "type": "release",
            "url": f"https://piston-meta.mojang.com{self.manifest_path}",
            "time": "2024-06-13T08:24:03+00:00",
            "releaseTime": "2024-06-13T08:24:03+00:00",
        }

    def artifact_paths(self) -> list[str]:
        paths = [f"/maven/{lib['downloads']['artifact']['path']}" for lib in self.libraries]
        paths += [
            f"/assets/{obj['hash'][:2]}/{obj['hash']}" for obj in self.objects.values()
        ]
        return paths


def publish_versions(mirror: FakeMirror, *fixtures: InstallFixture) -> None:
    mirror.add(
        VERSION_LIST_PATH,
        {
            "latest": {"release": fixtures[0].version, "snapshot": "24w14a"},
            "versions": [f.entry for f in fixtures],
        },
    )


DEFAULT_ASSETS = {
    "minecraft/sounds/ambient/cave/cave1.ogg": b"cave sound",
    "minecraft/lang/en_us.json": b'{"hello": "world"}',
    "minecraft/textures/block/stone.png": b"stone png bytes",
    "icons/icon_16x16.png": b"icon 16",
    "icons/duplicate_icon.png": b"icon 16",
}


@pytest.fixture
def install_fixture(mirror: FakeMirror) -> InstallFixture:
    fixture = InstallFixture(mirror, "1.21", DEFAULT_ASSETS)
    publish_versions(mirror, fixture)
    return fixture
