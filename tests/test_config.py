"""Tests for configuration parsing and base-path resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from mcfetch.exceptions import ConfigValidationError, InvalidDirectoryError
from mcfetch.models import DEFAULT_MIRROR, DirectoryMode, McFetchConfig, resolve_base_path


class TestResolveBasePath:
    def test_documents(self, tmp_path: Path):
        assert resolve_base_path(DirectoryMode.DOCUMENTS, home=tmp_path) == (
            tmp_path / "Documents" / ".minecraft"
        )

    def test_app_local(self, tmp_path: Path):
        assert resolve_base_path(DirectoryMode.APP_LOCAL, app_dir=tmp_path) == (
            tmp_path / "minecraft"
        )

    def test_app_parent(self, tmp_path: Path):
        app_dir = tmp_path / "McFetch"
        assert resolve_base_path(DirectoryMode.APP_PARENT, app_dir=app_dir) == (
            tmp_path / ".minecraft"
        )

    def test_custom(self, tmp_path: Path):
        assert resolve_base_path(DirectoryMode.CUSTOM, str(tmp_path)) == tmp_path

    @pytest.mark.parametrize("custom", [None, "", "   ", "relative/dir"])
    def test_invalid_custom(self, custom):
        with pytest.raises(InvalidDirectoryError):
            resolve_base_path(DirectoryMode.CUSTOM, custom)

    def test_custom_path_ignored_by_other_modes(self, tmp_path: Path):
        path = resolve_base_path(DirectoryMode.DOCUMENTS, "/elsewhere", home=tmp_path)
        assert path == tmp_path / "Documents" / ".minecraft"


class TestMcFetchConfig:
    def test_defaults(self):
        config = McFetchConfig.from_dict({})
        assert config.mirror.base_url == DEFAULT_MIRROR
        assert config.download.max_retries == 3
        assert config.download.asset_batch_size == 10
        assert config.directory.mode == DirectoryMode.DOCUMENTS

    def test_from_dict(self, tmp_path: Path):
        config = McFetchConfig.from_dict(
            {
                "version": "1.21",
                "platform": "linux",
                "directory": {"mode": "custom", "custom_path": str(tmp_path)},
                "mirror": {"base_url": "https://mirror.example/"},
                "download": {"max_retries": 5, "retry_delay": 0.2},
            }
        )
        assert config.version == "1.21"
        assert config.base_path == tmp_path
        assert config.mirror.base_url == "https://mirror.example"
        assert config.download.max_retries == 5

    @pytest.mark.parametrize(
        "data",
        [
            {"directory": {"mode": "desktop"}},
            {"platform": "beos"},
            {"download": {"max_retries": 0}},
            {"download": {"asset_batch_size": "ten"}},
            {"download": {"retry_delay": -1}},
            {"download": {"timeout": 0}},
        ],
    )
    def test_invalid(self, data):
        with pytest.raises(ConfigValidationError):
            McFetchConfig.from_dict(data)
