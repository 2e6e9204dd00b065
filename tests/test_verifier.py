"""Tests for FileVerifier size and digest checks."""

from __future__ import annotations

from pathlib import Path

import pytest

from mcfetch.download import FileVerifier
from mcfetch.exceptions import DigestMismatchError, FileSizeMismatchError

from conftest import sha1_hex


@pytest.fixture
def sample(tmp_path: Path) -> Path:
    path = tmp_path / "sample.jar"
    path.write_bytes(b"library payload")
    return path


class TestFileVerifier:
    async def test_valid_file_is_kept(self, sample: Path):
        data = sample.read_bytes()
        assert await FileVerifier.is_valid(str(sample), len(data), sha1_hex(data))
        assert sample.read_bytes() == data

    async def test_missing_file(self, tmp_path: Path):
        assert not await FileVerifier.is_valid(str(tmp_path / "nope"), 1, "00")

    async def test_size_only_check(self, sample: Path):
        assert await FileVerifier.is_valid(str(sample), sample.stat().st_size, "")
        assert await FileVerifier.is_valid(str(sample), sample.stat().st_size, None)

    async def test_same_size_wrong_digest_is_deleted(self, sample: Path):
        wrong = sha1_hex(b"x" * sample.stat().st_size)
        assert not await FileVerifier.is_valid(str(sample), sample.stat().st_size, wrong)
        assert not sample.exists()

    async def test_wrong_size_is_deleted(self, sample: Path):
        data = sample.read_bytes()
        assert not await FileVerifier.is_valid(str(sample), len(data) + 1, sha1_hex(data))
        assert not sample.exists()

    async def test_digest_is_case_insensitive(self, sample: Path):
        data = sample.read_bytes()
        assert await FileVerifier.is_valid(str(sample), len(data), sha1_hex(data).upper())

    async def test_streamed_digest_matches_hashlib(self, tmp_path: Path):
        path = tmp_path / "big.bin"
        data = bytes(range(256)) * 9000
        path.write_bytes(data)
        assert await FileVerifier.calc_sha1(str(path)) == sha1_hex(data)

    async def test_verify_raises_without_deleting(self, sample: Path):
        with pytest.raises(FileSizeMismatchError):
            await FileVerifier.verify(str(sample), 1, None)
        with pytest.raises(DigestMismatchError):
            await FileVerifier.verify(str(sample), sample.stat().st_size, "0" * 40)
        assert sample.exists()
