# tests/services/test_storage.py
"""Tests for the local filesystem storage backend."""

from pathlib import Path

import pytest

from fanblog.errors import StorageError
from fanblog.services.storage import LocalStorage


@pytest.fixture
def storage(tmp_path: Path) -> LocalStorage:
    return LocalStorage(root=tmp_path / "media")


class TestLocalStorage:
    @pytest.mark.asyncio
    async def test_save_creates_folders(self, storage: LocalStorage) -> None:
        """Test saving writes the bytes under the nested folder."""
        await storage.save_file(b"abc", "hello.png", "blog/2024/05/sm")
        assert (storage.root / "blog" / "2024" / "05" / "sm" / "hello.png").read_bytes() == b"abc"

    @pytest.mark.asyncio
    async def test_save_overwrites(self, storage: LocalStorage) -> None:
        """Test saving the same name replaces the file."""
        await storage.save_file(b"one", "a.png", "blog")
        await storage.save_file(b"two", "a.png", "blog")
        assert (storage.root / "blog" / "a.png").read_bytes() == b"two"

    @pytest.mark.asyncio
    async def test_delete(self, storage: LocalStorage) -> None:
        """Test deleting reports whether a file was removed."""
        await storage.save_file(b"abc", "a.png", "blog")
        assert await storage.delete_file("a.png", "blog") is True
        assert await storage.delete_file("a.png", "blog") is False

    @pytest.mark.asyncio
    async def test_path_traversal_rejected(self, storage: LocalStorage) -> None:
        """Test paths escaping the root are refused."""
        with pytest.raises(StorageError):
            await storage.save_file(b"abc", "evil.png", "../../outside")
