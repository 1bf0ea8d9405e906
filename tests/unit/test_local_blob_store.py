from pathlib import Path

import pytest

from app.storage.exceptions import ObjectExistsError, ObjectNotFoundError, StoragePathError
from app.storage.local_store import LocalBlobStore
from app.storage.paths import split_storage_path, storage_path


class TestStoragePath:
    def test_builds_owner_scoped_path(self) -> None:
        assert storage_path("user-1", "abc", ".PDF") == "user-1/abc.pdf"

    def test_rejects_owner_with_separator(self) -> None:
        with pytest.raises(StoragePathError):
            storage_path("a/b", "abc", "pdf")

    @pytest.mark.parametrize("path", ["no-separator", "/abc.pdf", "user/", "user/../x", "user/.."])
    def test_rejects_malformed_paths(self, path: str) -> None:
        with pytest.raises(StoragePathError):
            split_storage_path(path)


@pytest.mark.asyncio
class TestLocalBlobStore:
    async def test_write_then_read(self, tmp_path: Path) -> None:
        store = LocalBlobStore(root=tmp_path)
        await store.write("user-1/doc.csv", b"a,b\n1,2", "text/csv")

        assert (tmp_path / "user-1" / "doc.csv").read_bytes() == b"a,b\n1,2"
        assert await store.read("user-1/doc.csv") == b"a,b\n1,2"

    async def test_never_overwrites(self, tmp_path: Path) -> None:
        store = LocalBlobStore(root=tmp_path)
        await store.write("user-1/doc.pdf", b"first", "application/pdf")

        with pytest.raises(ObjectExistsError):
            await store.write("user-1/doc.pdf", b"second", "application/pdf")
        assert await store.read("user-1/doc.pdf") == b"first"

    async def test_read_missing_raises(self, tmp_path: Path) -> None:
        store = LocalBlobStore(root=tmp_path)
        with pytest.raises(ObjectNotFoundError):
            await store.read("user-1/missing.pdf")

    async def test_remove_is_idempotent(self, tmp_path: Path) -> None:
        store = LocalBlobStore(root=tmp_path)
        await store.write("user-1/doc.pdf", b"x", "application/pdf")

        await store.remove("user-1/doc.pdf")
        await store.remove("user-1/doc.pdf")

        assert not (tmp_path / "user-1" / "doc.pdf").exists()
