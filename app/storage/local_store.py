import asyncio
from pathlib import Path

from app.storage.base import BaseBlobStore
from app.storage.exceptions import ObjectExistsError, ObjectNotFoundError, StorageError
from app.storage.paths import split_storage_path


class LocalBlobStore(BaseBlobStore):
    """Stores statement files on the local filesystem under {root}/{user_id}/."""

    STORAGE_ROOT = Path("/app/files")

    def __init__(self, root: Path | None = None) -> None:
        self._root = root if root is not None else self.STORAGE_ROOT

    async def write(self, path: str, data: bytes, content_type: str) -> None:
        target = self._resolve_path(path)
        await asyncio.to_thread(self._write_new, target, data)

    async def read(self, path: str) -> bytes:
        target = self._resolve_path(path)
        if not target.exists():
            raise ObjectNotFoundError(f"Object not found: {path}")
        return await asyncio.to_thread(target.read_bytes)

    async def remove(self, path: str) -> None:
        target = self._resolve_path(path)
        await asyncio.to_thread(target.unlink, missing_ok=True)

    def _resolve_path(self, path: str) -> Path:
        owner, name = split_storage_path(path)
        return self._root / owner / name

    @staticmethod
    def _write_new(target: Path, data: bytes) -> None:
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("xb") as fh:
                fh.write(data)
        except FileExistsError as exc:
            raise ObjectExistsError(f"Object already exists: {target.name}") from exc
        except OSError as exc:
            raise StorageError(f"Failed to write {target.name}: {exc}") from exc
