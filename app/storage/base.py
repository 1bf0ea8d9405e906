from abc import ABC, abstractmethod


class BaseBlobStore(ABC):
    """Contract for private object storage addressed by opaque path."""

    @abstractmethod
    async def write(self, path: str, data: bytes, content_type: str) -> None:
        """Store bytes under ``path``. Never overwrites an existing object.

        Raises:
            StorageError: on any failure, ObjectExistsError if the path is taken.
        """

    @abstractmethod
    async def read(self, path: str) -> bytes:
        """Return the bytes stored under ``path``.

        Raises:
            ObjectNotFoundError: if nothing is stored there.
        """

    @abstractmethod
    async def remove(self, path: str) -> None:
        """Drop the object under ``path`` if present."""
