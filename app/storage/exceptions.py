class StorageError(Exception):
    """Base exception for all blob store errors."""


class StoragePathError(StorageError):
    """Raised when an opaque storage path is malformed."""


class ObjectExistsError(StorageError):
    """Raised when writing to a path that already holds an object."""


class ObjectNotFoundError(StorageError):
    """Raised when reading a path that holds no object."""
