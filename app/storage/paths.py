from app.storage.exceptions import StoragePathError


def storage_path(user_id: str, document_id: str, extension: str) -> str:
    """Build the opaque storage path: {user_id}/{document_id}.{extension}"""
    if not user_id or "/" in user_id:
        raise StoragePathError(f"Invalid owner id for storage path: {user_id!r}")
    return f"{user_id}/{document_id}.{extension.lstrip('.').lower()}"


def split_storage_path(path: str) -> tuple[str, str]:
    """Return (owner directory, file name) of an opaque storage path."""
    owner, sep, name = path.partition("/")
    if not sep or not owner or not name or "/" in name or name in (".", ".."):
        raise StoragePathError(f"Malformed storage path: {path!r}")
    return owner, name
