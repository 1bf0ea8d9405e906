class LifecycleError(Exception):
    """Base exception for all document lifecycle errors.

    ``str(exc)`` is always safe to show to the user.
    """


class AuthError(LifecycleError):
    """Raised when no valid bearer credential is available; the user must sign in again."""


class RemoteError(LifecycleError):
    """Raised when the analyzer service answers with a non-success response."""

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


class NetworkError(RemoteError):
    """Raised when the analyzer service cannot be reached at all."""


class ResolveError(RemoteError):
    """Raised when an opaque storage path cannot be exchanged for a signed URL."""


class PersistenceError(LifecycleError):
    """Raised when a registry insert, list or delete fails."""


class NotFoundError(PersistenceError):
    """Raised when a document does not exist in the registry or local state."""


class FormatError(LifecycleError):
    """Raised when tabular text is empty or cannot be parsed."""


class UploadValidationError(LifecycleError):
    """Raised when an uploaded file is rejected before any remote call."""
