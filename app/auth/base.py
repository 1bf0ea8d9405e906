from abc import ABC, abstractmethod


class BaseCredentialProvider(ABC):
    """Contract for sources of the caller's bearer credential."""

    @abstractmethod
    async def get_access_token(self) -> str | None:
        """Return a fresh bearer token, or None if the caller is signed out.

        Implementations must not raise for a missing session; callers turn
        None into AuthError.
        """
