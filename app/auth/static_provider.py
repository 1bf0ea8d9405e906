from app.auth.base import BaseCredentialProvider


class StaticCredentialProvider(BaseCredentialProvider):
    """Serves a token supplied up front (settings, CLI flag, tests)."""

    def __init__(self, token: str | None) -> None:
        self._token = (token or "").strip() or None

    async def get_access_token(self) -> str | None:
        return self._token

