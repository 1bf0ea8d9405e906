from typing import Any

import httpx

from app.documents.exceptions import NetworkError, RemoteError, ResolveError
from app.logging.logger import Log


class AnalyzerClient:
    """HTTP client for the analyzer service and for signed-URL downloads.

    Every call to the service carries the caller's bearer token. Failures are
    never retried here; the user re-triggers the action.
    """

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: int,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout_seconds,
            transport=transport,
        )

    async def analyze(self, document_id: str, token: str) -> None:
        """Ask the analyzer to process a document. Acceptance is not completion."""
        response = await self._send(
            "POST", "/analyze", token, json={"document_id": document_id}
        )
        if not response.is_success:
            raise RemoteError(_detail(response), status_code=response.status_code)
        Log.debug("Analyzer accepted document", document_id=document_id)

    async def signed_url(self, document_id: str, token: str) -> str:
        """Exchange a document's opaque storage path for a short-lived URL."""
        response = await self._send("GET", f"/documents/{document_id}/signed-url", token)
        if not response.is_success:
            raise ResolveError(_detail(response), status_code=response.status_code)
        try:
            url = response.json().get("signed_url")
        except (ValueError, AttributeError) as exc:
            raise ResolveError("Signed URL response is not a JSON object") from exc
        if not isinstance(url, str) or not url:
            raise ResolveError("Signed URL response did not contain a URL")
        return url

    async def delete_document(self, document_id: str, token: str) -> None:
        """Delete a document's stored file and registry row on the service side."""
        response = await self._send("DELETE", f"/documents/{document_id}", token)
        if not response.is_success:
            raise RemoteError(_detail(response), status_code=response.status_code)

    async def fetch_file(self, url: str) -> bytes:
        """Download a resolved (pre-authorized) file URL."""
        try:
            response = await self._client.get(url)
        except httpx.InvalidURL as exc:
            raise ResolveError(f"Invalid file URL: {exc}") from exc
        except httpx.TransportError as exc:
            raise NetworkError(f"Cannot download file: {exc}") from exc
        if not response.is_success:
            raise RemoteError(
                f"Failed to load file: {response.reason_phrase or response.status_code}",
                status_code=response.status_code,
            )
        return response.content

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(
        self,
        method: str,
        path: str,
        token: str,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        try:
            return await self._client.request(
                method,
                path,
                json=json,
                headers={"Authorization": f"Bearer {token}"},
            )
        except (httpx.ConnectError, httpx.TimeoutException) as exc:
            raise NetworkError(
                f"Cannot connect to backend API at {self._base_url}: {exc}"
            ) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(f"Backend API request failed: {exc}") from exc


def _detail(response: httpx.Response) -> str:
    """Human-readable error detail from a non-success response."""
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, str) and detail:
        return detail
    if detail:
        return str(detail)
    return f"HTTP {response.status_code}"
