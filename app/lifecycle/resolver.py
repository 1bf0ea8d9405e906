import re

from app.analyzer.client import AnalyzerClient
from app.auth.base import BaseCredentialProvider
from app.documents.exceptions import AuthError
from app.documents.models import Document
from app.logging.logger import Log

_URI_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://")


def is_absolute_url(reference: str) -> bool:
    return bool(_URI_SCHEME.match(reference))


class SecureFileResolver:
    """Turns a document's file reference into a URL the client can fetch.

    The result is transient: it is returned to the caller and never written
    back to the document or the local store.
    """

    def __init__(self, analyzer: AnalyzerClient, credentials: BaseCredentialProvider) -> None:
        self._analyzer = analyzer
        self._credentials = credentials

    async def resolve(self, document: Document) -> str:
        """Return an access URL for the document's file.

        Raises:
            AuthError: if no credential is available.
            ResolveError: if the signed-url endpoint rejects the request.
        """
        if is_absolute_url(document.file_reference):
            return document.file_reference

        token = await self._credentials.get_access_token()
        if not token:
            raise AuthError("User not authenticated. Please log in again.")
        url = await self._analyzer.signed_url(document.id, token)
        Log.debug("Resolved signed URL", document_id=document.id)
        return url
