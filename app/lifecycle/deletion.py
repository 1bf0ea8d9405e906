import inspect
from collections.abc import Awaitable, Callable

from app.analyzer.client import AnalyzerClient
from app.auth.base import BaseCredentialProvider
from app.documents.exceptions import AuthError
from app.documents.models import Document
from app.lifecycle.state import DocumentStore
from app.logging.logger import Log

Confirm = Callable[[Document], bool | Awaitable[bool]]


class DeletionOrchestrator:
    """Deletes a document remotely, then forgets it locally.

    Local removal strictly follows remote confirmation, so a failed delete
    leaves the local list exactly as it was.
    """

    def __init__(
        self,
        store: DocumentStore,
        analyzer: AnalyzerClient,
        credentials: BaseCredentialProvider,
    ) -> None:
        self._store = store
        self._analyzer = analyzer
        self._credentials = credentials

    async def delete(self, document_id: str, confirm: Confirm) -> bool:
        """Delete after the user confirms. Returns False if the user declined.

        Raises:
            NotFoundError: if the document is not in local state.
            AuthError: if no credential is available.
            RemoteError: if the service refuses the delete.
        """
        document = self._store.get(document_id)
        answer = confirm(document)
        if inspect.isawaitable(answer):
            answer = await answer
        if not answer:
            Log.info("Deletion cancelled by user", document_id=document_id)
            return False

        token = await self._credentials.get_access_token()
        if not token:
            raise AuthError("User not authenticated. Please log in again.")
        await self._analyzer.delete_document(document_id, token)

        self._store.remove(document_id)
        Log.info("Document deleted", document_id=document_id)
        return True
