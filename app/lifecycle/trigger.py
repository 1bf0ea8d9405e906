from app.analyzer.client import AnalyzerClient
from app.auth.base import BaseCredentialProvider
from app.documents.exceptions import AuthError, LifecycleError
from app.documents.models import Document, DocumentStatus
from app.lifecycle.optimistic import run_optimistic
from app.lifecycle.reconciliation import ReconciliationLoop
from app.lifecycle.scheduler import BaseScheduler
from app.lifecycle.state import DocumentStore
from app.logging.logger import Log


class AnalysisTrigger:
    """Asks the analyzer to (re)process a document.

    Order: mark processing -> fetch credential -> POST /analyze -> schedule a
    refresh. Completion is only ever observed through reconciliation; this
    class never writes to the registry.
    """

    def __init__(
        self,
        store: DocumentStore,
        analyzer: AnalyzerClient,
        credentials: BaseCredentialProvider,
        reconciliation: ReconciliationLoop,
        scheduler: BaseScheduler,
        nudge_delay_seconds: float = 1.0,
    ) -> None:
        self._store = store
        self._analyzer = analyzer
        self._credentials = credentials
        self._reconciliation = reconciliation
        self._scheduler = scheduler
        self._nudge_delay_seconds = nudge_delay_seconds
        self._in_flight: set[str] = set()

    def is_in_flight(self, document_id: str) -> bool:
        return document_id in self._in_flight

    async def trigger(self, document_id: str) -> bool:
        """Request analysis. Returns False if a trigger for this id is already running.

        Raises:
            NotFoundError: if the document is not in local state.
            AuthError: if no credential is available.
            RemoteError: if the analyzer rejects the request.
        """
        if document_id in self._in_flight:
            Log.debug("Analysis already in flight, ignoring", document_id=document_id)
            return False
        self._store.get(document_id)

        self._in_flight.add(document_id)
        try:
            await run_optimistic(
                self._store,
                document_id,
                {"status": DocumentStatus.PROCESSING, "error_message": None},
                lambda: self._request(document_id),
                on_failure=_mark_failed,
            )
        finally:
            self._in_flight.discard(document_id)

        Log.info("Analysis requested", document_id=document_id)
        self._scheduler.call_later(self._nudge_delay_seconds, self._nudge)
        return True

    async def _request(self, document_id: str) -> None:
        token = await self._credentials.get_access_token()
        if not token:
            raise AuthError("User not authenticated. Please log in again.")
        await self._analyzer.analyze(document_id, token)

    async def _nudge(self) -> None:
        await self._reconciliation.refresh()


def _mark_failed(_snapshot: Document, exc: LifecycleError) -> dict[str, object]:
    Log.error(f"Analysis trigger failed: {exc}")
    return {"status": DocumentStatus.ERROR, "error_message": str(exc)}
