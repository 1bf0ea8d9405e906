from collections.abc import Awaitable
from pathlib import Path
from typing import TypeVar

from app.analyzer.client import AnalyzerClient
from app.auth.base import BaseCredentialProvider
from app.config.settings import Settings
from app.database.repositories.documents_repository import DocumentsRepository
from app.documents.exceptions import LifecycleError
from app.documents.models import Document, DocumentStatus
from app.lifecycle.deletion import Confirm, DeletionOrchestrator
from app.lifecycle.reconciliation import ReconciliationLoop
from app.lifecycle.resolver import SecureFileResolver
from app.lifecycle.scheduler import AsyncioScheduler, BaseScheduler
from app.lifecycle.state import DocumentStore
from app.lifecycle.trigger import AnalysisTrigger
from app.lifecycle.upload import UploadService
from app.logging.logger import Log
from app.pdf.factory import PdfPreviewerFactory
from app.storage.base import BaseBlobStore
from app.storage.local_store import LocalBlobStore
from app.viewer.viewer import DocumentViewer, ViewState

T = TypeVar("T")


class DocumentsController:
    """Owns the document list and every user action on it.

    Each action catches lifecycle errors at this boundary, logs them and
    keeps one user-facing message in ``last_error``; callers get a falsy
    result instead of an exception.
    """

    def __init__(
        self,
        *,
        store: DocumentStore,
        reconciliation: ReconciliationLoop,
        trigger: AnalysisTrigger,
        uploader: UploadService,
        viewer: DocumentViewer,
        deletion: DeletionOrchestrator,
        scheduler: BaseScheduler,
        analyzer: AnalyzerClient,
    ) -> None:
        self._store = store
        self._reconciliation = reconciliation
        self._trigger = trigger
        self._uploader = uploader
        self._viewer = viewer
        self._deletion = deletion
        self._scheduler = scheduler
        self._analyzer = analyzer
        self.last_error: str | None = None
        self.view_state: ViewState | None = None

    @property
    def store(self) -> DocumentStore:
        return self._store

    @property
    def documents(self) -> tuple[Document, ...]:
        return self._store.documents

    @property
    def polling(self) -> bool:
        return self._reconciliation.active

    async def start(self) -> bool:
        """Initial load. Sync failures are logged, never surfaced."""
        return await self._reconciliation.refresh()

    async def upload(
        self, file_name: str, data: bytes, content_type: str | None = None
    ) -> Document | None:
        document = await self._guard("upload", self._uploader.upload(file_name, data, content_type))
        if document is not None and document.status is DocumentStatus.ERROR:
            self.last_error = document.error_message
        return document

    async def trigger_analysis(self, document_id: str) -> bool:
        return bool(await self._guard("analysis", self._trigger.trigger(document_id)))

    async def view(self, document_id: str) -> ViewState | None:
        self.close_view()
        document = self._store.find(document_id)
        if document is None:
            self.last_error = f"Document {document_id} not found"
            return None
        self.view_state = await self._guard("view", self._viewer.open(document))
        return self.view_state

    def close_view(self) -> None:
        self.view_state = None

    async def delete(self, document_id: str, confirm: Confirm) -> bool:
        deleted = bool(await self._guard("delete", self._deletion.delete(document_id, confirm)))
        if deleted and self.view_state is not None and self.view_state.document.id == document_id:
            self.close_view()
        return deleted

    async def close(self) -> None:
        """Tear down: stop polling, drop pending timers, close HTTP connections."""
        self.close_view()
        self._reconciliation.close()
        await self._scheduler.shutdown()
        await self._analyzer.aclose()

    async def _guard(self, action: str, call: Awaitable[T]) -> T | None:
        self.last_error = None
        try:
            return await call
        except LifecycleError as exc:
            Log.error(f"Document {action} failed: {exc}")
            self.last_error = str(exc)
            return None


def build_controller(
    settings: Settings,
    credentials: BaseCredentialProvider,
    *,
    owner_id: str | None = None,
    scheduler: BaseScheduler | None = None,
    blob_store: BaseBlobStore | None = None,
    analyzer: AnalyzerClient | None = None,
) -> DocumentsController:
    """Wire a DocumentsController with the configured collaborators.

    Raises:
        ValueError: if no document owner is configured.
    """
    owner_id = (owner_id or settings.owner_id).strip()
    if not owner_id:
        raise ValueError("No document owner configured. Set OWNER_ID or pass --owner.")
    scheduler = scheduler or AsyncioScheduler()
    analyzer = analyzer or AnalyzerClient(
        base_url=settings.api_base_url,
        timeout_seconds=settings.api_timeout_seconds,
    )
    blob_store = blob_store or LocalBlobStore(Path(settings.storage_root))
    registry = DocumentsRepository(owner_id)

    store = DocumentStore()
    reconciliation = ReconciliationLoop(
        store,
        registry.list,
        scheduler,
        interval_seconds=settings.poll_interval_seconds,
    )
    trigger = AnalysisTrigger(
        store,
        analyzer,
        credentials,
        reconciliation,
        scheduler,
        nudge_delay_seconds=settings.trigger_nudge_delay_seconds,
    )
    resolver = SecureFileResolver(analyzer, credentials)
    viewer = DocumentViewer(
        resolver,
        analyzer,
        PdfPreviewerFactory.create(settings, max_pages=settings.pdf_preview_max_pages),
    )
    return DocumentsController(
        store=store,
        reconciliation=reconciliation,
        trigger=trigger,
        uploader=UploadService(
            store,
            registry,
            blob_store,
            trigger,
            max_upload_size_mb=settings.max_upload_size_mb,
        ),
        viewer=viewer,
        deletion=DeletionOrchestrator(store, analyzer, credentials),
        scheduler=scheduler,
        analyzer=analyzer,
    )
