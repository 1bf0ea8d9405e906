import uuid
from datetime import UTC, datetime

from app.database.repositories.documents_repository import DocumentsRepository
from app.documents.exceptions import (
    LifecycleError,
    PersistenceError,
    UploadValidationError,
)
from app.documents.models import Document, DocumentStatus
from app.lifecycle.state import DocumentStore
from app.lifecycle.trigger import AnalysisTrigger
from app.logging.logger import Log
from app.storage.base import BaseBlobStore
from app.storage.exceptions import StorageError
from app.storage.paths import storage_path

CONTENT_TYPES = {
    "pdf": "application/pdf",
    "csv": "text/csv",
}


class UploadService:
    """Stores a statement file, registers it, and requests its analysis."""

    def __init__(
        self,
        store: DocumentStore,
        registry: DocumentsRepository,
        blob_store: BaseBlobStore,
        trigger: AnalysisTrigger,
        max_upload_size_mb: int = 50,
    ) -> None:
        self._store = store
        self._registry = registry
        self._blob_store = blob_store
        self._trigger = trigger
        self._max_bytes = max_upload_size_mb * 1024 * 1024
        self._max_upload_size_mb = max_upload_size_mb

    async def upload(
        self,
        file_name: str,
        data: bytes,
        content_type: str | None = None,
    ) -> Document:
        """Upload one file and return its record.

        The bytes are stored before the registry insert, and the record joins
        local state only once the insert succeeded. A failed analysis request
        does not fail the upload; the record then shows the error status.

        Raises:
            UploadValidationError: if the file type or size is not accepted.
            PersistenceError: if storing the bytes or inserting the row fails.
        """
        extension = self._validate(file_name, data, content_type)
        document_id = str(uuid.uuid4())

        try:
            path = storage_path(self._registry.owner_id, document_id, extension)
            await self._blob_store.write(path, data, content_type or CONTENT_TYPES[extension])
        except StorageError as exc:
            raise PersistenceError(f"Failed to store file: {exc}") from exc

        document = Document(
            id=document_id,
            user_id=self._registry.owner_id,
            file_name=file_name,
            file_reference=path,
            status=DocumentStatus.PENDING,
            upload_timestamp=datetime.now(UTC),
        )
        try:
            persisted = await self._registry.insert(document)
        except PersistenceError:
            await self._discard_blob(path)
            raise

        self._store.add(persisted)
        Log.info("Document uploaded", document_id=persisted.id, file_name=file_name)

        try:
            await self._trigger.trigger(persisted.id)
        except LifecycleError as exc:
            Log.warning(f"Upload stored but analysis was not requested: {exc}")
        return self._store.find(persisted.id) or persisted

    def _validate(self, file_name: str, data: bytes, content_type: str | None) -> str:
        lowered = file_name.lower()
        is_pdf = content_type == CONTENT_TYPES["pdf"] or lowered.endswith(".pdf")
        is_csv = content_type == CONTENT_TYPES["csv"] or lowered.endswith(".csv")
        if not is_pdf and not is_csv:
            raise UploadValidationError("Please upload a PDF or CSV file")
        if not data:
            raise UploadValidationError("File is empty")
        if len(data) > self._max_bytes:
            raise UploadValidationError(
                f"File size must be less than {self._max_upload_size_mb}MB"
            )
        if lowered.endswith(".csv"):
            return "csv"
        if lowered.endswith(".pdf"):
            return "pdf"
        return "csv" if content_type == CONTENT_TYPES["csv"] else "pdf"

    async def _discard_blob(self, path: str) -> None:
        try:
            await self._blob_store.remove(path)
        except StorageError as exc:
            Log.warning(f"Could not remove orphaned file {path}: {exc}")
