import dataclasses
from collections.abc import Callable, Iterable
from typing import Any

from app.documents.exceptions import NotFoundError
from app.documents.models import Document, DocumentStatus

StoreListener = Callable[[], None]


class DocumentStore:
    """The local, in-memory document collection shown to the user.

    Reconciliation replaces it wholesale; orchestrators patch single records
    for immediate feedback. Listeners run synchronously after every change.
    """

    def __init__(self) -> None:
        self._documents: list[Document] = []
        self._listeners: list[StoreListener] = []

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register a change listener and return a function that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    @property
    def documents(self) -> tuple[Document, ...]:
        return tuple(self._documents)

    def get(self, document_id: str) -> Document:
        for document in self._documents:
            if document.id == document_id:
                return document
        raise NotFoundError(f"Document {document_id} not found")

    def find(self, document_id: str) -> Document | None:
        try:
            return self.get(document_id)
        except NotFoundError:
            return None

    def has_outstanding_work(self) -> bool:
        return any(not d.status.is_terminal for d in self._documents)

    def replace_all(self, documents: Iterable[Document]) -> None:
        self._documents = list(documents)
        self._notify()

    def add(self, document: Document) -> None:
        """Insert a document at the top (newest first)."""
        self._documents = [document, *(d for d in self._documents if d.id != document.id)]
        self._notify()

    def patch(self, document_id: str, **changes: Any) -> Document:
        """Replace one record with a copy carrying ``changes``."""
        current = self.get(document_id)
        updated = dataclasses.replace(current, **changes)
        self._documents = [updated if d.id == document_id else d for d in self._documents]
        self._notify()
        return updated

    def remove(self, document_id: str) -> None:
        before = len(self._documents)
        self._documents = [d for d in self._documents if d.id != document_id]
        if len(self._documents) != before:
            self._notify()

    def count_by_status(self) -> dict[DocumentStatus, int]:
        counts = {status: 0 for status in DocumentStatus}
        for document in self._documents:
            counts[document.status] += 1
        return counts

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()
