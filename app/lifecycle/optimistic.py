from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from app.documents.exceptions import LifecycleError
from app.documents.models import Document
from app.lifecycle.state import DocumentStore

T = TypeVar("T")

FailurePatch = Callable[[Document, LifecycleError], dict[str, Any]]


async def run_optimistic(
    store: DocumentStore,
    document_id: str,
    tentative: dict[str, Any],
    effect: Callable[[], Awaitable[T]],
    on_failure: FailurePatch | None = None,
) -> T:
    """Apply ``tentative`` to a record, run ``effect``, compensate if it fails.

    On failure the fields named in ``tentative`` are restored from the
    snapshot taken before the change, unless ``on_failure`` supplies the
    compensating fields instead. The error is re-raised either way. On
    success nothing is touched: the next reconciliation pull is authoritative.
    """
    snapshot = store.get(document_id)
    store.patch(document_id, **tentative)
    try:
        return await effect()
    except LifecycleError as exc:
        if store.find(document_id) is not None:
            if on_failure is None:
                changes = {name: getattr(snapshot, name) for name in tentative}
            else:
                changes = on_failure(snapshot, exc)
            store.patch(document_id, **changes)
        raise
