from collections.abc import Awaitable, Callable

from app.documents.models import Document
from app.lifecycle.scheduler import BaseScheduler, TimerHandle
from app.lifecycle.state import DocumentStore
from app.logging.logger import Log

Pull = Callable[[], Awaitable[list[Document]]]


class ReconciliationLoop:
    """Poll loop: wait -> pull registry -> overwrite local collection.

    Armed only while some document is pending or processing. The whole
    collection is replaced on every pull, so optimistic local edits that the
    registry does not reflect yet are reverted.
    """

    def __init__(
        self,
        store: DocumentStore,
        pull: Pull,
        scheduler: BaseScheduler,
        interval_seconds: float = 3.0,
    ) -> None:
        self._store = store
        self._pull = pull
        self._scheduler = scheduler
        self._interval_seconds = interval_seconds
        self._timer: TimerHandle | None = None
        self._generation = 0
        self._closed = False
        self._unsubscribe = store.subscribe(self._sync)
        self._sync()

    @property
    def active(self) -> bool:
        return self._timer is not None

    async def refresh(self) -> bool:
        """Pull once and overwrite local state. Returns False if the pull failed."""
        if self._closed:
            return False
        try:
            documents = await self._pull()
        except Exception as exc:
            Log.warning(f"Document sync failed, will retry on next tick: {exc}")
            return False
        if self._closed:
            return False
        self._store.replace_all(documents)
        return True

    def close(self) -> None:
        """Cancel the pending timer and stop reacting to store changes."""
        self._closed = True
        self._unsubscribe()
        self._cancel_timer()

    def _sync(self) -> None:
        """Arm or disarm the timer to match the activation condition."""
        if self._closed:
            return
        if self._store.has_outstanding_work():
            if self._timer is None:
                self._generation += 1
                generation = self._generation
                self._timer = self._scheduler.call_later(
                    self._interval_seconds, lambda: self._tick(generation)
                )
                Log.debug("Document sync armed", interval=self._interval_seconds)
        elif self._timer is not None:
            self._cancel_timer()
            Log.debug("Document sync idle, no outstanding documents")

    async def _tick(self, generation: int) -> None:
        # A timer cancelled after it already fired must not clear its successor.
        if generation != self._generation or self._closed:
            return
        self._timer = None
        await self.refresh()
        self._sync()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
            self._generation += 1
