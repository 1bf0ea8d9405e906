"""Timer abstraction so the lifecycle can run on asyncio or on a simulated clock."""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

TimerCallback = Callable[[], Awaitable[None]]


class TimerHandle(ABC):
    @abstractmethod
    def cancel(self) -> None:
        """Prevent the callback from running. Safe to call more than once."""

    @property
    @abstractmethod
    def cancelled(self) -> bool: ...


class BaseScheduler(ABC):
    """Contract for one-shot timers that run a coroutine callback."""

    @abstractmethod
    def call_later(self, delay_seconds: float, callback: TimerCallback) -> TimerHandle:
        """Run ``callback`` once after ``delay_seconds``."""

    @abstractmethod
    async def shutdown(self) -> None:
        """Cancel every pending timer and wait for running callbacks."""


class _AsyncioTimer(TimerHandle):
    def __init__(self) -> None:
        self._handle: asyncio.TimerHandle | None = None
        self._task: asyncio.Task[None] | None = None
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class AsyncioScheduler(BaseScheduler):
    """Runs timers on the running event loop."""

    def __init__(self) -> None:
        self._timers: set[_AsyncioTimer] = set()

    def call_later(self, delay_seconds: float, callback: TimerCallback) -> TimerHandle:
        loop = asyncio.get_running_loop()
        timer = _AsyncioTimer()

        def _fire() -> None:
            if timer.cancelled:
                self._timers.discard(timer)
                return
            timer._task = loop.create_task(callback())
            timer._task.add_done_callback(lambda _t: self._timers.discard(timer))

        timer._handle = loop.call_later(delay_seconds, _fire)
        self._timers.add(timer)
        return timer

    async def shutdown(self) -> None:
        running = []
        for timer in list(self._timers):
            timer.cancel()
            if timer._task is not None and not timer._task.done():
                running.append(timer._task)
        if running:
            await asyncio.gather(*running, return_exceptions=True)
        self._timers.clear()


@dataclass(eq=False)
class _FakeTimer(TimerHandle):
    due: float
    seq: int
    callback: TimerCallback
    _cancelled: bool = field(default=False)

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class FakeScheduler(BaseScheduler):
    """Deterministic scheduler driven by ``advance()`` instead of wall time."""

    def __init__(self) -> None:
        self.now = 0.0
        self._timers: list[_FakeTimer] = []
        self._seq = 0

    def call_later(self, delay_seconds: float, callback: TimerCallback) -> TimerHandle:
        self._seq += 1
        timer = _FakeTimer(due=self.now + delay_seconds, seq=self._seq, callback=callback)
        self._timers.append(timer)
        return timer

    @property
    def pending(self) -> int:
        return sum(1 for t in self._timers if not t.cancelled)

    async def advance(self, seconds: float) -> None:
        """Move the clock forward, running due callbacks in due-time order."""
        target = self.now + seconds
        while True:
            due = [t for t in self._timers if not t.cancelled and t.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: (t.due, t.seq))
            self._timers.remove(timer)
            self.now = timer.due
            await timer.callback()
        self._timers = [t for t in self._timers if not t.cancelled]
        self.now = target

    async def shutdown(self) -> None:
        for timer in self._timers:
            timer.cancel()
        self._timers.clear()
