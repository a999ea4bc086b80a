"""Cancel-and-replace debouncing."""

from __future__ import annotations

import threading
from typing import Callable, Optional, Protocol


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


class TimerScheduler:
    """Run callbacks on daemon :class:`threading.Timer` threads."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class Debouncer:
    """Delay a callback until ``delay_seconds`` pass without another trigger.

    Each :meth:`trigger` cancels whatever was pending and schedules the new
    callback, so a burst of triggers runs only the last one.
    """

    def __init__(self, delay_seconds: float = 0.3, scheduler: Scheduler | None = None) -> None:
        self.delay_seconds = delay_seconds
        self._scheduler = scheduler or TimerScheduler()
        self._lock = threading.Lock()
        self._generation = 0
        self._callback: Optional[Callable[[], None]] = None
        self._handle: Optional[Cancellable] = None

    @property
    def pending(self) -> bool:
        return self._callback is not None

    def trigger(self, callback: Callable[[], None]) -> None:
        with self._lock:
            self._drop_locked()
            self._generation += 1
            generation = self._generation
            self._callback = callback
            self._handle = self._scheduler.call_later(self.delay_seconds, lambda: self._fire(generation))

    def flush(self) -> bool:
        """Run the pending callback now. Returns ``False`` when nothing was pending."""

        with self._lock:
            callback = self._callback
            self._drop_locked()
        if callback is None:
            return False
        callback()
        return True

    def cancel(self) -> None:
        with self._lock:
            self._drop_locked()

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._callback is None:
                return
            callback = self._callback
            self._callback = None
            self._handle = None
        callback()

    def _drop_locked(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._callback = None


__all__ = ["Debouncer", "Scheduler", "TimerScheduler"]
