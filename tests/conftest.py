"""Deterministic stand-ins for timers and thread pools."""

from __future__ import annotations

from concurrent.futures import Future
from typing import Any, Callable, List, Tuple

import pytest


class ManualHandle:
    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Collects delayed callbacks until the test calls :meth:`advance`."""

    def __init__(self) -> None:
        self.handles: List[ManualHandle] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(delay, callback)
        self.handles.append(handle)
        return handle

    def advance(self) -> int:
        """Fire every handle that was not cancelled; returns how many fired."""

        due, self.handles = self.handles, []
        fired = 0
        for handle in due:
            if not handle.cancelled:
                handle.callback()
                fired += 1
        return fired


class InlineExecutor:
    """Runs submitted work immediately on the calling thread."""

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:  # surfaced through the future like a real pool
            future.set_exception(exc)
        return future

    def shutdown(self, wait: bool = True) -> None:
        pass


class DeferredExecutor:
    """Holds submitted work so tests choose the completion order."""

    def __init__(self) -> None:
        self.jobs: List[Tuple[Future, Callable[..., Any], tuple, dict]] = []

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        future: Future = Future()
        self.jobs.append((future, fn, args, kwargs))
        return future

    def run(self, index: int) -> None:
        future, fn, args, kwargs = self.jobs[index]
        future.set_result(fn(*args, **kwargs))

    def shutdown(self, wait: bool = True) -> None:
        pass


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def inline_executor() -> InlineExecutor:
    return InlineExecutor()


@pytest.fixture
def deferred_executor() -> DeferredExecutor:
    return DeferredExecutor()
