"""Debounced search with stale-response discarding.

Every filter change schedules a search through a :class:`Debouncer`; a burst
of changes collapses into one request for the latest selection. Requests that
do go out carry a monotonically increasing sequence number and only the
response for the most recently issued request may update the displayed state.
Older responses are dropped when they arrive, whatever the arrival order.

A failed latest request keeps the last good results on display and records an
error message instead.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional

from browse_app.errors import BrowseError
from browse_app.logging_config import get_logger, log_event
from logic.debounce import Debouncer
from logic.filter_state import FilterSnapshot
from logic.query_serialization import build_search_params, serialize_query
from models.search import AvailableFacetSet, SearchPage, SkuSummary
from tools.search_client import SearchProvider

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class SearchState:
    """What the result grid currently shows."""

    results: List[SkuSummary] = field(default_factory=list)
    total: int = 0
    has_more: bool = False
    available_facets: Optional[AvailableFacetSet] = None
    error: Optional[str] = None
    loading: bool = False
    applied_sequence: int = 0
    query: str = ""


class SearchCoordinator:
    """Turns filter snapshots into at most one live search at a time."""

    def __init__(
        self,
        provider: SearchProvider,
        debouncer: Debouncer | None = None,
        executor: Executor | None = None,
        page_size: int = 50,
        on_update: Callable[[SearchState], None] | None = None,
    ) -> None:
        self.provider = provider
        self.page_size = page_size
        self._debouncer = debouncer or Debouncer()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="search")
        self._on_update = on_update
        self._lock = threading.Lock()
        self._sequence = 0
        self._state = SearchState()

    @property
    def state(self) -> SearchState:
        with self._lock:
            return self._state

    @property
    def latest_sequence(self) -> int:
        return self._sequence

    def request(self, snapshot: FilterSnapshot, page: int = 1) -> None:
        """Schedule a debounced search for ``snapshot``, replacing any pending one."""

        self._debouncer.trigger(lambda: self._dispatch(snapshot, page))

    def flush(self) -> bool:
        """Send the pending search immediately, if there is one."""

        return self._debouncer.flush()

    def search_now(self, snapshot: FilterSnapshot, page: int = 1) -> int:
        """Skip the debounce window and search right away."""

        self._debouncer.cancel()
        return self._dispatch(snapshot, page)

    def close(self) -> None:
        self._debouncer.cancel()
        if self._owns_executor:
            self._executor.shutdown(wait=False)

    def _dispatch(self, snapshot: FilterSnapshot, page: int) -> int:
        params = build_search_params(snapshot.selection, snapshot.search_term, page=page, limit=self.page_size)
        query = serialize_query(params)
        with self._lock:
            self._sequence += 1
            sequence = self._sequence
            self._state = replace(self._state, loading=True, query=query)
        log_event(LOGGER, logging.DEBUG, "search_dispatched", sequence=sequence, facets=sorted(snapshot.selection))
        self._executor.submit(self._fetch, sequence, params)
        return sequence

    def _fetch(self, sequence: int, params: dict) -> None:
        try:
            page = self.provider.search(params)
        except BrowseError as exc:
            self._fail(sequence, exc)
            return
        except Exception as exc:
            # Loading always clears, whatever the provider raises.
            log_event(LOGGER, logging.ERROR, "search_fetch_crashed", sequence=sequence, exc_info=exc)
            self._fail(sequence, exc)
            return
        self._complete(sequence, page)

    def _complete(self, sequence: int, page: SearchPage) -> None:
        with self._lock:
            if sequence != self._sequence:
                stale = True
            else:
                stale = False
                self._state = replace(
                    self._state,
                    results=list(page.items),
                    total=page.total,
                    has_more=page.has_more,
                    available_facets=page.available_facets,
                    error=None,
                    loading=False,
                    applied_sequence=sequence,
                )
                state = self._state
        if stale:
            log_event(LOGGER, logging.DEBUG, "search_response_stale", sequence=sequence, latest=self._sequence)
            return
        log_event(LOGGER, logging.INFO, "search_applied", sequence=sequence, total=page.total)
        self._publish(state)

    def _fail(self, sequence: int, exc: BaseException) -> None:
        with self._lock:
            if sequence != self._sequence:
                stale = True
            else:
                stale = False
                self._state = replace(self._state, error=str(exc) or exc.__class__.__name__, loading=False)
                state = self._state
        if stale:
            log_event(LOGGER, logging.DEBUG, "search_failure_stale", sequence=sequence, latest=self._sequence)
            return
        log_event(LOGGER, logging.WARNING, "search_failed", sequence=sequence, error=str(exc))
        self._publish(state)

    def _publish(self, state: SearchState) -> None:
        if self._on_update is not None:
            self._on_update(state)


__all__ = ["SearchCoordinator", "SearchState"]
