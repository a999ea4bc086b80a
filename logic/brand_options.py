"""Brand-dependent option lists.

Lines and collections only exist once at least one brand is in effect (picked
by the user or locked by the hosting page). They load on their own chain,
independent of the main search, and either chain may finish first. Like the
search, each chain tags requests with a sequence number and drops responses
that are no longer the latest.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from browse_app.errors import CatalogUnavailableError
from browse_app.logging_config import get_logger, log_event
from logic.debounce import Debouncer
from logic.filter_state import FilterSnapshot
from models.facet_option import FacetOption
from models.facets import FacetKey, split_values
from tools.catalog_client import CatalogProvider

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class BrandOptions:
    brand_ids: Tuple[str, ...] = ()
    lines: List[FacetOption] = field(default_factory=list)
    collections: List[FacetOption] = field(default_factory=list)
    error: Optional[str] = None


class BrandOptionsLoader:
    """Keeps lines and collections in step with the effective brand selection."""

    def __init__(self, provider: CatalogProvider, executor: Executor | None = None) -> None:
        self.provider = provider
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="brand-options")
        self._lock = threading.Lock()
        self._sequence = 0
        self._requested: Tuple[str, ...] = ()
        self._options = BrandOptions()

    @property
    def options(self) -> BrandOptions:
        with self._lock:
            return self._options

    def on_selection(self, snapshot: FilterSnapshot) -> None:
        """Store listener: refetch when the set of effective brands changes."""

        brand_ids = tuple(split_values(snapshot.selection.get(FacetKey.BRAND.value)))
        with self._lock:
            if brand_ids == self._requested:
                return
            self._requested = brand_ids
            self._sequence += 1
            sequence = self._sequence
            if not brand_ids:
                self._options = BrandOptions()
                return
        self._executor.submit(self._fetch, sequence, brand_ids)

    def _fetch(self, sequence: int, brand_ids: Tuple[str, ...]) -> None:
        try:
            lines = self.provider.get_brand_lines(list(brand_ids))
            collections = self.provider.get_brand_collections(list(brand_ids))
        except CatalogUnavailableError as exc:
            self._fail(sequence, brand_ids, exc)
            return
        except Exception as exc:
            log_event(LOGGER, logging.ERROR, "brand_options_crashed", sequence=sequence, exc_info=exc)
            self._fail(sequence, brand_ids, exc)
            return
        with self._lock:
            if sequence != self._sequence:
                log_event(LOGGER, logging.DEBUG, "brand_options_stale", sequence=sequence)
                return
            self._options = BrandOptions(brand_ids=brand_ids, lines=lines, collections=collections)

    def _fail(self, sequence: int, brand_ids: Tuple[str, ...], exc: BaseException) -> None:
        """Keep the previous lines and collections and record the error."""

        with self._lock:
            if sequence == self._sequence:
                self._options = replace(self._options, error=str(exc) or exc.__class__.__name__)
        log_event(LOGGER, logging.WARNING, "brand_options_failed", brands=list(brand_ids), error=str(exc))

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=False)


class BrandSearch:
    """Debounced brand-name search narrowed by the selected nationality.

    Disabled when the hosting page locks ``brandId``; ``results`` stays
    ``None`` until a search has completed so callers fall back to the catalog.
    """

    def __init__(
        self,
        provider: CatalogProvider,
        debouncer: Debouncer | None = None,
        executor: Executor | None = None,
        enabled: bool = True,
        limit: int = 50,
    ) -> None:
        self.provider = provider
        self.enabled = enabled
        self.limit = limit
        self._debouncer = debouncer or Debouncer()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="brand-search")
        self._lock = threading.Lock()
        self._sequence = 0
        self._results: Optional[List[FacetOption]] = None

    @property
    def results(self) -> Optional[List[FacetOption]]:
        with self._lock:
            return self._results

    def update(self, term: str, country: str | None = None) -> None:
        if not self.enabled:
            return
        self._debouncer.trigger(lambda: self._dispatch(term.strip(), country or None))

    def flush(self) -> bool:
        return self._debouncer.flush()

    def _dispatch(self, term: str, country: str | None) -> None:
        with self._lock:
            self._sequence += 1
            sequence = self._sequence
        self._executor.submit(self._fetch, sequence, term, country)

    def _fetch(self, sequence: int, term: str, country: str | None) -> None:
        try:
            brands = self.provider.get_brands(search=term or None, country=country, limit=self.limit)
        except Exception as exc:
            # Previous results stay on display.
            log_event(LOGGER, logging.ERROR, "brand_search_failed", sequence=sequence, term=term, exc_info=exc)
            return
        with self._lock:
            if sequence == self._sequence:
                self._results = brands

    def close(self) -> None:
        self._debouncer.cancel()
        if self._owns_executor:
            self._executor.shutdown(wait=False)


__all__ = ["BrandOptions", "BrandOptionsLoader", "BrandSearch"]
