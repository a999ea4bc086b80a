"""Item browser bootstrap."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import List, Mapping, Optional
from uuid import uuid4

from browse_app.config import BrowseConfig
from browse_app.logging_config import configure_logging, correlation_context, get_logger, log_event
from logic.brand_options import BrandOptionsLoader, BrandSearch
from logic.debounce import Debouncer, Scheduler, TimerScheduler
from logic.facet_panel import FacetSection, build_facet_panel
from logic.filter_state import FacetStateStore, FilterSnapshot
from logic.search_coordinator import SearchCoordinator, SearchState
from memory.filter_sessions import FilterSession, FilterSessionRegistry
from memory.preferences import JSONPreferenceStore
from models.catalog import FacetCatalog
from models.facets import FacetKey
from tools.catalog_client import CatalogProvider, HttpCatalogProvider
from tools.search_client import HttpSearchProvider, SearchProvider

LOGGER = get_logger(__name__)


class ItemBrowserApp:
    """Wires the filter state, search chains and REST clients together."""

    def __init__(
        self,
        config: BrowseConfig | None = None,
        catalog_provider: CatalogProvider | None = None,
        search_provider: SearchProvider | None = None,
        executor: Executor | None = None,
        scheduler: Scheduler | None = None,
        preferences: JSONPreferenceStore | None = None,
    ) -> None:
        self.config = config or BrowseConfig.from_env()
        configure_logging()

        self.catalog_provider = catalog_provider or HttpCatalogProvider(
            base_url=self.config.api_base_url,
            api_token=self.config.api_token,
            timeout_seconds=self.config.request_timeout_seconds,
            brand_page_size=self.config.brand_page_size,
        )
        self.search_provider = search_provider or HttpSearchProvider(
            base_url=self.config.api_base_url,
            api_token=self.config.api_token,
            timeout_seconds=self.config.request_timeout_seconds,
        )
        self.preferences = preferences or JSONPreferenceStore(
            self.config.preferences_path or "data/preferences.json"
        )
        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(max_workers=4, thread_name_prefix="browse")
        self.scheduler = scheduler or TimerScheduler()
        self.sessions = FilterSessionRegistry()
        self._catalog: Optional[FacetCatalog] = None
        self._catalog_lock = threading.Lock()

    # Catalog -----------------------------------------------------------------

    @property
    def catalog(self) -> FacetCatalog:
        """The facet catalog, loaded on first use."""

        with self._catalog_lock:
            if self._catalog is None:
                self._catalog = self.catalog_provider.load_catalog()
                log_event(
                    LOGGER,
                    logging.INFO,
                    "catalog_loaded",
                    lists={name: len(options) for name, options in self._catalog.lists.items()},
                )
            return self._catalog

    def refresh_catalog(self) -> FacetCatalog:
        with self._catalog_lock:
            self._catalog = None
        return self.catalog

    # Sessions ----------------------------------------------------------------

    def start_session(
        self,
        locked: Mapping[str, str] | None = None,
        initial: Mapping[str, str] | None = None,
        search_term: str = "",
    ) -> str:
        """Create a filter session, kick off its first search and return its id."""

        session_id = str(uuid4())
        with correlation_context(session_id):
            store = FacetStateStore(locked=locked, initial=initial, search_term=search_term)
            session = FilterSession(
                session_id=session_id,
                store=store,
                search=SearchCoordinator(
                    self.search_provider,
                    debouncer=self._debouncer(),
                    executor=self.executor,
                    page_size=self.config.page_size,
                ),
                brand_options=BrandOptionsLoader(self.catalog_provider, executor=self.executor),
                brand_search=BrandSearch(
                    self.catalog_provider,
                    debouncer=self._debouncer(),
                    executor=self.executor,
                    enabled=not store.is_locked(FacetKey.BRAND),
                    limit=self.config.brand_page_size,
                ),
            )
            store.subscribe(lambda snapshot: self._on_change(session, snapshot))
            self.sessions.add(session)

            snapshot = store.snapshot()
            session.last_nationality = store.get(FacetKey.NATIONALITY)
            if session.last_nationality:
                session.brand_search.update("", session.last_nationality)
            session.brand_options.on_selection(snapshot)
            session.search.request(snapshot)
            log_event(LOGGER, logging.INFO, "session_started", session_id=session_id, locked=sorted(store.locked_keys))
        return session_id

    def get_session(self, session_id: str) -> FilterSession:
        return self.sessions.get(session_id)

    def end_session(self, session_id: str) -> bool:
        return self.sessions.remove(session_id)

    def set_brand_query(self, session_id: str, term: str) -> None:
        """Update the brand-name search box of a session."""

        session = self.get_session(session_id)
        session.brand_query = term
        session.brand_search.update(term, session.store.get(FacetKey.NATIONALITY))

    def panel(self, session_id: str, nationality_query: str = "") -> List[FacetSection]:
        session = self.get_session(session_id)
        return build_facet_panel(
            self.catalog,
            session.store.selection,
            available=session.search.state.available_facets,
            brand_options=session.brand_options.options,
            brand_results=session.brand_search.results,
            locked=session.store.locked_keys,
            nationality_query=nationality_query,
        )

    def results(self, session_id: str, flush: bool = True) -> SearchState:
        """Current results; ``flush`` sends a pending debounced search first."""

        session = self.get_session(session_id)
        if flush:
            session.search.flush()
        return session.search.state

    def close(self) -> None:
        self.sessions.close_all()
        if self._owns_executor:
            self.executor.shutdown(wait=False)

    # Internals ---------------------------------------------------------------

    def _debouncer(self) -> Debouncer:
        return Debouncer(delay_seconds=self.config.debounce_seconds, scheduler=self.scheduler)

    def _on_change(self, session: FilterSession, snapshot: FilterSnapshot) -> None:
        session.search.request(snapshot)
        session.brand_options.on_selection(snapshot)
        nationality = snapshot.selection.get(FacetKey.NATIONALITY.value)
        if nationality != session.last_nationality:
            session.last_nationality = nationality
            session.brand_search.update(session.brand_query, nationality)


__all__ = ["ItemBrowserApp"]
