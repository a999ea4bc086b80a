"""In-process registry of live filter sessions."""
from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Optional

from logic.brand_options import BrandOptionsLoader, BrandSearch
from logic.filter_state import FacetStateStore
from logic.search_coordinator import SearchCoordinator


@dataclass
class FilterSession:
    """Everything one browsing surface owns: its selection and the chains it drives."""

    session_id: str
    store: FacetStateStore
    search: SearchCoordinator
    brand_options: BrandOptionsLoader
    brand_search: BrandSearch
    brand_query: str = ""
    last_nationality: Optional[str] = None
    created_at: float = field(default_factory=time.time)

    def close(self) -> None:
        self.search.close()
        self.brand_options.close()
        self.brand_search.close()


class FilterSessionRegistry:
    """Bounded map of session id to :class:`FilterSession`; the oldest is evicted first."""

    def __init__(self, max_sessions: int = 500) -> None:
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, FilterSession]" = OrderedDict()
        self._lock = threading.Lock()

    def add(self, session: FilterSession) -> None:
        evicted = []
        with self._lock:
            self._sessions[session.session_id] = session
            while len(self._sessions) > self.max_sessions:
                _, oldest = self._sessions.popitem(last=False)
                evicted.append(oldest)
        for session_to_close in evicted:
            session_to_close.close()

    def get(self, session_id: str) -> FilterSession:
        with self._lock:
            try:
                return self._sessions[session_id]
            except KeyError:
                raise KeyError(f"Unknown session_id {session_id}") from None

    def remove(self, session_id: str) -> bool:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.close()
        return True

    def close_all(self) -> None:
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.close()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions


__all__ = ["FilterSession", "FilterSessionRegistry"]
