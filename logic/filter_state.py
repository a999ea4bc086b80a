"""Filter selection state with pure, UI-independent mutation operations.

The store owns one :data:`FilterSelection` (facet key -> value string) and the
free-text search term. Multi-value facets hold comma-joined identifiers in the
order they were picked. A key is present only while it has a value: clearing a
facet removes the key instead of leaving an empty string behind.

Locked facets are pinned by the hosting page (a brand page locks ``brandId``).
They are seeded into the selection at construction and no mutation touches
them afterwards.

Bad input never raises. Unknown keys, values with embedded commas, unparsable
prices and unknown sort orders are dropped with a debug log line.
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Mapping, Optional

from browse_app.logging_config import get_logger, log_event
from models.facets import (
    PRICE_KEYS,
    SINGLE_VALUE_KEYS,
    SORT_ORDERS,
    FacetKey,
    parse_facet_key,
    split_values,
)

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class FilterSnapshot:
    """Immutable view of the selection handed to listeners."""

    selection: Dict[str, str] = field(default_factory=dict)
    search_term: str = ""


Listener = Callable[[FilterSnapshot], None]


def _as_text(value: object) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return str(int(value)) if value.is_integer() else repr(value)
    if isinstance(value, str):
        return value.strip()
    return None


def _clean_scalar(key: FacetKey, text: str) -> Optional[str]:
    if key in PRICE_KEYS:
        try:
            amount = float(text)
        except ValueError:
            return None
        return text if math.isfinite(amount) and amount >= 0 else None
    if key is FacetKey.SORT_BY:
        return text if text in SORT_ORDERS else None
    return text


def _dedupe(values: Iterable[str]) -> List[str]:
    seen: Dict[str, None] = {}
    for value in values:
        seen.setdefault(value, None)
    return list(seen)


class FacetStateStore:
    """Holds the filter selection and search term for one browsing surface."""

    def __init__(
        self,
        locked: Mapping[str, object] | None = None,
        initial: Mapping[str, object] | None = None,
        search_term: str = "",
    ) -> None:
        self._mutex = threading.RLock()
        self._selection: Dict[FacetKey, str] = {}
        self._locked: Dict[FacetKey, str] = {}
        self._search_term = search_term.strip() if isinstance(search_term, str) else ""
        self._listeners: List[Listener] = []

        for raw_key, raw_value in (locked or {}).items():
            key = parse_facet_key(raw_key)
            value = self._clean(key, raw_value) if key else None
            if key is None or value is None:
                self._ignore("lock", raw_key, raw_value)
                continue
            self._locked[key] = value
            self._selection[key] = value

        for raw_key, raw_value in (initial or {}).items():
            key = parse_facet_key(raw_key)
            value = self._clean(key, raw_value) if key else None
            if key is None or value is None or key in self._locked:
                self._ignore("initial", raw_key, raw_value)
                continue
            self._selection[key] = value

    # Read access -----------------------------------------------------------

    @property
    def selection(self) -> Dict[str, str]:
        with self._mutex:
            return {key.value: value for key, value in self._ordered_items()}

    @property
    def search_term(self) -> str:
        return self._search_term

    @property
    def locked_keys(self) -> frozenset:
        return frozenset(self._locked)

    def snapshot(self) -> FilterSnapshot:
        with self._mutex:
            return FilterSnapshot(selection=self.selection, search_term=self._search_term)

    def get(self, key: str | FacetKey) -> Optional[str]:
        facet = parse_facet_key(key)
        return self._selection.get(facet) if facet else None

    def selected_values(self, key: str | FacetKey) -> List[str]:
        return split_values(self.get(key))

    def selected_count(self, key: str | FacetKey) -> int:
        return len(self.selected_values(key))

    def is_locked(self, key: str | FacetKey) -> bool:
        return parse_facet_key(key) in self._locked

    def has_clearable_filters(self) -> bool:
        """True when at least one facet other than a locked one is set."""

        with self._mutex:
            return any(key not in self._locked for key in self._selection)

    # Mutations -------------------------------------------------------------

    def set_single(self, key: str | FacetKey, value: object | None) -> bool:
        """Set, replace or clear a facet. Setting the current value clears it."""

        facet = parse_facet_key(key)
        if facet is None or facet in self._locked:
            self._ignore("set_single", key, value)
            return False

        text = _as_text(value) if value is not None else ""
        if text is None:
            self._ignore("set_single", key, value)
            return False

        with self._mutex:
            if not text:
                changed = self._selection.pop(facet, None) is not None
            else:
                cleaned = self._clean(facet, text)
                if cleaned is None:
                    self._ignore("set_single", key, value)
                    return False
                if self._selection.get(facet) == cleaned:
                    del self._selection[facet]
                else:
                    self._selection[facet] = cleaned
                changed = True
        if changed:
            self._notify()
        return changed

    def toggle_multi(self, key: str | FacetKey, value: object) -> bool:
        """Add ``value`` to a multi-value facet, or remove it when already selected."""

        facet = parse_facet_key(key)
        text = _as_text(value)
        if (
            facet is None
            or facet in SINGLE_VALUE_KEYS
            or facet in self._locked
            or not text
            or "," in text
        ):
            self._ignore("toggle_multi", key, value)
            return False

        with self._mutex:
            current = split_values(self._selection.get(facet))
            if text in current:
                current.remove(text)
            else:
                current.append(text)
            if current:
                self._selection[facet] = ",".join(current)
            else:
                del self._selection[facet]
        self._notify()
        return True

    def clear_all(self, except_locked: Iterable[str | FacetKey] | None = None) -> bool:
        """Drop every facet except locked ones and those named in ``except_locked``."""

        keep = set(self._locked)
        for raw_key in except_locked or ():
            facet = parse_facet_key(raw_key)
            if facet is not None:
                keep.add(facet)

        with self._mutex:
            removed = [key for key in self._selection if key not in keep]
            for key in removed:
                del self._selection[key]
        if removed:
            self._notify()
        return bool(removed)

    def set_search_term(self, term: object) -> bool:
        if not isinstance(term, str):
            self._ignore("set_search_term", "q", term)
            return False
        term = term.strip()
        with self._mutex:
            if term == self._search_term:
                return False
            self._search_term = term
        self._notify()
        return True

    # Listeners -------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for every effective change; returns an unsubscribe function."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # Internals -------------------------------------------------------------

    def _ordered_items(self):
        return sorted(self._selection.items(), key=lambda item: list(FacetKey).index(item[0]))

    def _clean(self, key: FacetKey, raw_value: object) -> Optional[str]:
        text = _as_text(raw_value)
        if not text:
            return None
        if key in SINGLE_VALUE_KEYS:
            return _clean_scalar(key, text)
        values = _dedupe(part.strip() for part in text.split(",") if part.strip())
        return ",".join(values) or None

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    @staticmethod
    def _ignore(operation: str, key: object, value: object) -> None:
        log_event(
            LOGGER,
            logging.DEBUG,
            "filter_input_ignored",
            operation=operation,
            facet=str(key),
            value=repr(value),
        )


__all__ = ["FacetStateStore", "FilterSnapshot", "Listener"]
