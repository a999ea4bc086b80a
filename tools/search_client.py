"""Search endpoint clients."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Union

import requests
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from browse_app.errors import SearchUnavailableError
from models.facets import FACET_LISTS, MULTI_VALUE_KEYS, REPORTED_FACETS, split_values
from models.search import AvailableFacetSet, SearchPage, SkuSummary
from tools.observability import instrument_call

LOGGER = logging.getLogger(__name__)

_FacetLists = Dict[str, List[Union[str, int]]]


class _SearchResponse(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    items: List[SkuSummary] = Field(default_factory=list, validation_alias=AliasChoices("skus", "items"))
    total: Optional[int] = None
    page: int = 1
    has_more: bool = Field(default=False, validation_alias=AliasChoices("hasMore", "has_more"))
    available_facets: Optional[_FacetLists] = Field(default=None, validation_alias="availableFacets")
    available_facet_ids: Optional[_FacetLists] = Field(default=None, validation_alias="availableFacetIds")

    def to_page(self) -> SearchPage:
        available = None
        if self.available_facet_ids is not None:
            available = AvailableFacetSet(values=_stringify(self.available_facet_ids), exact=True)
        elif self.available_facets is not None:
            available = AvailableFacetSet(values=_stringify(self.available_facets), exact=False)
        return SearchPage(
            items=self.items,
            total=self.total if self.total is not None else len(self.items),
            page=self.page,
            has_more=self.has_more,
            available_facets=available,
        )


def _stringify(lists: _FacetLists) -> Dict[str, List[str]]:
    return {name: [str(value) for value in values] for name, values in lists.items()}


class SearchProvider(ABC):
    """Abstract search endpoint."""

    @abstractmethod
    def search(self, params: Mapping[str, str]) -> SearchPage:
        """Run a search for already-serialized parameters.

        Raises :class:`SearchUnavailableError` when no result can be produced.
        """


class HttpSearchProvider(SearchProvider):
    """REST search client with schema validation."""

    search_path = "/skus/search"

    def __init__(self, base_url: str, api_token: str | None = None, timeout_seconds: float = 5.0) -> None:
        if not base_url:
            raise ValueError("base_url is required for the search provider")
        self.base_url = base_url.rstrip("/")
        self.api_token = api_token
        self.timeout_seconds = timeout_seconds

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    @instrument_call("search_skus")
    def search(self, params: Mapping[str, str]) -> SearchPage:
        url = f"{self.base_url}{self.search_path}"
        try:
            response = requests.get(url, params=dict(params), headers=self._headers(), timeout=self.timeout_seconds)
            response.raise_for_status()
            parsed = _SearchResponse.model_validate(response.json())
        except requests.RequestException as exc:
            LOGGER.error("Search endpoint unreachable", exc_info=exc)
            raise SearchUnavailableError("search endpoint unreachable") from exc
        except (ValidationError, ValueError) as exc:
            LOGGER.error("Search payload schema validation failed", exc_info=exc)
            raise SearchUnavailableError("search payload invalid") from exc
        return parsed.to_page()


def _item_values(item: Mapping[str, Any], key: str) -> List[str]:
    raw = item.get(key)
    if raw is None:
        return []
    if isinstance(raw, (list, tuple, set)):
        return [str(value) for value in raw]
    return [str(raw)]


class MockSearchProvider(SearchProvider):
    """Offline search over an in-memory item list.

    Items are dicts with ``id``, ``name``, an optional ``price`` and one entry
    per facet key (a scalar or a list). Available facets are reported as exact
    identifiers for the same facets the real endpoint covers.
    """

    def __init__(self, items: List[Dict[str, Any]] | None = None, fail: bool = False) -> None:
        self.items = list(items or [])
        self.fail = fail
        self.calls: List[Dict[str, str]] = []

    def _matches(self, item: Mapping[str, Any], params: Mapping[str, str]) -> bool:
        term = params.get("q", "").lower()
        if term and term not in str(item.get("name", "")).lower():
            return False
        for key in MULTI_VALUE_KEYS:
            wanted = set(split_values(params.get(key.value)))
            if wanted and not wanted.intersection(_item_values(item, key.value)):
                return False
        price = item.get("price")
        if "minPrice" in params and (price is None or float(price) < float(params["minPrice"])):
            return False
        if "maxPrice" in params and (price is None or float(price) > float(params["maxPrice"])):
            return False
        return True

    def _available(self, matches: List[Dict[str, Any]]) -> AvailableFacetSet:
        values: Dict[str, List[str]] = {}
        for key in REPORTED_FACETS:
            name = FACET_LISTS[key]
            seen: Dict[str, None] = {}
            for item in matches:
                for value in _item_values(item, key.value):
                    seen.setdefault(value, None)
            values[name] = list(seen)
        return AvailableFacetSet(values=values, exact=True)

    def search(self, params: Mapping[str, str]) -> SearchPage:
        self.calls.append(dict(params))
        if self.fail:
            raise SearchUnavailableError("mock search unavailable")

        matches = [item for item in self.items if self._matches(item, params)]
        sort_by = params.get("sortBy")
        if sort_by in {"price_low", "price_high"}:
            matches.sort(key=lambda item: float(item.get("price") or 0), reverse=sort_by == "price_high")

        page = int(params.get("page", 1))
        limit = int(params.get("limit", 50))
        start = (page - 1) * limit
        window = matches[start : start + limit]
        return SearchPage(
            items=[SkuSummary.model_validate(item) for item in window],
            total=len(matches),
            page=page,
            has_more=start + limit < len(matches),
            available_facets=self._available(matches),
        )


__all__ = ["HttpSearchProvider", "MockSearchProvider", "SearchProvider"]
