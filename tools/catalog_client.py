"""Facet catalog clients.

Catalog endpoints feed the filter options: brands, the four apparel hierarchy
tiers, styles, patterns, fits, genders, materials, colors, sizes, release
dates, nationalities and listing conditions. Any of them can fail on its own;
a failed list degrades to an empty one so the rest of the panel still renders.

Brand lines and collections are different: they depend on the selected brands
and the caller keeps its previous options on failure, so those calls raise
:class:`CatalogUnavailableError` instead of degrading.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from browse_app.errors import CatalogUnavailableError
from models.catalog import FacetCatalog
from models.facet_option import (
    FacetOption,
    nationality_option,
    option_from_payload,
    release_date_option,
)
from tools.observability import instrument_call

LOGGER = logging.getLogger(__name__)

RELEASE_DATE_LISTS = ("years", "months", "days")

# Lists served by a plain "array of entries" endpoint.
LIST_ENDPOINTS: Dict[str, str] = {
    "departments": "/vufs/attributes/subcategory-1/values",
    "categories": "/vufs/attributes/subcategory-2/values",
    "subcategories": "/vufs/attributes/subcategory-3/values",
    "apparelTypes": "/vufs/attributes/apparel/values",
    "styles": "/vufs/attributes/style/values",
    "patterns": "/vufs/patterns",
    "fits": "/vufs/fits",
    "genders": "/vufs/genders",
    "materials": "/vufs/materials",
    "colors": "/vufs/colors",
    "sizes": "/vufs/sizes",
    "conditions": "/marketplace/conditions",
}

# Sizes come back in wearing order; everything else is sorted by label.
UNSORTED_LISTS = {"sizes"}


class _CatalogEntry(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Union[str, int]
    name: Optional[str] = None
    logo: Optional[str] = None
    hex: Optional[str] = None
    parent_id: Optional[Union[str, int]] = Field(default=None, alias="parentId")

    def to_option(self) -> FacetOption:
        return option_from_payload(self.model_dump(by_alias=True, exclude_none=True))


class _ReleaseDateOptions(BaseModel):
    years: List[int] = Field(default_factory=list)
    months: List[int] = Field(default_factory=list)
    days: List[int] = Field(default_factory=list)


def _unwrap(payload: Any, *keys: str) -> Any:
    """Accept both bare arrays and ``{"<key>": [...]}`` envelopes."""

    if isinstance(payload, dict):
        for key in (*keys, "data", "items"):
            if key in payload:
                return payload[key]
        return []
    return payload


def _entries(payload: Any, *keys: str) -> List[FacetOption]:
    """Validate a list payload entry by entry.

    A malformed entry is logged and skipped; only a payload that is not a
    list at all is an error.
    """

    raw = _unwrap(payload, *keys)
    if not isinstance(raw, list):
        raise ValueError(f"expected a list of catalog entries, got {type(raw).__name__}")
    options: List[FacetOption] = []
    for position, entry in enumerate(raw):
        try:
            options.append(_CatalogEntry.model_validate(entry).to_option())
        except (ValidationError, ValueError) as exc:
            LOGGER.warning(
                "Skipping invalid catalog entry",
                extra={"position": position, "reason": str(exc).splitlines()[0]},
            )
    return options


def sort_by_label(options: Iterable[FacetOption]) -> List[FacetOption]:
    return sorted(options, key=lambda option: option.label.casefold())


class CatalogProvider(ABC):
    """Abstract facet catalog."""

    @abstractmethod
    def get_brands(self, search: str | None = None, country: str | None = None, limit: int = 50) -> List[FacetOption]:
        """Brands, optionally narrowed by name search and country."""

    @abstractmethod
    def get_options(self, list_name: str) -> List[FacetOption]:
        """Options of one of :data:`LIST_ENDPOINTS`."""

    @abstractmethod
    def get_release_date_options(self) -> Dict[str, List[FacetOption]]:
        """Year, month and day options keyed by ``years``/``months``/``days``."""

    @abstractmethod
    def get_nationalities(self) -> List[FacetOption]:
        """Brand countries of origin."""

    @abstractmethod
    def get_brand_lines(self, brand_ids: Sequence[str]) -> List[FacetOption]:
        """Lines of the given brands. Raises :class:`CatalogUnavailableError`."""

    @abstractmethod
    def get_brand_collections(self, brand_ids: Sequence[str]) -> List[FacetOption]:
        """Collections of the given brands. Raises :class:`CatalogUnavailableError`."""

    def load_catalog(self) -> FacetCatalog:
        """Fetch every static facet list into one :class:`FacetCatalog`."""

        lists: Dict[str, List[FacetOption]] = {"brands": sort_by_label(self.get_brands())}
        for name in LIST_ENDPOINTS:
            options = self.get_options(name)
            lists[name] = options if name in UNSORTED_LISTS else sort_by_label(options)
        lists.update(self.get_release_date_options())
        lists["nationalities"] = sort_by_label(self.get_nationalities())
        return FacetCatalog(lists=lists)


class HttpCatalogProvider(CatalogProvider):
    """REST catalog client with schema validation and empty-list fallbacks."""

    def __init__(
        self,
        base_url: str,
        api_token: str | None = None,
        timeout_seconds: float = 5.0,
        brand_page_size: int = 50,
    ) -> None:
        if not base_url:
            raise ValueError("base_url is required for the catalog provider")
        self.base_url = base_url.rstrip("/")
        self.api_token = api_token
        self.timeout_seconds = timeout_seconds
        self.brand_page_size = brand_page_size

    @instrument_call("catalog_request")
    def _get_json(self, path: str, params: Dict[str, str] | None = None) -> Any:
        headers = {"Accept": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        response = requests.get(
            f"{self.base_url}{path}", params=params, headers=headers, timeout=self.timeout_seconds
        )
        response.raise_for_status()
        return response.json()

    def _fetch_entries(self, path: str, *keys: str, params: Dict[str, str] | None = None) -> List[FacetOption]:
        """Fetch a list endpoint, raising :class:`CatalogUnavailableError` on any failure."""

        try:
            return _entries(self._get_json(path=path, params=params), *keys)
        except requests.RequestException as exc:
            LOGGER.error("Catalog endpoint unreachable", extra={"path": path}, exc_info=exc)
            raise CatalogUnavailableError(f"{path} unreachable") from exc
        except (ValidationError, ValueError) as exc:
            LOGGER.error("Catalog payload schema validation failed", extra={"path": path}, exc_info=exc)
            raise CatalogUnavailableError(f"{path} returned an invalid payload") from exc

    def _fetch_or_empty(self, path: str, *keys: str, params: Dict[str, str] | None = None) -> List[FacetOption]:
        try:
            return self._fetch_entries(path, *keys, params=params)
        except CatalogUnavailableError:
            LOGGER.warning("Using empty option list", extra={"path": path})
            return []

    def get_brands(self, search: str | None = None, country: str | None = None, limit: int | None = None) -> List[FacetOption]:
        params = {"limit": str(limit or self.brand_page_size), "businessType": "brand"}
        if search:
            params["q"] = search
        if country:
            params["country"] = country
        return self._fetch_or_empty("/brands", "brands", params=params)

    def get_options(self, list_name: str) -> List[FacetOption]:
        path = LIST_ENDPOINTS.get(list_name)
        if path is None:
            raise ValueError(f"Unknown catalog list '{list_name}'. Allowed: {sorted(LIST_ENDPOINTS)}")
        return self._fetch_or_empty(path, list_name, "values")

    def get_release_date_options(self) -> Dict[str, List[FacetOption]]:
        try:
            parsed = _ReleaseDateOptions.model_validate(self._get_json(path="/skus/release-date-options"))
        except requests.RequestException as exc:
            LOGGER.error("Release date options unreachable", exc_info=exc)
            parsed = _ReleaseDateOptions()
        except (ValidationError, ValueError) as exc:
            LOGGER.error("Release date payload schema validation failed", exc_info=exc)
            parsed = _ReleaseDateOptions()
        return {kind: [release_date_option(kind, value) for value in getattr(parsed, kind)] for kind in RELEASE_DATE_LISTS}

    def get_nationalities(self) -> List[FacetOption]:
        try:
            raw = _unwrap(self._get_json(path="/brands/nationalities"), "nationalities")
        except requests.RequestException as exc:
            LOGGER.error("Nationalities unreachable", exc_info=exc)
            return []
        except ValueError as exc:
            LOGGER.error("Nationalities payload invalid", exc_info=exc)
            return []
        if not isinstance(raw, list):
            return []
        return [nationality_option(str(name).strip()) for name in raw if isinstance(name, str) and name.strip()]

    def get_brand_lines(self, brand_ids: Sequence[str]) -> List[FacetOption]:
        if not brand_ids:
            return []
        return self._fetch_entries("/brands/lines-bulk", "lines", params={"ids": ",".join(brand_ids)})

    def get_brand_collections(self, brand_ids: Sequence[str]) -> List[FacetOption]:
        if not brand_ids:
            return []
        collections = self._fetch_entries("/brands/collections-bulk", "collections", params={"ids": ",".join(brand_ids)})
        # The collection facet filters by name, not id.
        return [FacetOption(id=option.label, label=option.label) for option in collections]


class MockCatalogProvider(CatalogProvider):
    """Offline catalog backed by in-memory option lists."""

    def __init__(
        self,
        lists: Dict[str, List[FacetOption]] | None = None,
        brand_lines: Dict[str, List[FacetOption]] | None = None,
        brand_collections: Dict[str, List[FacetOption]] | None = None,
        fail_dependent: bool = False,
    ) -> None:
        self.lists = dict(lists or {})
        self.brand_lines = dict(brand_lines or {})
        self.brand_collections = dict(brand_collections or {})
        self.fail_dependent = fail_dependent
        self.calls: List[tuple] = []

    def get_brands(self, search: str | None = None, country: str | None = None, limit: int = 50) -> List[FacetOption]:
        self.calls.append(("brands", search, country))
        brands = self.lists.get("brands", [])
        if search:
            brands = [brand for brand in brands if search.lower() in brand.label.lower()]
        return brands[:limit]

    def get_options(self, list_name: str) -> List[FacetOption]:
        if list_name not in LIST_ENDPOINTS:
            raise ValueError(f"Unknown catalog list '{list_name}'. Allowed: {sorted(LIST_ENDPOINTS)}")
        return list(self.lists.get(list_name, []))

    def get_release_date_options(self) -> Dict[str, List[FacetOption]]:
        return {kind: list(self.lists.get(kind, [])) for kind in RELEASE_DATE_LISTS}

    def get_nationalities(self) -> List[FacetOption]:
        return list(self.lists.get("nationalities", []))

    def _dependent(self, source: Dict[str, List[FacetOption]], kind: str, brand_ids: Sequence[str]) -> List[FacetOption]:
        self.calls.append((kind, tuple(brand_ids)))
        if self.fail_dependent:
            raise CatalogUnavailableError(f"mock {kind} unavailable")
        options: List[FacetOption] = []
        for brand_id in brand_ids:
            options.extend(source.get(brand_id, []))
        return options

    def get_brand_lines(self, brand_ids: Sequence[str]) -> List[FacetOption]:
        return self._dependent(self.brand_lines, "lines", brand_ids) if brand_ids else []

    def get_brand_collections(self, brand_ids: Sequence[str]) -> List[FacetOption]:
        return self._dependent(self.brand_collections, "collections", brand_ids) if brand_ids else []


__all__ = [
    "CatalogProvider",
    "HttpCatalogProvider",
    "LIST_ENDPOINTS",
    "MockCatalogProvider",
    "sort_by_label",
]
