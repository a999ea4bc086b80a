"""Canonical facet keys for the item filters.

This module centralises the facet vocabulary shared by the state store, the
query serializer and the REST clients: which keys exist, which of them hold a
single scalar, how the apparel hierarchy chains together, and which catalog and
available-facet list backs each key.
"""

from enum import Enum
from typing import Dict, List, Optional


class FacetKey(str, Enum):
    """Filterable attribute dimensions, in serialization order."""

    BRAND = "brandId"
    STYLE = "styleId"
    PATTERN = "patternId"
    FIT = "fitId"
    GENDER = "genderId"
    DEPARTMENT = "subcategory1Id"
    CATEGORY = "subcategory2Id"
    SUBCATEGORY = "subcategory3Id"
    APPAREL = "apparelId"
    MATERIAL = "materialId"
    SIZE = "sizeId"
    COLOR = "colorId"
    LINE = "lineId"
    COLLECTION = "collection"
    NATIONALITY = "nationality"
    YEARS = "years"
    MONTHS = "months"
    DAYS = "days"
    MIN_PRICE = "minPrice"
    MAX_PRICE = "maxPrice"
    CONDITION = "condition"
    SORT_BY = "sortBy"


SINGLE_VALUE_KEYS = frozenset({FacetKey.MIN_PRICE, FacetKey.MAX_PRICE, FacetKey.SORT_BY})
MULTI_VALUE_KEYS = frozenset(key for key in FacetKey if key not in SINGLE_VALUE_KEYS)
PRICE_KEYS = frozenset({FacetKey.MIN_PRICE, FacetKey.MAX_PRICE})

SORT_ORDERS = ["newest", "price_low", "price_high", "most_watched"]

# Department -> category -> subcategory -> item.
HIERARCHY: List[FacetKey] = [
    FacetKey.DEPARTMENT,
    FacetKey.CATEGORY,
    FacetKey.SUBCATEGORY,
    FacetKey.APPAREL,
]

# Name of the catalog list (and available-facet list) behind each facet.
FACET_LISTS: Dict[FacetKey, str] = {
    FacetKey.BRAND: "brands",
    FacetKey.STYLE: "styles",
    FacetKey.PATTERN: "patterns",
    FacetKey.FIT: "fits",
    FacetKey.GENDER: "genders",
    FacetKey.DEPARTMENT: "departments",
    FacetKey.CATEGORY: "categories",
    FacetKey.SUBCATEGORY: "subcategories",
    FacetKey.APPAREL: "apparelTypes",
    FacetKey.MATERIAL: "materials",
    FacetKey.SIZE: "sizes",
    FacetKey.COLOR: "colors",
    FacetKey.LINE: "lines",
    FacetKey.COLLECTION: "collections",
    FacetKey.NATIONALITY: "nationalities",
    FacetKey.YEARS: "years",
    FacetKey.MONTHS: "months",
    FacetKey.DAYS: "days",
    FacetKey.CONDITION: "conditions",
}

# Facets the search endpoint reports present values for.
REPORTED_FACETS: List[FacetKey] = [
    FacetKey.CONDITION,
    FacetKey.BRAND,
    FacetKey.CATEGORY,
    FacetKey.DEPARTMENT,
    FacetKey.SUBCATEGORY,
    FacetKey.APPAREL,
    FacetKey.COLOR,
    FacetKey.SIZE,
]

FACET_TITLES: Dict[FacetKey, str] = {
    FacetKey.BRAND: "Brands",
    FacetKey.STYLE: "Styles",
    FacetKey.PATTERN: "Patterns",
    FacetKey.FIT: "Fits",
    FacetKey.GENDER: "Genders",
    FacetKey.DEPARTMENT: "Department",
    FacetKey.CATEGORY: "Category",
    FacetKey.SUBCATEGORY: "Subcategory",
    FacetKey.APPAREL: "Item",
    FacetKey.MATERIAL: "Materials",
    FacetKey.SIZE: "Sizes",
    FacetKey.COLOR: "Colors",
    FacetKey.LINE: "Lines",
    FacetKey.COLLECTION: "Collections",
    FacetKey.NATIONALITY: "Nationality",
    FacetKey.YEARS: "Years",
    FacetKey.MONTHS: "Months",
    FacetKey.DAYS: "Days",
    FacetKey.CONDITION: "Condition",
}


def parse_facet_key(raw: object) -> Optional[FacetKey]:
    """Return the :class:`FacetKey` for ``raw`` or ``None`` when unknown."""

    if isinstance(raw, FacetKey):
        return raw
    try:
        return FacetKey(str(raw))
    except ValueError:
        return None


def parent_of(key: FacetKey) -> Optional[FacetKey]:
    """Return the parent level of a hierarchy facet, ``None`` for the root or non-hierarchy keys."""

    if key not in HIERARCHY:
        return None
    index = HIERARCHY.index(key)
    return HIERARCHY[index - 1] if index > 0 else None


def split_values(raw: Optional[str]) -> List[str]:
    """Split a comma-joined facet value into its identifiers."""

    if not raw:
        return []
    return [value for value in raw.split(",") if value]


__all__ = [
    "FacetKey",
    "SINGLE_VALUE_KEYS",
    "MULTI_VALUE_KEYS",
    "PRICE_KEYS",
    "SORT_ORDERS",
    "HIERARCHY",
    "FACET_LISTS",
    "REPORTED_FACETS",
    "FACET_TITLES",
    "parse_facet_key",
    "parent_of",
    "split_values",
]
