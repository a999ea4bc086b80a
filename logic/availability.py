"""Hide facet options that match nothing in the current results."""

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional

from models.facet_option import FacetOption
from models.facets import FACET_LISTS, FacetKey
from models.search import AvailableFacetSet


def _available_list(key: FacetKey, available: Optional[AvailableFacetSet]) -> Optional[List[str]]:
    if available is None:
        return None
    name = FACET_LISTS.get(key)
    return available.list_for(name) if name else None


def is_option_available(option: FacetOption, values: Iterable[str], exact: bool = False) -> bool:
    """Match an option against an available-facet list.

    Server-issued identifiers are compared exactly. Legacy lists mix labels and
    ids, so those are compared case-insensitively against both.
    """

    if exact:
        return option.id in set(values)
    lowered = {str(value).lower() for value in values}
    return option.label.lower() in lowered or option.id.lower() in lowered


def filter_available(
    key: FacetKey, options: List[FacetOption], available: Optional[AvailableFacetSet]
) -> List[FacetOption]:
    """Options of ``key`` present in ``available``; pass-through when the server sent no list."""

    values = _available_list(key, available)
    if values is None:
        return options
    return [option for option in options if is_option_available(option, values, exact=available.exact)]


def is_section_visible(
    key: FacetKey, available: Optional[AvailableFacetSet], selection: Mapping[str, str]
) -> bool:
    """A facet section hides only when its list is present, empty, and nothing is selected."""

    values = _available_list(key, available)
    if values is None or values:
        return True
    return bool(selection.get(key.value))


__all__ = ["filter_available", "is_option_available", "is_section_visible"]
