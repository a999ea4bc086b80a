"""Serialize a filter selection into search request parameters."""

from __future__ import annotations

from typing import Dict, Mapping
from urllib.parse import urlencode

from models.facets import SINGLE_VALUE_KEYS, FacetKey, split_values


def build_search_params(
    selection: Mapping[str, str],
    search_term: str = "",
    page: int = 1,
    limit: int = 50,
    parents_only: bool = True,
) -> Dict[str, str]:
    """Build the ordered query parameters for a search request.

    Keys follow :class:`FacetKey` declaration order and multi-value facets are
    de-duplicated and sorted, so equal selections always produce equal
    parameters. Absent or empty facets are omitted.
    """

    params: Dict[str, str] = {}
    term = (search_term or "").strip()
    if term:
        params["q"] = term

    for key in FacetKey:
        raw = selection.get(key.value)
        if not raw:
            continue
        if key in SINGLE_VALUE_KEYS:
            value = raw.strip()
        else:
            value = ",".join(sorted(set(split_values(raw))))
        if value:
            params[key.value] = value

    params["page"] = str(max(1, int(page)))
    params["limit"] = str(max(1, int(limit)))
    if parents_only:
        params["parentsOnly"] = "true"
    return params


def serialize_query(params: Mapping[str, str]) -> str:
    """URL-encode parameters, keeping commas readable."""

    return urlencode(list(params.items()), safe=",")


__all__ = ["build_search_params", "serialize_query"]
