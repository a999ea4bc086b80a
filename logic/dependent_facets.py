"""Dependent option lists for the department -> category -> subcategory -> item chain."""

from __future__ import annotations

from typing import Dict, List, Mapping

from models.catalog import FacetCatalog
from models.facet_option import FacetOption
from models.facets import HIERARCHY, FacetKey, parent_of, split_values


def visible_options(catalog: FacetCatalog, selection: Mapping[str, str], key: FacetKey) -> List[FacetOption]:
    """Options of ``key`` that belong to the selected parent values.

    With no parent selection (or for the root level) the full list is returned.
    """

    options = catalog.options_for(key)
    parent = parent_of(key)
    if parent is None:
        return options
    parent_values = set(split_values(selection.get(parent.value)))
    if not parent_values:
        return options
    return [option for option in options if option.parent_id in parent_values]


def resolve_hierarchy(catalog: FacetCatalog, selection: Mapping[str, str]) -> Dict[FacetKey, List[FacetOption]]:
    """Visible options for every hierarchy level."""

    return {key: visible_options(catalog, selection, key) for key in HIERARCHY}


def orphaned_selections(catalog: FacetCatalog, selection: Mapping[str, str]) -> Dict[FacetKey, List[str]]:
    """Selected child ids whose parent option is not among the parent's selected values.

    Orphans are reported, never cleared: they stay selected until the user
    removes them.
    """

    orphans: Dict[FacetKey, List[str]] = {}
    for key in HIERARCHY[1:]:
        parent = parent_of(key)
        parent_values = set(split_values(selection.get(parent.value)))
        selected = split_values(selection.get(key.value))
        if not parent_values or not selected:
            continue
        parents_by_id = {option.id: option.parent_id for option in catalog.options_for(key)}
        stale = [value for value in selected if parents_by_id.get(value) not in parent_values]
        if stale:
            orphans[key] = stale
    return orphans


__all__ = ["orphaned_selections", "resolve_hierarchy", "visible_options"]
