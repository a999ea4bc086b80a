"""Assemble the ordered facet sections a filter panel renders."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from logic.availability import filter_available, is_section_visible
from logic.brand_options import BrandOptions
from logic.dependent_facets import resolve_hierarchy
from models.catalog import FacetCatalog
from models.facet_option import FacetOption, NoDecoration
from models.facets import FACET_TITLES, HIERARCHY, FacetKey, split_values
from models.search import AvailableFacetSet

PANEL_ORDER: List[FacetKey] = [
    *HIERARCHY,
    FacetKey.NATIONALITY,
    FacetKey.BRAND,
    FacetKey.LINE,
    FacetKey.COLLECTION,
    FacetKey.YEARS,
    FacetKey.MONTHS,
    FacetKey.DAYS,
    FacetKey.SIZE,
    FacetKey.COLOR,
    FacetKey.STYLE,
    FacetKey.PATTERN,
    FacetKey.MATERIAL,
    FacetKey.FIT,
    FacetKey.GENDER,
    FacetKey.CONDITION,
]

# A section only appears once the facet it drills into has a value.
_REQUIRES: Dict[FacetKey, FacetKey] = {
    FacetKey.LINE: FacetKey.BRAND,
    FacetKey.COLLECTION: FacetKey.BRAND,
    FacetKey.MONTHS: FacetKey.YEARS,
    FacetKey.DAYS: FacetKey.MONTHS,
}


@dataclass(frozen=True)
class FacetSection:
    key: FacetKey
    title: str
    options: List[FacetOption] = field(default_factory=list)
    selected: List[str] = field(default_factory=list)
    locked: bool = False
    visible: bool = True

    @property
    def selected_count(self) -> int:
        return len(self.selected)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key.value,
            "title": self.title,
            "options": [describe_option(option) for option in self.options],
            "selected": list(self.selected),
            "selected_count": self.selected_count,
            "locked": self.locked,
            "visible": self.visible,
        }


def describe_option(option: FacetOption) -> Dict[str, Any]:
    decoration = option.decoration
    described: Dict[str, Any] = {"id": option.id, "label": option.label, "parent_id": option.parent_id}
    if not isinstance(decoration, NoDecoration):
        described["decoration"] = {"kind": type(decoration).__name__.lower(), **asdict(decoration)}
    return described


def filter_nationalities(options: Iterable[FacetOption], query: str) -> List[FacetOption]:
    """Case-insensitive substring match on the country name."""

    needle = query.strip().lower()
    return [option for option in options if not needle or needle in option.label.lower()]


def _keep_selected(
    full: Iterable[FacetOption], shown: List[FacetOption], selected: List[str]
) -> List[FacetOption]:
    """Put back selected options the parent or availability narrowing removed.

    A selection that no longer fits its parent stays in the query until the
    user clears it, so it has to stay renderable too. Catalog order is kept.
    """

    shown_ids = {option.id for option in shown}
    missing = [value for value in selected if value not in shown_ids]
    if not missing:
        return shown
    wanted = shown_ids.union(missing)
    return [option for option in full if option.id in wanted]


def build_facet_panel(
    catalog: FacetCatalog,
    selection: Mapping[str, str],
    available: Optional[AvailableFacetSet] = None,
    brand_options: Optional[BrandOptions] = None,
    brand_results: Optional[List[FacetOption]] = None,
    locked: Iterable[FacetKey] = (),
    nationality_query: str = "",
) -> List[FacetSection]:
    """Build every section in display order.

    Hierarchy levels go through the dependent resolver first and every list
    then goes through the availability filter. Hidden sections are still
    returned with ``visible=False`` so callers can tell them apart from empty
    ones.
    """

    brand_options = brand_options or BrandOptions()
    locked_keys = set(locked)
    hierarchy = resolve_hierarchy(catalog, selection)
    sections: List[FacetSection] = []

    for key in PANEL_ORDER:
        if key in hierarchy:
            options = hierarchy[key]
        elif key is FacetKey.LINE:
            options = brand_options.lines
        elif key is FacetKey.COLLECTION:
            options = brand_options.collections
        elif key is FacetKey.BRAND and brand_results is not None:
            options = brand_results
        elif key is FacetKey.NATIONALITY:
            options = filter_nationalities(catalog.options_for(key), nationality_query)
        else:
            options = catalog.options_for(key)

        selected = split_values(selection.get(key.value))
        required = _REQUIRES.get(key)
        visible = is_section_visible(key, available, selection)
        if required is not None and not selection.get(required.value) and not selected:
            visible = False

        shown = filter_available(key, options, available)
        if key in hierarchy:
            shown = _keep_selected(catalog.options_for(key), shown, selected)

        sections.append(
            FacetSection(
                key=key,
                title=FACET_TITLES[key],
                options=shown,
                selected=selected,
                locked=key in locked_keys,
                visible=visible,
            )
        )
    return sections


__all__ = ["FacetSection", "PANEL_ORDER", "build_facet_panel", "describe_option", "filter_nationalities"]
