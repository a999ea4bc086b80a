"""Facet catalog container."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from models.facet_option import FacetOption
from models.facets import FACET_LISTS, FacetKey


@dataclass
class FacetCatalog:
    """Every selectable option per catalog list (``sizes``, ``departments``, ...)."""

    lists: Dict[str, List[FacetOption]] = field(default_factory=dict)

    def options_for(self, key: FacetKey) -> List[FacetOption]:
        name = FACET_LISTS.get(key)
        return list(self.lists.get(name, [])) if name else []


__all__ = ["FacetCatalog"]
