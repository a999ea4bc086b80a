"""Search result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SkuSummary(BaseModel):
    """One item card in the result grid."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    name: str = ""
    code: Optional[str] = None
    brand_name: Optional[str] = Field(default=None, alias="brandName")
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    price: Optional[float] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value


@dataclass(frozen=True)
class AvailableFacetSet:
    """Facet values present among the current search results.

    ``exact`` marks server-issued option identifiers. Without it the lists hold
    labels or ids that can only be matched loosely.
    """

    values: Dict[str, List[str]] = field(default_factory=dict)
    exact: bool = False

    def list_for(self, name: str) -> Optional[List[str]]:
        """Return the list for ``name`` or ``None`` when the server sent none."""

        return self.values.get(name)


@dataclass
class SearchPage:
    """One page of search results."""

    items: List[SkuSummary] = field(default_factory=list)
    total: int = 0
    page: int = 1
    has_more: bool = False
    available_facets: Optional[AvailableFacetSet] = None


__all__ = ["AvailableFacetSet", "SearchPage", "SkuSummary"]
