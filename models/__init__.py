"""Model package exports."""

from models.facets import *  # noqa: F401,F403
from models.catalog import FacetCatalog
from models.facet_option import FacetOption, Flag, Logo, NoDecoration, Swatch, option_from_payload
from models.search import AvailableFacetSet, SearchPage, SkuSummary

__all__ = [
    "AvailableFacetSet",
    "FacetCatalog",
    "FacetOption",
    "Flag",
    "Logo",
    "NoDecoration",
    "SearchPage",
    "SkuSummary",
    "Swatch",
    "option_from_payload",
]
