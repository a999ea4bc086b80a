"""Domain errors raised at the REST client boundary."""


class BrowseError(Exception):
    """Base class for item browser failures."""


class CatalogUnavailableError(BrowseError):
    """A facet catalog endpoint could not be reached or returned an invalid payload."""


class SearchUnavailableError(BrowseError):
    """The search endpoint could not be reached or returned an invalid payload."""


__all__ = ["BrowseError", "CatalogUnavailableError", "SearchUnavailableError"]
