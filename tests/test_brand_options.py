"""Brand lines, collections and brand-name search."""

from logic.brand_options import BrandOptionsLoader, BrandSearch
from logic.debounce import Debouncer
from logic.filter_state import FilterSnapshot
from models.facet_option import FacetOption
from tools.catalog_client import MockCatalogProvider


def _provider(**kwargs) -> MockCatalogProvider:
    return MockCatalogProvider(
        lists={"brands": [FacetOption("b1", "Atelier"), FacetOption("b2", "Atlas"), FacetOption("b3", "Workwear")]},
        brand_lines={"b1": [FacetOption("l1", "Main")], "b2": [FacetOption("l2", "Studio")]},
        brand_collections={"b1": [FacetOption("SS24", "SS24")]},
        **kwargs,
    )


def _brands(value: str) -> FilterSnapshot:
    return FilterSnapshot(selection={"brandId": value} if value else {})


def test_lines_and_collections_follow_brand_selection(inline_executor) -> None:
    provider = _provider()
    loader = BrandOptionsLoader(provider, executor=inline_executor)

    loader.on_selection(_brands("b1"))

    options = loader.options
    assert options.brand_ids == ("b1",)
    assert [line.id for line in options.lines] == ["l1"]
    assert [collection.id for collection in options.collections] == ["SS24"]
    assert provider.calls == [("lines", ("b1",)), ("collections", ("b1",))]


def test_unchanged_brands_do_not_refetch(inline_executor) -> None:
    provider = _provider()
    loader = BrandOptionsLoader(provider, executor=inline_executor)

    loader.on_selection(FilterSnapshot(selection={"brandId": "b1", "sizeId": "M"}))
    loader.on_selection(FilterSnapshot(selection={"brandId": "b1", "sizeId": "L"}))

    assert len(provider.calls) == 2


def test_no_brand_means_no_lines_and_no_request(inline_executor) -> None:
    provider = _provider()
    loader = BrandOptionsLoader(provider, executor=inline_executor)
    loader.on_selection(_brands("b1"))

    loader.on_selection(_brands(""))

    assert loader.options.lines == []
    assert loader.options.collections == []
    assert len(provider.calls) == 2


def test_failure_keeps_previous_options(inline_executor) -> None:
    provider = _provider()
    loader = BrandOptionsLoader(provider, executor=inline_executor)
    loader.on_selection(_brands("b1"))

    provider.fail_dependent = True
    loader.on_selection(_brands("b1,b2"))

    options = loader.options
    assert [line.id for line in options.lines] == ["l1"]
    assert options.error == "mock lines unavailable"


def test_stale_brand_response_is_dropped(deferred_executor) -> None:
    loader = BrandOptionsLoader(_provider(), executor=deferred_executor)
    loader.on_selection(_brands("b1"))
    loader.on_selection(_brands("b2"))

    deferred_executor.run(1)
    deferred_executor.run(0)

    assert loader.options.brand_ids == ("b2",)
    assert [line.id for line in loader.options.lines] == ["l2"]


def test_response_after_brand_cleared_is_dropped(deferred_executor) -> None:
    loader = BrandOptionsLoader(_provider(), executor=deferred_executor)
    loader.on_selection(_brands("b1"))
    loader.on_selection(_brands(""))

    deferred_executor.run(0)

    assert loader.options.lines == []


def test_brand_search_is_debounced_and_narrowed_by_country(scheduler, inline_executor) -> None:
    provider = _provider()
    search = BrandSearch(provider, Debouncer(0.3, scheduler), inline_executor)
    assert search.results is None

    search.update("a", "Italy")
    search.update("at", "Italy")
    search.update("atl", "Italy")
    scheduler.advance()

    assert provider.calls == [("brands", "atl", "Italy")]
    assert [brand.id for brand in search.results] == ["b2"]


def test_blank_brand_search_lists_all_brands(scheduler, inline_executor) -> None:
    provider = _provider()
    search = BrandSearch(provider, Debouncer(0.3, scheduler), inline_executor)

    search.update("   ")
    assert search.flush()

    assert provider.calls == [("brands", None, None)]
    assert len(search.results) == 3


def test_brand_search_disabled_when_brand_is_locked(scheduler, inline_executor) -> None:
    provider = _provider()
    search = BrandSearch(provider, Debouncer(0.3, scheduler), inline_executor, enabled=False)

    search.update("at")
    scheduler.advance()

    assert provider.calls == []
    assert search.results is None


class CrashingCatalogProvider(MockCatalogProvider):
    crash = False

    def get_brand_lines(self, brand_ids):
        if self.crash:
            raise KeyError("lines")
        return super().get_brand_lines(brand_ids)

    def get_brands(self, search=None, country=None, limit=50):
        if self.crash:
            raise RuntimeError("brands exploded")
        return super().get_brands(search=search, country=country, limit=limit)


def test_unexpected_loader_error_keeps_previous_options(inline_executor) -> None:
    provider = CrashingCatalogProvider(
        lists={"brands": [FacetOption("b1", "Atelier")]},
        brand_lines={"b1": [FacetOption("l1", "Main")]},
    )
    loader = BrandOptionsLoader(provider, executor=inline_executor)
    loader.on_selection(_brands("b1"))

    provider.crash = True
    loader.on_selection(_brands("b1,b2"))

    assert [line.id for line in loader.options.lines] == ["l1"]
    assert loader.options.error == "'lines'"


def test_unexpected_brand_search_error_keeps_previous_results(scheduler, inline_executor) -> None:
    provider = CrashingCatalogProvider(lists={"brands": [FacetOption("b1", "Atelier"), FacetOption("b2", "Atlas")]})
    search = BrandSearch(provider, Debouncer(0.3, scheduler), inline_executor)
    search.update("atl")
    scheduler.advance()

    provider.crash = True
    search.update("ate")
    assert search.flush()

    assert [brand.id for brand in search.results] == ["b2"]
