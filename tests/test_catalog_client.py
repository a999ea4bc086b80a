"""Catalog REST client and offline provider."""

from __future__ import annotations

from typing import Any, Dict, List

import pytest
import requests

from browse_app.errors import CatalogUnavailableError
from models.facet_option import FacetOption, Flag, Logo, NoDecoration, Swatch
from tools.catalog_client import HttpCatalogProvider, MockCatalogProvider


class FakeResponse:
    def __init__(self, payload: Any, status_code: int = 200) -> None:
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"status {self.status_code}")

    def json(self) -> Any:
        return self.payload


def _install(monkeypatch: pytest.MonkeyPatch, routes: Dict[str, Any]) -> List[Dict[str, Any]]:
    calls: List[Dict[str, Any]] = []

    def fake_get(url: str, params=None, headers=None, timeout=None):
        calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        path = url.replace("http://api.test", "")
        route = routes[path]
        if isinstance(route, Exception):
            raise route
        return route if isinstance(route, FakeResponse) else FakeResponse(route)

    monkeypatch.setattr("tools.catalog_client.requests.get", fake_get)
    return calls


def test_list_endpoint_builds_options(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = _install(
        monkeypatch,
        {"/vufs/colors": [{"id": 1, "name": "Red", "hex": "ff0000"}, {"id": 2, "name": "Navy", "hexCode": "#000080"}]},
    )
    provider = HttpCatalogProvider("http://api.test/", api_token="secret", timeout_seconds=2.5)

    colors = provider.get_options("colors")

    assert [option.id for option in colors] == ["1", "2"]
    assert colors[0].decoration == Swatch(hex="#ff0000")
    assert colors[1].decoration == Swatch(hex="#000080")
    assert calls[0]["url"] == "http://api.test/vufs/colors"
    assert calls[0]["headers"]["Authorization"] == "Bearer secret"
    assert calls[0]["timeout"] == 2.5


def test_hierarchy_entries_keep_parent_ids(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(
        monkeypatch,
        {"/vufs/attributes/subcategory-2/values": {"values": [{"id": "c1", "name": "Tops", "parentId": "d1"}]}},
    )

    categories = HttpCatalogProvider("http://api.test").get_options("categories")

    assert categories == [FacetOption("c1", "Tops", parent_id="d1")]


def test_failed_list_degrades_to_empty(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(
        monkeypatch,
        {
            "/vufs/sizes": requests.ConnectionError("down"),
            "/vufs/fits": FakeResponse({}, status_code=500),
            "/vufs/genders": {"values": "oops"},
        },
    )
    provider = HttpCatalogProvider("http://api.test")

    assert provider.get_options("sizes") == []
    assert provider.get_options("fits") == []
    assert provider.get_options("genders") == []


def test_malformed_entries_are_skipped_not_the_whole_list(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(
        monkeypatch,
        {
            "/vufs/sizes": [{"id": "S"}, {"id": None, "name": "Broken"}, "M?", {"id": ""}, {"id": "M"}],
            "/brands/lines-bulk": {"lines": [{"name": "No id"}, {"id": "l1", "name": "Main"}]},
        },
    )
    provider = HttpCatalogProvider("http://api.test")

    assert [option.id for option in provider.get_options("sizes")] == ["S", "M"]
    assert provider.get_brand_lines(["b1"]) == [FacetOption("l1", "Main")]


def test_unknown_list_is_rejected() -> None:
    with pytest.raises(ValueError):
        HttpCatalogProvider("http://api.test").get_options("moods")


def test_brand_search_parameters_and_logos(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = _install(
        monkeypatch,
        {"/brands": {"brands": [{"id": "b1", "name": "Atelier", "brandInfo": {"logo": "https://cdn.test/a.png"}}]}},
    )
    provider = HttpCatalogProvider("http://api.test", brand_page_size=25)

    brands = provider.get_brands(search="ate", country="Italy")

    assert brands[0].decoration == Logo(url="https://cdn.test/a.png")
    assert calls[0]["params"] == {"limit": "25", "businessType": "brand", "q": "ate", "country": "Italy"}


def test_brand_lines_raise_and_skip_empty_requests(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = _install(monkeypatch, {"/brands/lines-bulk": requests.Timeout("slow")})
    provider = HttpCatalogProvider("http://api.test")

    assert provider.get_brand_lines([]) == []
    assert calls == []
    with pytest.raises(CatalogUnavailableError):
        provider.get_brand_lines(["b1", "b2"])
    assert calls[0]["params"] == {"ids": "b1,b2"}


def test_collections_filter_by_name(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, {"/brands/collections-bulk": {"collections": [{"id": 7, "name": "Spring 24"}]}})

    collections = HttpCatalogProvider("http://api.test").get_brand_collections(["b1"])

    assert collections == [FacetOption("Spring 24", "Spring 24")]


def test_release_dates_and_nationalities(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(
        monkeypatch,
        {
            "/skus/release-date-options": {"years": [2024, 2023], "months": [1, 3], "days": []},
            "/brands/nationalities": ["Italy", "  ", "Atlantis", 12],
        },
    )
    provider = HttpCatalogProvider("http://api.test")

    dates = provider.get_release_date_options()
    nationalities = provider.get_nationalities()

    assert [option.id for option in dates["years"]] == ["2024", "2023"]
    assert [option.label for option in dates["months"]] == ["January", "March"]
    assert dates["days"] == []
    assert nationalities == [
        FacetOption("Italy", "Italy", decoration=Flag(code="IT")),
        FacetOption("Atlantis", "Atlantis", decoration=NoDecoration()),
    ]


def test_release_dates_fall_back_to_empty(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, {"/skus/release-date-options": requests.ConnectionError("down")})

    dates = HttpCatalogProvider("http://api.test").get_release_date_options()

    assert dates == {"years": [], "months": [], "days": []}


def test_load_catalog_sorts_everything_but_sizes() -> None:
    provider = MockCatalogProvider(
        lists={
            "brands": [FacetOption("b2", "workwear"), FacetOption("b1", "Atelier")],
            "sizes": [FacetOption("S", "S"), FacetOption("M", "M"), FacetOption("L", "L")],
            "colors": [FacetOption("red", "Red"), FacetOption("black", "Black")],
        }
    )

    catalog = provider.load_catalog()

    assert [option.label for option in catalog.lists["brands"]] == ["Atelier", "workwear"]
    assert [option.id for option in catalog.lists["sizes"]] == ["S", "M", "L"]
    assert [option.id for option in catalog.lists["colors"]] == ["black", "red"]
    assert catalog.lists["departments"] == []
    assert set(catalog.lists) >= {"years", "months", "days", "nationalities", "conditions"}


def test_base_url_is_required() -> None:
    with pytest.raises(ValueError):
        HttpCatalogProvider("")
