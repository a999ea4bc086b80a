"""Simple entrypoint to exercise the item filters against an offline catalog."""

from concurrent.futures import ThreadPoolExecutor

from browse_app.app import ItemBrowserApp
from browse_app.config import BrowseConfig
from models.facet_option import FacetOption, Swatch
from tools.catalog_client import MockCatalogProvider
from tools.search_client import MockSearchProvider

DEMO_ITEMS = [
    {"id": "sku-1", "name": "Linen Shirt", "brandId": "b1", "sizeId": ["S", "M"], "colorId": "white", "price": 120},
    {"id": "sku-2", "name": "Denim Jacket", "brandId": "b2", "sizeId": ["M", "L"], "colorId": "blue", "price": 310},
    {"id": "sku-3", "name": "Wool Coat", "brandId": "b1", "sizeId": ["L"], "colorId": "black", "price": 640},
]


def main() -> None:
    catalog = MockCatalogProvider(
        lists={
            "brands": [FacetOption(id="b1", label="Atelier"), FacetOption(id="b2", label="Workwear Co")],
            "sizes": [FacetOption(id=size, label=size) for size in ("S", "M", "L", "XL")],
            "colors": [
                FacetOption(id="white", label="White", decoration=Swatch(hex="#ffffff")),
                FacetOption(id="blue", label="Blue", decoration=Swatch(hex="#1d4ed8")),
                FacetOption(id="black", label="Black", decoration=Swatch(hex="#000000")),
            ],
        }
    )
    app = ItemBrowserApp(
        config=BrowseConfig(preferences_path="data/preferences.json"),
        catalog_provider=catalog,
        search_provider=MockSearchProvider(DEMO_ITEMS),
        executor=ThreadPoolExecutor(max_workers=2),
    )
    session_id = app.start_session()
    session = app.get_session(session_id)
    session.store.toggle_multi("brandId", "b1")
    session.store.toggle_multi("sizeId", "L")

    session.search.flush()
    app.executor.shutdown(wait=True)
    state = session.search.state
    print(f"{state.total} result(s) for {state.query}")
    for item in state.results:
        print(f"- {item.name} ({item.id})")
    for section in app.panel(session_id):
        if section.visible and section.options:
            print(f"{section.title}: {', '.join(option.label for option in section.options)}")


if __name__ == "__main__":
    main()
