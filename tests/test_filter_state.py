"""Filter selection mutations."""

from logic.filter_state import FacetStateStore, FilterSnapshot
from models.facets import FacetKey


def test_set_single_sets_replaces_and_toggles_off() -> None:
    store = FacetStateStore()

    assert store.set_single("minPrice", "100")
    assert store.selection == {"minPrice": "100"}
    assert store.set_single("minPrice", "150")
    assert store.selection == {"minPrice": "150"}

    assert store.set_single("minPrice", "150")
    assert store.selection == {}
    assert "minPrice" not in store.selection


def test_set_single_with_empty_value_removes_key() -> None:
    store = FacetStateStore(initial={"sortBy": "newest"})

    assert store.set_single(FacetKey.SORT_BY, None)
    assert store.selection == {}
    assert not store.set_single("sortBy", "")


def test_set_single_accepts_integer_prices() -> None:
    store = FacetStateStore()

    store.set_single("maxPrice", 250)

    assert store.get("maxPrice") == "250"


def test_set_single_accepts_float_prices() -> None:
    store = FacetStateStore()

    assert store.set_single("minPrice", 10.5)
    assert store.get("minPrice") == "10.5"
    assert store.set_single("maxPrice", 200.0)
    assert store.get("maxPrice") == "200"

    assert not store.set_single("maxPrice", float("inf"))
    assert not store.set_single("maxPrice", float("nan"))
    assert not store.set_single("minPrice", -1.5)
    assert store.selection == {"minPrice": "10.5", "maxPrice": "200"}


def test_toggle_multi_keeps_pick_order_and_removes_empty_key() -> None:
    store = FacetStateStore()

    store.toggle_multi("sizeId", "S")
    store.toggle_multi("sizeId", "M")
    store.toggle_multi("sizeId", "XL")
    assert store.selection["sizeId"] == "S,M,XL"
    assert store.selected_count("sizeId") == 3

    store.toggle_multi("sizeId", "M")
    assert store.selected_values("sizeId") == ["S", "XL"]

    store.toggle_multi("sizeId", "S")
    store.toggle_multi("sizeId", "XL")
    assert "sizeId" not in store.selection


def test_toggle_twice_restores_previous_selection() -> None:
    store = FacetStateStore(initial={"brandId": "b1", "colorId": "red"})
    before = store.selection

    store.toggle_multi("colorId", "blue")
    store.toggle_multi("colorId", "blue")

    assert store.selection == before


def test_selection_follows_facet_order_not_insertion_order() -> None:
    store = FacetStateStore()

    store.toggle_multi("sizeId", "M")
    store.set_single("sortBy", "price_low")
    store.toggle_multi("brandId", "b2")

    assert list(store.selection) == ["brandId", "sizeId", "sortBy"]


def test_locked_facets_survive_every_mutation() -> None:
    store = FacetStateStore(locked={"brandId": "b1"})

    assert store.selection == {"brandId": "b1"}
    assert store.is_locked("brandId")
    assert not store.toggle_multi("brandId", "b2")
    assert not store.set_single("brandId", None)
    assert not store.has_clearable_filters()

    store.toggle_multi("sizeId", "M")
    assert store.has_clearable_filters()

    assert store.clear_all()
    assert store.selection == {"brandId": "b1"}
    assert not store.has_clearable_filters()


def test_initial_filters_cannot_override_lock() -> None:
    store = FacetStateStore(locked={"brandId": "b1"}, initial={"brandId": "b9", "colorId": "red,red,blue"})

    assert store.selection == {"brandId": "b1", "colorId": "red,blue"}


def test_clear_all_keeps_named_keys() -> None:
    store = FacetStateStore(initial={"sizeId": "M", "sortBy": "newest", "minPrice": "10"})

    store.clear_all(except_locked=["sortBy"])

    assert store.selection == {"sortBy": "newest"}


def test_bad_input_is_ignored_without_notifying() -> None:
    store = FacetStateStore(initial={"sizeId": "M"})
    seen = []
    store.subscribe(seen.append)

    assert not store.set_single("notAFacet", "x")
    assert not store.toggle_multi("sizeId", "M,L")
    assert not store.toggle_multi("sizeId", "")
    assert not store.toggle_multi("minPrice", "10")
    assert not store.set_single("minPrice", "-5")
    assert not store.set_single("minPrice", "cheap")
    assert not store.set_single("maxPrice", "nan")
    assert not store.set_single("sortBy", "cheapest")
    assert not store.set_single("minPrice", True)
    assert not store.set_search_term(42)
    assert not store.clear_all(except_locked=["sizeId"])

    assert store.selection == {"sizeId": "M"}
    assert seen == []


def test_listeners_receive_snapshots_and_can_unsubscribe() -> None:
    store = FacetStateStore()
    seen = []
    unsubscribe = store.subscribe(seen.append)

    store.toggle_multi("colorId", "red")
    store.set_search_term("linen")
    unsubscribe()
    store.toggle_multi("colorId", "blue")

    assert seen == [
        FilterSnapshot(selection={"colorId": "red"}, search_term=""),
        FilterSnapshot(selection={"colorId": "red"}, search_term="linen"),
    ]


def test_search_term_changes_only_on_new_text() -> None:
    store = FacetStateStore(search_term="  shirt ")

    assert store.search_term == "shirt"
    assert not store.set_search_term("shirt")
    assert store.set_search_term("shirts")
    assert store.snapshot().search_term == "shirts"


def test_set_single_on_a_multi_facet_toggles_off_the_same_value() -> None:
    store = FacetStateStore()

    store.set_single("genderId", "A")
    store.set_single("genderId", "A")

    assert "genderId" not in store.selection


def test_clear_all_with_locked_brand() -> None:
    store = FacetStateStore(locked={"brandId": "b1"}, initial={"sizeId": "s2"})

    store.clear_all()

    assert store.selection == {"brandId": "b1"}


def test_search_term_whitespace_is_not_a_change() -> None:
    store = FacetStateStore(search_term="shirt")
    seen = []
    store.subscribe(seen.append)

    assert not store.set_search_term("shirt  ")
    assert not store.set_search_term("  shirt")
    assert store.set_search_term(" linen shirt ")
    assert store.search_term == "linen shirt"
    assert [snapshot.search_term for snapshot in seen] == ["linen shirt"]
