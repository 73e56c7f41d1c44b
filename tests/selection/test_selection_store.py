import pytest

from dam_backend.features.selection import SelectedItem, SelectionStore
from dam_backend.shared import ItemKind


def _asset(item_id: str, name: str = "") -> SelectedItem:
    return SelectedItem(item_id, ItemKind.ASSET, name)


def test_select_is_idempotent_and_refreshes_display_metadata() -> None:
    store = SelectionStore()
    store.select(_asset("a1", "old"))
    store.select(_asset("a2"))
    store.select(_asset("a1", "new"))

    assert len(store) == 2
    assert [i.id for i in store.items()] == ["a1", "a2"]
    assert store.items()[0].display_name == "new"


def test_select_many_then_clear_leaves_store_empty() -> None:
    store = SelectionStore()
    store.select_many(_asset(f"a{i}") for i in range(10))
    assert store.count == 10
    store.clear()
    assert len(store) == 0
    assert store.ids() == set()


def test_toggle_flips_membership() -> None:
    store = SelectionStore()
    assert store.toggle(_asset("a1")) is True
    assert "a1" in store
    assert store.toggle(_asset("a1")) is False
    assert not store.is_selected("a1")


def test_deselect_unknown_id_is_a_noop() -> None:
    store = SelectionStore()
    store.select(_asset("a1"))
    store.deselect("missing")
    store.deselect_many(["missing", "also-missing"])
    assert store.ids() == {"a1"}


def test_on_page_keeps_page_order_and_ignores_unselected() -> None:
    store = SelectionStore()
    store.select_many([_asset("a1"), _asset("a2"), _asset("a3")])

    visible = store.on_page(["a3", "x", "a1", "a3"])
    assert [i.id for i in visible] == ["a3", "a1"]


def test_toggle_page_selects_missing_then_deselects_only_that_page() -> None:
    store = SelectionStore()
    store.select(_asset("off-page"))
    store.select(_asset("p1"))
    page = [_asset("p1"), _asset("p2"), _asset("p3")]

    assert store.toggle_page(page) is True
    assert store.ids() == {"off-page", "p1", "p2", "p3"}

    assert store.toggle_page(page) is False
    assert store.ids() == {"off-page"}


def test_toggle_page_on_empty_page() -> None:
    store = SelectionStore()
    assert store.toggle_page([]) is False
    assert len(store) == 0


def test_breakdown_reports_mixed_kinds() -> None:
    store = SelectionStore()
    store.select_many([_asset("a1"), _asset("a2"), _asset("a3")])
    assert store.is_mixed_kind() is False

    store.select(SelectedItem("c1", ItemKind.COLLECTION))
    assert store.is_mixed_kind() is True
    assert store.breakdown_by_kind() == {ItemKind.ASSET: 3, ItemKind.COLLECTION: 1}
    assert store.describe_breakdown() == "Assets (3), Collections (1)"


def test_selected_item_from_mapping_accepts_loose_rows() -> None:
    item = SelectedItem.from_mapping({"id": 42, "title": "Sunset", "thumbnail_url": "/t/42.jpg", "type": "Collection"})
    assert item == SelectedItem("42", ItemKind.COLLECTION, "Sunset", "/t/42.jpg")

    plain = SelectedItem.from_mapping({"id": "a1"})
    assert plain.kind is ItemKind.ASSET
    assert plain.thumbnail_ref is None


def test_selected_item_from_mapping_requires_id() -> None:
    with pytest.raises(ValueError):
        SelectedItem.from_mapping({"name": "nameless"})
