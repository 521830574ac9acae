"""Snapshot loading, derived views and search."""

import threading

import pytest

from aizer.core.exceptions import FetchFailedError, NotFoundError
from aizer.modules.hierarchy.holder import SnapshotHolder
from aizer.modules.hierarchy.schemas import Snapshot
from aizer.modules.hierarchy.service import (
    child_inventories, child_inventory_count, child_item_count, child_items, child_spaces,
    load_group_snapshot, root_spaces, search, snapshot_view, space_contents,
)
from tests.fakes import FakeStore


@pytest.fixture
def populated(store: FakeStore, group):
    gid = group["id"]
    garage = store.seed("spaces", group_id=gid, name="Garage", description="Detached", parent_id=None)
    attic = store.seed("spaces", group_id=gid, name="Attic", description=None, parent_id=None)
    corner = store.seed("spaces", group_id=gid, name="Corner", description=None, parent_id=garage["id"])
    shelf = store.seed(
        "inventories", group_id=gid, name="Shelf A", description=None,
        parent_space_id=garage["id"], parent_inventory_id=None,
    )
    box = store.seed(
        "inventories", group_id=gid, name="Box", description="Cables",
        parent_space_id=None, parent_inventory_id=shelf["id"],
    )
    store.seed("items", group_id=gid, name="Drill", quantity=1, price=89.0, color="Green",
               inventory_id=shelf["id"], space_id=None)
    store.seed("items", group_id=gid, name="Lamp", quantity=2, price=19.99, color=None,
               inventory_id=None, space_id=attic["id"])
    store.seed("items", group_id=gid, name="HDMI cable", quantity=20, price=None, color=None,
               inventory_id=box["id"], space_id=None)
    return {"garage": garage, "attic": attic, "corner": corner, "shelf": shelf, "box": box}


def test_snapshot_is_newest_first(store, group, populated) -> None:
    snapshot = load_group_snapshot(store, group["id"])

    assert [s.name for s in snapshot.spaces] == ["Corner", "Attic", "Garage"]
    assert [i.name for i in snapshot.items] == ["HDMI cable", "Lamp", "Drill"]


def test_snapshot_fails_as_a_whole(store, group, populated) -> None:
    """One failed query fails the load; all three queries are still issued."""

    store.fail_next("query", "inventories", None, "Store unavailable: timeout")
    with pytest.raises(FetchFailedError):
        load_group_snapshot(store, group["id"])

    assert [c for c in store.calls if c[0] == "query"][-3:] == [
        ("query", "spaces"), ("query", "inventories"), ("query", "items"),
    ]


def test_counts_match_lists(store, group, populated) -> None:
    snapshot = load_group_snapshot(store, group["id"])

    for space in snapshot.spaces:
        assert child_inventory_count(snapshot, space.id) == len(child_inventories(snapshot, space.id))
    for inventory in snapshot.inventories:
        assert child_item_count(snapshot, inventory.id) == len(child_items(snapshot, inventory.id))

    view = snapshot_view(snapshot)
    assert view.inventory_counts[populated["garage"]["id"]] == 1
    assert view.item_counts[populated["box"]["id"]] == 1
    assert view.totals.model_dump() == {"spaces": 3, "inventories": 2, "items": 23}


def test_tree_views(store, group, populated) -> None:
    snapshot = load_group_snapshot(store, group["id"])

    assert {s.name for s in root_spaces(snapshot)} == {"Garage", "Attic"}
    assert [s.name for s in child_spaces(snapshot, populated["garage"]["id"])] == ["Corner"]

    contents = space_contents(snapshot, populated["garage"]["id"])
    assert [s.name for s in contents.spaces] == ["Corner"]
    assert [entry.inventory.name for entry in contents.inventories] == ["Shelf A"]
    assert [item.name for item in contents.inventories[0].items] == ["Drill"]
    assert [inv.name for inv in contents.inventories[0].inventories] == ["Box"]
    assert contents.items == []

    attic = space_contents(snapshot, populated["attic"]["id"])
    assert [item.name for item in attic.items] == ["Lamp"]

    with pytest.raises(NotFoundError):
        space_contents(snapshot, "missing")


@pytest.mark.parametrize("term", ["", "   ", None])
def test_blank_term_is_not_searching(store, group, populated, term) -> None:
    result = search(load_group_snapshot(store, group["id"]), term)
    assert result.is_searching is False
    assert result.spaces == result.inventories == result.items == []


def test_no_match_is_still_searching(store, group, populated) -> None:
    result = search(load_group_snapshot(store, group["id"]), "xyz-no-match")
    assert result.is_searching is True
    assert result.spaces == result.inventories == result.items == []


def test_price_substring_matches(store, group, populated) -> None:
    result = search(load_group_snapshot(store, group["id"]), "19")
    assert [item.name for item in result.items] == ["Lamp"]


def test_whole_prices_render_without_decimals(store, group, populated) -> None:
    snapshot = load_group_snapshot(store, group["id"])

    assert [i.name for i in search(snapshot, "89").items] == ["Drill"]
    assert search(snapshot, "89.0").items == []
    assert [i.name for i in search(snapshot, "20").items] == ["HDMI cable"]
    # quantity 2 of the lamp, quantity 20 of the cable
    assert {i.name for i in search(snapshot, "2").items} == {"Lamp", "HDMI cable"}


def test_search_is_case_insensitive_across_fields(store, group, populated) -> None:
    snapshot = load_group_snapshot(store, group["id"])

    result = search(snapshot, "GREEN")
    assert [i.name for i in result.items] == ["Drill"]

    # surrounding spaces are part of the term
    assert [i.name for i in search(snapshot, "hdmi ").items] == ["HDMI cable"]
    result = search(snapshot, " green")
    assert result.is_searching is True
    assert result.items == []

    result = search(snapshot, "cable")
    assert [i.name for i in result.inventories] == ["Box"]
    assert [i.name for i in result.items] == ["HDMI cable"]

    result = search(snapshot, "detached")
    assert [s.name for s in result.spaces] == ["Garage"]


def test_holder_keeps_previous_snapshot_on_failure() -> None:
    good = Snapshot(group_id="g1")
    calls = []

    def loader(group_id):
        calls.append(group_id)
        if len(calls) > 1:
            raise FetchFailedError("Failed to load items: offline")
        return good

    holder = SnapshotHolder(loader)
    assert holder.load("g1") is good

    with pytest.raises(FetchFailedError):
        holder.reload()
    assert holder.snapshot is good
    assert isinstance(holder.last_error, FetchFailedError)


def test_holder_discards_stale_and_closed_results() -> None:
    started = threading.Event()
    release = threading.Event()

    def loader(group_id):
        if group_id == "slow":
            started.set()
            release.wait(timeout=5)
        return Snapshot(group_id=group_id)

    holder = SnapshotHolder(loader)
    results = {}
    worker = threading.Thread(target=lambda: results.setdefault("slow", holder.load("slow")))
    worker.start()
    started.wait(timeout=5)

    # A newer load (group switch) wins over the one still in flight
    assert holder.load("fast").group_id == "fast"
    release.set()
    worker.join(timeout=5)

    assert results["slow"] is None
    assert holder.group_id == "fast"

    holder.close()
    assert holder.load("fast") is None


def test_snapshot_is_immutable(store, group, populated) -> None:
    snapshot = load_group_snapshot(store, group["id"])
    with pytest.raises(Exception):
        snapshot.group_id = "g2"
    with pytest.raises(Exception):
        snapshot.items[0].quantity = 99
    with pytest.raises(Exception):
        snapshot.spaces[0].parent_id = None
