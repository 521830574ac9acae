"""Demo seed script against the in-memory store."""

import pytest

from aizer.core.exceptions import NotFoundError
from aizer.modules.hierarchy.service import load_group_snapshot
from aizer.scripts.seed_demo_group import seed_demo_group
from tests.fakes import OWNER_ID


def test_seed_builds_demo_hierarchy(store, group) -> None:
    group_id = seed_demo_group(store, " Owner@Example.com ")

    assert [g["owner_id"] for g in store.rows("groups") if g["id"] == group_id] == [OWNER_ID]
    snapshot = load_group_snapshot(store, group_id)
    assert [s.name for s in snapshot.spaces] == ["Garage"]
    assert snapshot.inventories[0].parent_space_id == snapshot.spaces[0].id
    assert snapshot.items[0].inventory_id == snapshot.inventories[0].id
    # one reload per write, on top of the initial load
    assert store.calls.count(("query", "items")) >= 4


def test_seed_requires_a_registered_owner(store, group) -> None:
    with pytest.raises(NotFoundError):
        seed_demo_group(store, "nobody@example.com")
    assert [g["name"] for g in store.rows("groups")] == ["Home"]
