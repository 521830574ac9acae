"""
Hierarchy aggregation over a group snapshot.

``load_group_snapshot`` is the only function here that talks to the store.
Everything else is a pure function of a ``Snapshot``: linear scans, no
caching, snapshot order (newest first) preserved.
"""

import logging
from typing import List, Optional

from aizer.config.settings import settings
from aizer.core.exceptions import NotFoundError
from aizer.database.store import Store, raise_for_error
from aizer.modules.hierarchy.schemas import (
    InventoryWithItems, SearchResult, Snapshot, SnapshotTotals, SnapshotView, SpaceContents,
)
from aizer.modules.inventories.schemas import InventoryResponse
from aizer.modules.items.schemas import ItemResponse
from aizer.modules.spaces.schemas import SpaceResponse

logger = logging.getLogger(__name__)


def load_group_snapshot(store: Store, group_id: str) -> Snapshot:
    """Fetch spaces, inventories and items of a group. Any failed query fails the whole load."""
    order = settings.snapshot_order_column
    results = {
        table: store.query(table, [("group_id", group_id)], order_by=order, desc=True)
        for table in ("spaces", "inventories", "items")
    }
    # All three queries are issued before any error is raised; none of them is published partially
    spaces = raise_for_error(results["spaces"], "load spaces")
    inventories = raise_for_error(results["inventories"], "load inventories")
    items = raise_for_error(results["items"], "load items")
    logger.debug(
        "Loaded snapshot for group %s: %d spaces, %d inventories, %d items",
        group_id, len(spaces), len(inventories), len(items),
    )
    return Snapshot(
        group_id=group_id,
        spaces=tuple(SpaceResponse(**row) for row in spaces),
        inventories=tuple(InventoryResponse(**row) for row in inventories),
        items=tuple(ItemResponse(**row) for row in items),
    )


def child_inventories(snapshot: Snapshot, space_id: str) -> List[InventoryResponse]:
    return [inv for inv in snapshot.inventories if inv.parent_space_id == space_id]


def child_inventory_count(snapshot: Snapshot, space_id: str) -> int:
    return sum(1 for inv in snapshot.inventories if inv.parent_space_id == space_id)


def child_items(snapshot: Snapshot, inventory_id: str) -> List[ItemResponse]:
    return [item for item in snapshot.items if item.inventory_id == inventory_id]


def child_item_count(snapshot: Snapshot, inventory_id: str) -> int:
    return sum(1 for item in snapshot.items if item.inventory_id == inventory_id)


def child_spaces(snapshot: Snapshot, space_id: Optional[str]) -> List[SpaceResponse]:
    return [space for space in snapshot.spaces if space.parent_id == space_id]


def root_spaces(snapshot: Snapshot) -> List[SpaceResponse]:
    return child_spaces(snapshot, None)


def nested_inventories(snapshot: Snapshot, inventory_id: str) -> List[InventoryResponse]:
    return [inv for inv in snapshot.inventories if inv.parent_inventory_id == inventory_id]


def space_items(snapshot: Snapshot, space_id: str) -> List[ItemResponse]:
    """Items placed directly in a space (no inventory)."""
    return [item for item in snapshot.items if item.space_id == space_id]


def space_contents(snapshot: Snapshot, space_id: str) -> SpaceContents:
    space = next((s for s in snapshot.spaces if s.id == space_id), None)
    if space is None:
        raise NotFoundError("Space not found")
    return SpaceContents(
        space=space,
        spaces=child_spaces(snapshot, space_id),
        inventories=[
            InventoryWithItems(
                inventory=inv,
                items=child_items(snapshot, inv.id),
                inventories=nested_inventories(snapshot, inv.id),
            )
            for inv in child_inventories(snapshot, space_id)
        ],
        items=space_items(snapshot, space_id),
    )


def snapshot_totals(snapshot: Snapshot) -> SnapshotTotals:
    return SnapshotTotals(
        spaces=len(snapshot.spaces),
        inventories=len(snapshot.inventories),
        items=sum(item.quantity for item in snapshot.items),
    )


def snapshot_view(snapshot: Snapshot) -> SnapshotView:
    return SnapshotView(
        snapshot=snapshot,
        inventory_counts={s.id: child_inventory_count(snapshot, s.id) for s in snapshot.spaces},
        item_counts={i.id: child_item_count(snapshot, i.id) for i in snapshot.inventories},
        totals=snapshot_totals(snapshot),
    )


def _number_text(value) -> str:
    # 20.0 -> "20", 19.99 -> "19.99"
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _contains(value: Optional[str], needle: str) -> bool:
    return bool(value) and needle in value.lower()


def search(snapshot: Snapshot, term: Optional[str]) -> SearchResult:
    """Case-insensitive substring search across the snapshot.

    A blank term means "not searching"; a term with no matches is a search
    with three empty result lists.
    """
    if term is None or not term.strip():
        return SearchResult(is_searching=False)
    needle = term.lower()
    return SearchResult(
        is_searching=True,
        spaces=[s for s in snapshot.spaces if _contains(s.name, needle) or _contains(s.description, needle)],
        inventories=[
            i for i in snapshot.inventories
            if _contains(i.name, needle) or _contains(i.description, needle)
        ],
        items=[
            item for item in snapshot.items
            if _contains(item.name, needle)
            or _contains(item.description, needle)
            or _contains(item.color, needle)
            or needle in _number_text(item.price)
            or needle in _number_text(item.quantity)
        ],
    )
