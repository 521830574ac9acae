from pydantic import BaseModel
from typing import Dict, List, Tuple
from aizer.modules.inventories.schemas import InventoryResponse
from aizer.modules.items.schemas import ItemResponse
from aizer.modules.spaces.schemas import SpaceResponse


class Snapshot(BaseModel):
    """One group's spaces, inventories and items, newest first. Replaced wholesale, never patched."""
    group_id: str
    spaces: Tuple[SpaceResponse, ...] = ()
    inventories: Tuple[InventoryResponse, ...] = ()
    items: Tuple[ItemResponse, ...] = ()

    class Config:
        frozen = True


class SearchResult(BaseModel):
    is_searching: bool
    spaces: List[SpaceResponse] = []
    inventories: List[InventoryResponse] = []
    items: List[ItemResponse] = []


class InventoryWithItems(BaseModel):
    inventory: InventoryResponse
    items: List[ItemResponse]
    inventories: List[InventoryResponse] = []


class SpaceContents(BaseModel):
    space: SpaceResponse
    spaces: List[SpaceResponse]
    inventories: List[InventoryWithItems]
    items: List[ItemResponse]


class SnapshotTotals(BaseModel):
    """Dashboard header figures; items is the summed quantity, not the row count."""
    spaces: int
    inventories: int
    items: int


class SnapshotView(BaseModel):
    snapshot: Snapshot
    inventory_counts: Dict[str, int]
    item_counts: Dict[str, int]
    totals: SnapshotTotals
