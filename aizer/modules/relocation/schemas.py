from pydantic import BaseModel
from typing import Optional


class ItemMoveRequest(BaseModel):
    """Exactly one target: an inventory or a space."""
    inventory_id: Optional[str] = None
    space_id: Optional[str] = None


class InventoryMoveRequest(BaseModel):
    """At most one target; both empty detaches the inventory."""
    parent_space_id: Optional[str] = None
    parent_inventory_id: Optional[str] = None


class SpaceMoveRequest(BaseModel):
    parent_id: Optional[str] = None
