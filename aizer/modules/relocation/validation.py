"""
Invariant helpers shared by create, edit and move flows.

All checks run before any store command is issued. The patch builders always
return both columns of a mutually exclusive pair so a single update call
sets one reference and clears the other.
"""

from typing import Dict, List, Mapping, Optional

from aizer.core.exceptions import ValidationError


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    # Forms submit "" for "no selection"
    return value or None


def placement_patch(inventory_id: Optional[str], space_id: Optional[str]) -> Dict[str, Optional[str]]:
    """Item placement: exactly one of inventory_id / space_id."""
    inventory_id, space_id = _blank_to_none(inventory_id), _blank_to_none(space_id)
    if inventory_id and space_id:
        raise ValidationError("An item can be placed in an inventory or a space, not both")
    if not inventory_id and not space_id:
        raise ValidationError("An item must be placed in an inventory or a space")
    return {"inventory_id": inventory_id, "space_id": space_id}


def inventory_parent_patch(
    parent_space_id: Optional[str],
    parent_inventory_id: Optional[str],
    inventory_id: Optional[str] = None,
) -> Dict[str, Optional[str]]:
    """Inventory parent: at most one of parent_space_id / parent_inventory_id, never itself."""
    parent_space_id, parent_inventory_id = _blank_to_none(parent_space_id), _blank_to_none(parent_inventory_id)
    if parent_space_id and parent_inventory_id:
        raise ValidationError("An inventory cannot have both a parent space and a parent inventory")
    if inventory_id is not None and parent_inventory_id == inventory_id:
        raise ValidationError("An inventory cannot be its own parent")
    return {"parent_space_id": parent_space_id, "parent_inventory_id": parent_inventory_id}


def space_parent(space_id: Optional[str], parent_id: Optional[str]) -> Optional[str]:
    parent_id = _blank_to_none(parent_id)
    if space_id is not None and parent_id == space_id:
        raise ValidationError("A space cannot be its own parent")
    return parent_id


def validate_item_values(quantity: Optional[int], price: Optional[float]) -> None:
    if quantity is not None and quantity < 0:
        raise ValidationError("Quantity cannot be negative")
    if price is not None and price < 0:
        raise ValidationError("Price cannot be negative")


def validate_name(name: Optional[str], label: str) -> str:
    if name is None or not name.strip():
        raise ValidationError(f"{label} name is required")
    return name.strip()


def ancestor_chain(start_id: Optional[str], parent_of: Mapping[str, Optional[str]]) -> List[str]:
    """Ids from start_id up to its root, inclusive. Stops if the stored data already loops."""
    chain: List[str] = []
    seen = set()
    current = start_id
    while current is not None and current not in seen:
        seen.add(current)
        chain.append(current)
        current = parent_of.get(current)
    return chain


def ensure_no_cycle(
    node_id: Optional[str],
    new_parent_id: Optional[str],
    parent_of: Mapping[str, Optional[str]],
    label: str,
) -> None:
    """Reject a reparent that would make node_id its own ancestor (A -> B -> C -> A)."""
    if node_id is None or new_parent_id is None:
        return
    if new_parent_id == node_id:
        raise ValidationError(f"A {label} cannot be its own parent")
    if node_id in ancestor_chain(new_parent_id, parent_of):
        raise ValidationError(f"Cannot move a {label} under one of its descendants")
