import logging

from aizer.core.exceptions import NotFoundError
from aizer.database.store import Store, first_or_none, raise_for_error, utcnow_iso
from aizer.modules.inventories.schemas import InventoryCreate, InventoryUpdate, InventoryResponse
from aizer.modules.relocation.service import RelocationService
from aizer.modules.relocation.validation import validate_name

logger = logging.getLogger(__name__)

_PARENT_FIELDS = {"parent_space_id", "parent_inventory_id"}


class InventoryService:
    def __init__(self, store: Store):
        self.store = store
        self.relocation = RelocationService(store)

    def create_inventory(self, inventory_data: InventoryCreate) -> InventoryResponse:
        """Create a new inventory under at most one parent (a space or another inventory)"""
        name = validate_name(inventory_data.name, "Inventory")
        parent_patch = self.relocation.check_inventory_parent(
            inventory_data.group_id,
            None,
            inventory_data.parent_space_id,
            inventory_data.parent_inventory_id,
        )
        rows = raise_for_error(self.store.insert("inventories", [{
            "group_id": inventory_data.group_id,
            "name": name,
            "description": inventory_data.description or None,
            **parent_patch,
        }]), "create inventory")
        if not rows:
            raise NotFoundError("Failed to create inventory")
        logger.info("Created inventory %s in group %s", rows[0]["id"], inventory_data.group_id)
        return InventoryResponse(**rows[0])

    def get_inventory_by_id(self, inventory_id: str) -> InventoryResponse:
        """Get inventory by ID"""
        row = first_or_none(raise_for_error(
            self.store.query("inventories", [("id", inventory_id)]), "load inventory"
        ))
        if not row:
            raise NotFoundError("Inventory not found")
        return InventoryResponse(**row)

    def update_inventory(self, inventory_id: str, inventory_data: InventoryUpdate) -> InventoryResponse:
        """Update inventory. When either parent field is sent, both are written in the same update."""
        inventory = self.get_inventory_by_id(inventory_id)
        update_data = {}
        if inventory_data.name is not None:
            update_data["name"] = validate_name(inventory_data.name, "Inventory")
        if inventory_data.description is not None:
            update_data["description"] = inventory_data.description or None
        if _PARENT_FIELDS & inventory_data.model_fields_set:
            update_data.update(self.relocation.check_inventory_parent(
                inventory.group_id,
                inventory_id,
                inventory_data.parent_space_id,
                inventory_data.parent_inventory_id,
            ))

        if not update_data:
            return inventory

        update_data["updated_at"] = utcnow_iso()
        row = first_or_none(raise_for_error(
            self.store.update("inventories", update_data, [("id", inventory_id)]), "update inventory"
        ))
        if not row:
            raise NotFoundError("Inventory not found")
        return InventoryResponse(**row)

    def delete_inventory(self, inventory_id: str) -> bool:
        """Delete inventory. Fails with HasChildrenError while it still holds items or inventories."""
        result = raise_for_error(self.store.delete("inventories", [("id", inventory_id)]), "delete inventory")
        return len(result) > 0
