import logging

from aizer.core.exceptions import NotFoundError
from aizer.database.store import Store, first_or_none, raise_for_error, utcnow_iso
from aizer.modules.items.schemas import ItemCreate, ItemUpdate, ItemResponse
from aizer.modules.relocation.service import RelocationService
from aizer.modules.relocation.validation import validate_item_values, validate_name

logger = logging.getLogger(__name__)

_PLACEMENT_FIELDS = {"inventory_id", "space_id"}


class ItemService:
    def __init__(self, store: Store):
        self.store = store
        self.relocation = RelocationService(store)

    def create_item(self, item_data: ItemCreate) -> ItemResponse:
        """Create a new item placed in exactly one inventory or space"""
        name = validate_name(item_data.name, "Item")
        validate_item_values(item_data.quantity, item_data.price)
        placement = self.relocation.check_item_placement(
            item_data.group_id, item_data.inventory_id, item_data.space_id
        )
        rows = raise_for_error(self.store.insert("items", [{
            "group_id": item_data.group_id,
            "name": name,
            "quantity": item_data.quantity,
            "description": item_data.description or None,
            "photo_url": item_data.photo_url or None,
            "color": item_data.color or None,
            "price": item_data.price,
            "measures": item_data.measures,
            **placement,
        }]), "create item")
        if not rows:
            raise NotFoundError("Failed to create item")
        logger.info("Created item %s in group %s", rows[0]["id"], item_data.group_id)
        return ItemResponse(**rows[0])

    def get_item_by_id(self, item_id: str) -> ItemResponse:
        """Get item by ID"""
        row = first_or_none(raise_for_error(self.store.query("items", [("id", item_id)]), "load item"))
        if not row:
            raise NotFoundError("Item not found")
        return ItemResponse(**row)

    def update_item(self, item_id: str, item_data: ItemUpdate) -> ItemResponse:
        """Update item. When either placement field is sent, both are written in the same update."""
        item = self.get_item_by_id(item_id)
        validate_item_values(item_data.quantity, item_data.price)
        update_data = {}
        if item_data.name is not None:
            update_data["name"] = validate_name(item_data.name, "Item")
        for field in ("quantity", "description", "photo_url", "color"):
            value = getattr(item_data, field)
            if value is not None:
                update_data[field] = value if field == "quantity" else (value or None)
        # price and measures may be cleared explicitly
        for field in ("price", "measures"):
            if field in item_data.model_fields_set:
                update_data[field] = getattr(item_data, field)
        if _PLACEMENT_FIELDS & item_data.model_fields_set:
            update_data.update(self.relocation.check_item_placement(
                item.group_id, item_data.inventory_id, item_data.space_id
            ))

        if not update_data:
            return item

        update_data["updated_at"] = utcnow_iso()
        row = first_or_none(raise_for_error(
            self.store.update("items", update_data, [("id", item_id)]), "update item"
        ))
        if not row:
            raise NotFoundError("Item not found")
        return ItemResponse(**row)

    def delete_item(self, item_id: str) -> bool:
        """Delete item"""
        result = raise_for_error(self.store.delete("items", [("id", item_id)]), "delete item")
        return len(result) > 0
