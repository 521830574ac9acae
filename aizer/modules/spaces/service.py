import logging

from aizer.core.exceptions import NotFoundError
from aizer.database.store import Store, first_or_none, raise_for_error, utcnow_iso
from aizer.modules.relocation.service import RelocationService
from aizer.modules.relocation.validation import validate_name
from aizer.modules.spaces.schemas import SpaceCreate, SpaceUpdate, SpaceResponse

logger = logging.getLogger(__name__)


class SpaceService:
    def __init__(self, store: Store):
        self.store = store
        self.relocation = RelocationService(store)

    def create_space(self, space_data: SpaceCreate) -> SpaceResponse:
        """Create a new space, optionally nested under another space of the same group"""
        name = validate_name(space_data.name, "Space")
        parent_id = self.relocation.check_space_parent(space_data.group_id, None, space_data.parent_id)
        rows = raise_for_error(self.store.insert("spaces", [{
            "group_id": space_data.group_id,
            "name": name,
            "description": space_data.description or None,
            "photo_url": space_data.photo_url or None,
            "parent_id": parent_id,
        }]), "create space")
        if not rows:
            raise NotFoundError("Failed to create space")
        logger.info("Created space %s in group %s", rows[0]["id"], space_data.group_id)
        return SpaceResponse(**rows[0])

    def get_space_by_id(self, space_id: str) -> SpaceResponse:
        """Get space by ID"""
        row = first_or_none(raise_for_error(self.store.query("spaces", [("id", space_id)]), "load space"))
        if not row:
            raise NotFoundError("Space not found")
        return SpaceResponse(**row)

    def update_space(self, space_id: str, space_data: SpaceUpdate) -> SpaceResponse:
        """Update space; parent_id is applied only when present in the payload"""
        space = self.get_space_by_id(space_id)
        update_data = {}
        if space_data.name is not None:
            update_data["name"] = validate_name(space_data.name, "Space")
        if space_data.description is not None:
            update_data["description"] = space_data.description or None
        if space_data.photo_url is not None:
            update_data["photo_url"] = space_data.photo_url or None
        if "parent_id" in space_data.model_fields_set:
            update_data["parent_id"] = self.relocation.check_space_parent(
                space.group_id, space_id, space_data.parent_id
            )

        if not update_data:
            return space

        update_data["updated_at"] = utcnow_iso()
        row = first_or_none(raise_for_error(
            self.store.update("spaces", update_data, [("id", space_id)]), "update space"
        ))
        if not row:
            raise NotFoundError("Space not found")
        return SpaceResponse(**row)

    def delete_space(self, space_id: str) -> bool:
        """Delete space. Fails with HasChildrenError while it still holds spaces, inventories or items."""
        result = raise_for_error(self.store.delete("spaces", [("id", space_id)]), "delete space")
        return len(result) > 0
