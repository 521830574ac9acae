import logging
from typing import List

from aizer.core.exceptions import NotFoundError
from aizer.database.store import Store, first_or_none, raise_for_error, utcnow_iso
from aizer.modules.groups.schemas import GroupCreate, GroupUpdate, GroupResponse
from aizer.modules.relocation.validation import validate_name

logger = logging.getLogger(__name__)

# Children first so no delete trips a foreign key on its way out
_GROUP_CASCADE = ("items", "inventories", "spaces", "group_members")


class GroupService:
    def __init__(self, store: Store):
        self.store = store

    def create_group(self, group_data: GroupCreate, user_id: str) -> GroupResponse:
        """Create a new group owned by user_id"""
        rows = raise_for_error(self.store.insert("groups", [{
            "name": validate_name(group_data.name, "Group"),
            "description": group_data.description or None,
            "owner_id": user_id,
        }]), "create group")
        if not rows:
            raise NotFoundError("Failed to create group")
        logger.info("User %s created group %s", user_id, rows[0]["id"])
        return GroupResponse(**rows[0])

    def get_group_by_id(self, group_id: str) -> GroupResponse:
        """Get group by ID"""
        row = first_or_none(raise_for_error(self.store.query("groups", [("id", group_id)]), "load group"))
        if not row:
            raise NotFoundError("Group not found")
        return GroupResponse(**row)

    def update_group(self, group_id: str, group_data: GroupUpdate) -> GroupResponse:
        """Update group"""
        update_data = {}
        if group_data.name is not None:
            update_data["name"] = validate_name(group_data.name, "Group")
        if group_data.description is not None:
            update_data["description"] = group_data.description or None

        if not update_data:
            return self.get_group_by_id(group_id)

        update_data["updated_at"] = utcnow_iso()
        row = first_or_none(raise_for_error(
            self.store.update("groups", update_data, [("id", group_id)]), "update group"
        ))
        if not row:
            raise NotFoundError("Group not found")
        return GroupResponse(**row)

    def list_groups(self, user_id: str) -> List[GroupResponse]:
        """Groups the user owns plus groups where the user accepted a membership, newest first"""
        owned = raise_for_error(
            self.store.query("groups", [("owner_id", user_id)], order_by="created_at", desc=True),
            "load groups",
        )
        memberships = raise_for_error(
            self.store.query("group_members", [("user_id", user_id)], columns="group_id, accepted_at"),
            "load group memberships",
        )
        member_group_ids = [m["group_id"] for m in memberships if m.get("accepted_at") is not None]
        member_groups = raise_for_error(
            self.store.query_in("groups", "id", member_group_ids, order_by="created_at", desc=True),
            "load groups",
        )

        unique = {}
        for group in owned + member_groups:
            unique.setdefault(group["id"], group)
        groups = [GroupResponse(**group) for group in unique.values()]
        groups.sort(key=lambda g: g.created_at, reverse=True)
        return groups

    def delete_group(self, group_id: str) -> bool:
        """Delete group with all of its items, inventories, spaces and memberships"""
        for table in _GROUP_CASCADE:
            raise_for_error(self.store.delete(table, [("group_id", group_id)]), f"delete group {table}")
        result = raise_for_error(self.store.delete("groups", [("id", group_id)]), "delete group")
        logger.info("Deleted group %s", group_id)
        return len(result) > 0
