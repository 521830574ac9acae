import logging
from typing import Any, Dict, Optional

from aizer.core.exceptions import NotFoundError, ValidationError
from aizer.database.store import Store, first_or_none, raise_for_error, utcnow_iso
from aizer.modules.inventories.schemas import InventoryResponse
from aizer.modules.items.schemas import ItemResponse
from aizer.modules.relocation.validation import (
    ensure_no_cycle, inventory_parent_patch, placement_patch, space_parent,
)
from aizer.modules.spaces.schemas import SpaceResponse

logger = logging.getLogger(__name__)


class RelocationService:
    """Moves items and reparents spaces/inventories, one single-row update per move.

    Every move writes both columns of a mutually exclusive pair in the same
    update call. A failed move leaves the row untouched; callers reload their
    snapshot either way.
    """

    def __init__(self, store: Store):
        self.store = store

    def _get_row(self, table: str, row_id: str, label: str) -> Dict[str, Any]:
        row = first_or_none(raise_for_error(self.store.query(table, [("id", row_id)]), f"load {label}"))
        if not row:
            raise NotFoundError(f"{label.capitalize()} not found")
        return row

    def _get_target(self, table: str, row_id: str, label: str, group_id: str) -> Dict[str, Any]:
        try:
            target = self._get_row(table, row_id, label)
        except NotFoundError:
            raise ValidationError(f"Target {label} does not exist")
        if target.get("group_id") != group_id:
            raise ValidationError(f"Target {label} belongs to a different group")
        return target

    def _parent_map(self, table: str, group_id: str, column: str) -> Dict[str, Optional[str]]:
        rows = raise_for_error(
            self.store.query(table, [("group_id", group_id)], columns=f"id, {column}"),
            f"load {table}",
        )
        return {row["id"]: row.get(column) for row in rows}

    def _apply(self, table: str, row_id: str, patch: Dict[str, Any], label: str) -> Dict[str, Any]:
        patch = {**patch, "updated_at": utcnow_iso()}
        row = first_or_none(raise_for_error(
            self.store.update(table, patch, [("id", row_id)]), f"move {label}"
        ))
        if not row:
            raise NotFoundError(f"{label.capitalize()} not found")
        return row

    # Validation shared with the create/edit flows

    def _check_placement_targets(self, group_id: str, patch: Dict[str, Optional[str]]) -> None:
        if patch["inventory_id"]:
            self._get_target("inventories", patch["inventory_id"], "inventory", group_id)
        else:
            self._get_target("spaces", patch["space_id"], "space", group_id)

    def _check_inventory_targets(
        self, group_id: str, inventory_id: Optional[str], patch: Dict[str, Optional[str]]
    ) -> None:
        if patch["parent_space_id"]:
            self._get_target("spaces", patch["parent_space_id"], "space", group_id)
        elif patch["parent_inventory_id"]:
            self._get_target("inventories", patch["parent_inventory_id"], "inventory", group_id)
            if inventory_id is not None:
                parents = self._parent_map("inventories", group_id, "parent_inventory_id")
                ensure_no_cycle(inventory_id, patch["parent_inventory_id"], parents, "inventory")

    def _check_space_target(self, group_id: str, space_id: Optional[str], parent_id: Optional[str]) -> None:
        if parent_id is None:
            return
        self._get_target("spaces", parent_id, "space", group_id)
        if space_id is not None:
            parents = self._parent_map("spaces", group_id, "parent_id")
            ensure_no_cycle(space_id, parent_id, parents, "space")

    def check_item_placement(
        self, group_id: str, inventory_id: Optional[str], space_id: Optional[str]
    ) -> Dict[str, Optional[str]]:
        patch = placement_patch(inventory_id, space_id)
        self._check_placement_targets(group_id, patch)
        return patch

    def check_inventory_parent(
        self,
        group_id: str,
        inventory_id: Optional[str],
        parent_space_id: Optional[str],
        parent_inventory_id: Optional[str],
    ) -> Dict[str, Optional[str]]:
        patch = inventory_parent_patch(parent_space_id, parent_inventory_id, inventory_id)
        self._check_inventory_targets(group_id, inventory_id, patch)
        return patch

    def check_space_parent(self, group_id: str, space_id: Optional[str], parent_id: Optional[str]) -> Optional[str]:
        parent_id = space_parent(space_id, parent_id)
        self._check_space_target(group_id, space_id, parent_id)
        return parent_id

    # Moves: the input is validated before the row is loaded

    def move_item_to_inventory(self, item_id: str, target_inventory_id: str) -> ItemResponse:
        patch = placement_patch(target_inventory_id, None)
        item = self._get_row("items", item_id, "item")
        self._check_placement_targets(item["group_id"], patch)
        logger.info("Moving item %s to inventory %s", item_id, target_inventory_id)
        return ItemResponse(**self._apply("items", item_id, patch, "item"))

    def move_item_to_space(self, item_id: str, target_space_id: str) -> ItemResponse:
        patch = placement_patch(None, target_space_id)
        item = self._get_row("items", item_id, "item")
        self._check_placement_targets(item["group_id"], patch)
        logger.info("Moving item %s to space %s", item_id, target_space_id)
        return ItemResponse(**self._apply("items", item_id, patch, "item"))

    def move_inventory_to_space(self, inventory_id: str, target_space_id: str) -> InventoryResponse:
        patch = inventory_parent_patch(target_space_id, None, inventory_id)
        if not patch["parent_space_id"]:
            raise ValidationError("A target space is required")
        inventory = self._get_row("inventories", inventory_id, "inventory")
        self._check_inventory_targets(inventory["group_id"], inventory_id, patch)
        logger.info("Moving inventory %s under space %s", inventory_id, target_space_id)
        return InventoryResponse(**self._apply("inventories", inventory_id, patch, "inventory"))

    def move_inventory_to_inventory(self, inventory_id: str, target_inventory_id: str) -> InventoryResponse:
        patch = inventory_parent_patch(None, target_inventory_id, inventory_id)
        if not patch["parent_inventory_id"]:
            raise ValidationError("A target inventory is required")
        inventory = self._get_row("inventories", inventory_id, "inventory")
        self._check_inventory_targets(inventory["group_id"], inventory_id, patch)
        logger.info("Moving inventory %s under inventory %s", inventory_id, target_inventory_id)
        return InventoryResponse(**self._apply("inventories", inventory_id, patch, "inventory"))

    def detach_inventory(self, inventory_id: str) -> InventoryResponse:
        patch = inventory_parent_patch(None, None)
        self._get_row("inventories", inventory_id, "inventory")
        return InventoryResponse(**self._apply("inventories", inventory_id, patch, "inventory"))

    def move_space(self, space_id: str, parent_id: Optional[str]) -> SpaceResponse:
        parent_id = space_parent(space_id, parent_id)
        space = self._get_row("spaces", space_id, "space")
        self._check_space_target(space["group_id"], space_id, parent_id)
        logger.info("Moving space %s under %s", space_id, parent_id or "root")
        return SpaceResponse(**self._apply("spaces", space_id, {"parent_id": parent_id}, "space"))
