from fastapi import APIRouter, Depends
from typing import List
from aizer.core.dependencies import check_group_member, get_session_context
from aizer.core.session import SessionContext
from aizer.modules.hierarchy.service import child_items, load_group_snapshot
from aizer.modules.inventories.schemas import InventoryCreate, InventoryUpdate, InventoryResponse
from aizer.modules.inventories.service import InventoryService
from aizer.modules.items.schemas import ItemResponse
from aizer.modules.relocation.schemas import InventoryMoveRequest
from aizer.modules.relocation.service import RelocationService
from aizer.modules.relocation.validation import inventory_parent_patch

router = APIRouter(prefix="/inventories", tags=["inventories"])


@router.post("", response_model=InventoryResponse, status_code=201)
async def create_inventory(
    inventory_data: InventoryCreate,
    ctx: SessionContext = Depends(get_session_context),
):
    """Create an inventory (group members)"""
    def operation():
        check_group_member(inventory_data.group_id, ctx)
        return InventoryService(ctx.store).create_inventory(inventory_data)
    return ctx.run(operation)


@router.get("/{inventory_id}", response_model=InventoryResponse)
async def get_inventory(inventory_id: str, ctx: SessionContext = Depends(get_session_context)):
    """Get inventory by ID (group members)"""
    def operation():
        inventory = InventoryService(ctx.store).get_inventory_by_id(inventory_id)
        check_group_member(inventory.group_id, ctx)
        return inventory
    return ctx.run(operation)


@router.get("/{inventory_id}/items", response_model=List[ItemResponse])
async def list_inventory_items(inventory_id: str, ctx: SessionContext = Depends(get_session_context)):
    """Items in this inventory, newest first"""
    def operation():
        inventory = InventoryService(ctx.store).get_inventory_by_id(inventory_id)
        check_group_member(inventory.group_id, ctx)
        return child_items(load_group_snapshot(ctx.store, inventory.group_id), inventory_id)
    return ctx.run(operation)


@router.put("/{inventory_id}", response_model=InventoryResponse)
async def update_inventory(
    inventory_id: str,
    inventory_data: InventoryUpdate,
    ctx: SessionContext = Depends(get_session_context),
):
    """Update inventory (group members)"""
    def operation():
        service = InventoryService(ctx.store)
        check_group_member(service.get_inventory_by_id(inventory_id).group_id, ctx)
        return service.update_inventory(inventory_id, inventory_data)
    return ctx.run(operation)


@router.post("/{inventory_id}/move", response_model=InventoryResponse)
async def move_inventory(
    inventory_id: str,
    move_data: InventoryMoveRequest,
    ctx: SessionContext = Depends(get_session_context),
):
    """Reparent an inventory under a space, another inventory, or nothing"""
    def operation():
        target = inventory_parent_patch(move_data.parent_space_id, move_data.parent_inventory_id, inventory_id)
        check_group_member(InventoryService(ctx.store).get_inventory_by_id(inventory_id).group_id, ctx)
        relocation = RelocationService(ctx.store)
        if target["parent_space_id"]:
            return relocation.move_inventory_to_space(inventory_id, target["parent_space_id"])
        if target["parent_inventory_id"]:
            return relocation.move_inventory_to_inventory(inventory_id, target["parent_inventory_id"])
        return relocation.detach_inventory(inventory_id)
    return ctx.run(operation)


@router.delete("/{inventory_id}", status_code=204)
async def delete_inventory(inventory_id: str, ctx: SessionContext = Depends(get_session_context)):
    """Delete inventory (group members); rejected while it still has children"""
    def operation():
        service = InventoryService(ctx.store)
        check_group_member(service.get_inventory_by_id(inventory_id).group_id, ctx)
        service.delete_inventory(inventory_id)
    ctx.run(operation)
    return None
