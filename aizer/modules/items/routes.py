from fastapi import APIRouter, Depends
from aizer.core.dependencies import check_group_member, get_session_context
from aizer.core.session import SessionContext
from aizer.modules.items.schemas import ItemCreate, ItemUpdate, ItemResponse
from aizer.modules.items.service import ItemService
from aizer.modules.relocation.schemas import ItemMoveRequest
from aizer.modules.relocation.service import RelocationService
from aizer.modules.relocation.validation import placement_patch

router = APIRouter(prefix="/items", tags=["items"])


@router.post("", response_model=ItemResponse, status_code=201)
async def create_item(
    item_data: ItemCreate,
    ctx: SessionContext = Depends(get_session_context),
):
    """Create an item (group members)"""
    def operation():
        check_group_member(item_data.group_id, ctx)
        return ItemService(ctx.store).create_item(item_data)
    return ctx.run(operation)


@router.get("/{item_id}", response_model=ItemResponse)
async def get_item(item_id: str, ctx: SessionContext = Depends(get_session_context)):
    """Get item by ID (group members)"""
    def operation():
        item = ItemService(ctx.store).get_item_by_id(item_id)
        check_group_member(item.group_id, ctx)
        return item
    return ctx.run(operation)


@router.put("/{item_id}", response_model=ItemResponse)
async def update_item(
    item_id: str,
    item_data: ItemUpdate,
    ctx: SessionContext = Depends(get_session_context),
):
    """Update item (group members)"""
    def operation():
        service = ItemService(ctx.store)
        check_group_member(service.get_item_by_id(item_id).group_id, ctx)
        return service.update_item(item_id, item_data)
    return ctx.run(operation)


@router.post("/{item_id}/move", response_model=ItemResponse)
async def move_item(
    item_id: str,
    move_data: ItemMoveRequest,
    ctx: SessionContext = Depends(get_session_context),
):
    """Relocate an item into an inventory or a space (drag and drop target)"""
    def operation():
        target = placement_patch(move_data.inventory_id, move_data.space_id)
        check_group_member(ItemService(ctx.store).get_item_by_id(item_id).group_id, ctx)
        relocation = RelocationService(ctx.store)
        if target["inventory_id"]:
            return relocation.move_item_to_inventory(item_id, target["inventory_id"])
        return relocation.move_item_to_space(item_id, target["space_id"])
    return ctx.run(operation)


@router.delete("/{item_id}", status_code=204)
async def delete_item(item_id: str, ctx: SessionContext = Depends(get_session_context)):
    """Delete item (group members)"""
    def operation():
        service = ItemService(ctx.store)
        check_group_member(service.get_item_by_id(item_id).group_id, ctx)
        service.delete_item(item_id)
    ctx.run(operation)
    return None
