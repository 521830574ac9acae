from fastapi import APIRouter, Depends
from aizer.core.dependencies import check_group_member, get_session_context
from aizer.core.session import SessionContext
from aizer.modules.hierarchy.schemas import SpaceContents
from aizer.modules.hierarchy.service import load_group_snapshot, space_contents
from aizer.modules.relocation.schemas import SpaceMoveRequest
from aizer.modules.relocation.service import RelocationService
from aizer.modules.relocation.validation import space_parent
from aizer.modules.spaces.schemas import SpaceCreate, SpaceUpdate, SpaceResponse
from aizer.modules.spaces.service import SpaceService

router = APIRouter(prefix="/spaces", tags=["spaces"])


@router.post("", response_model=SpaceResponse, status_code=201)
async def create_space(
    space_data: SpaceCreate,
    ctx: SessionContext = Depends(get_session_context),
):
    """Create a space (group members)"""
    def operation():
        check_group_member(space_data.group_id, ctx)
        return SpaceService(ctx.store).create_space(space_data)
    return ctx.run(operation)


@router.get("/{space_id}", response_model=SpaceResponse)
async def get_space(space_id: str, ctx: SessionContext = Depends(get_session_context)):
    """Get space by ID (group members)"""
    def operation():
        space = SpaceService(ctx.store).get_space_by_id(space_id)
        check_group_member(space.group_id, ctx)
        return space
    return ctx.run(operation)


@router.get("/{space_id}/contents", response_model=SpaceContents)
async def get_space_contents(space_id: str, ctx: SessionContext = Depends(get_session_context)):
    """Child spaces, inventories with their items, and items placed directly in the space"""
    def operation():
        space = SpaceService(ctx.store).get_space_by_id(space_id)
        check_group_member(space.group_id, ctx)
        snapshot = load_group_snapshot(ctx.store, space.group_id)
        return space_contents(snapshot, space_id)
    return ctx.run(operation)


@router.put("/{space_id}", response_model=SpaceResponse)
async def update_space(
    space_id: str,
    space_data: SpaceUpdate,
    ctx: SessionContext = Depends(get_session_context),
):
    """Update space (group members)"""
    def operation():
        service = SpaceService(ctx.store)
        check_group_member(service.get_space_by_id(space_id).group_id, ctx)
        return service.update_space(space_id, space_data)
    return ctx.run(operation)


@router.post("/{space_id}/move", response_model=SpaceResponse)
async def move_space(
    space_id: str,
    move_data: SpaceMoveRequest,
    ctx: SessionContext = Depends(get_session_context),
):
    """Reparent a space (null parent moves it to the root)"""
    def operation():
        parent_id = space_parent(space_id, move_data.parent_id)
        check_group_member(SpaceService(ctx.store).get_space_by_id(space_id).group_id, ctx)
        return RelocationService(ctx.store).move_space(space_id, parent_id)
    return ctx.run(operation)


@router.delete("/{space_id}", status_code=204)
async def delete_space(space_id: str, ctx: SessionContext = Depends(get_session_context)):
    """Delete space (group members); rejected while it still has children"""
    def operation():
        service = SpaceService(ctx.store)
        check_group_member(service.get_space_by_id(space_id).group_id, ctx)
        service.delete_space(space_id)
    ctx.run(operation)
    return None
