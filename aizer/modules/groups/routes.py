from fastapi import APIRouter, Depends
from aizer.core.dependencies import (
    check_group_admin, check_group_member, check_group_owner, get_session_context,
)
from aizer.core.session import SessionContext
from aizer.modules.groups.schemas import GroupCreate, GroupUpdate, GroupResponse
from aizer.modules.groups.service import GroupService
from typing import List

router = APIRouter(prefix="/groups", tags=["groups"])


@router.post("", response_model=GroupResponse, status_code=201)
async def create_group(
    group_data: GroupCreate,
    ctx: SessionContext = Depends(get_session_context),
):
    """Create a new group; the caller becomes its owner"""
    return ctx.run(lambda: GroupService(ctx.store).create_group(group_data, ctx.user_id))


@router.get("", response_model=List[GroupResponse])
async def list_groups(ctx: SessionContext = Depends(get_session_context)):
    """List groups the user owns or has joined"""
    return ctx.run(lambda: GroupService(ctx.store).list_groups(ctx.user_id))


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(group_id: str, ctx: SessionContext = Depends(get_session_context)):
    """Get group by ID (only if user is a member)"""
    def operation():
        check_group_member(group_id, ctx)
        return GroupService(ctx.store).get_group_by_id(group_id)
    return ctx.run(operation)


@router.put("/{group_id}", response_model=GroupResponse)
async def update_group(
    group_id: str,
    group_data: GroupUpdate,
    ctx: SessionContext = Depends(get_session_context),
):
    """Update group (requires group owner or admin)"""
    def operation():
        check_group_admin(group_id, ctx)
        return GroupService(ctx.store).update_group(group_id, group_data)
    return ctx.run(operation)


@router.delete("/{group_id}", status_code=204)
async def delete_group(group_id: str, ctx: SessionContext = Depends(get_session_context)):
    """Delete group and everything in it (owner only)"""
    def operation():
        check_group_owner(group_id, ctx)
        GroupService(ctx.store).delete_group(group_id)
    ctx.run(operation)
    return None
