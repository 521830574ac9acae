from fastapi import APIRouter, Depends
from aizer.core.dependencies import check_group_admin, check_group_member, get_session_context
from aizer.core.exceptions import NotFoundError
from aizer.core.session import SessionContext
from aizer.modules.members.schemas import (
    InvitationResponse, MemberInvite, MemberResponse, MemberRoleUpdate,
)
from aizer.modules.members.service import MemberService
from typing import List

router = APIRouter(tags=["members"])


@router.get("/groups/{group_id}/members", response_model=List[MemberResponse])
async def list_group_members(group_id: str, ctx: SessionContext = Depends(get_session_context)):
    """Members of a group, owner first (group members)"""
    def operation():
        check_group_member(group_id, ctx)
        return MemberService(ctx.store).fetch_group_members(group_id)
    return ctx.run(operation)


@router.post("/groups/{group_id}/members", response_model=MemberResponse, status_code=201)
async def invite_member(
    group_id: str,
    invite: MemberInvite,
    ctx: SessionContext = Depends(get_session_context),
):
    """Invite a registered user by email (requires group owner or admin)"""
    def operation():
        check_group_admin(group_id, ctx)
        return MemberService(ctx.store).invite_user(group_id, invite.email, invite.is_admin)
    return ctx.run(operation)


@router.put("/groups/{group_id}/members/{member_id}", response_model=MemberResponse)
async def update_member_role(
    group_id: str,
    member_id: str,
    role_data: MemberRoleUpdate,
    ctx: SessionContext = Depends(get_session_context),
):
    """Promote to admin or demote to member (requires group owner or admin)"""
    def operation():
        check_group_admin(group_id, ctx)
        service = MemberService(ctx.store)
        if service.get_member(member_id)["group_id"] != group_id:
            raise NotFoundError("Membership not found in this group")
        return service.update_member_role(member_id, role_data.is_admin)
    return ctx.run(operation)


@router.delete("/groups/{group_id}/members/{member_id}", status_code=204)
async def remove_member(group_id: str, member_id: str, ctx: SessionContext = Depends(get_session_context)):
    """Remove a member (requires group owner or admin); the owner cannot be removed"""
    def operation():
        check_group_admin(group_id, ctx)
        service = MemberService(ctx.store)
        if service.get_member(member_id)["group_id"] != group_id:
            raise NotFoundError("Membership not found in this group")
        service.remove_member(member_id)
    ctx.run(operation)
    return None


@router.get("/invitations", response_model=List[InvitationResponse])
async def list_invitations(ctx: SessionContext = Depends(get_session_context)):
    """Pending invitations of the current user"""
    return ctx.run(lambda: MemberService(ctx.store).pending_invitations(ctx.user_id))


@router.post("/invitations/{member_id}/accept", response_model=MemberResponse)
async def accept_invitation(member_id: str, ctx: SessionContext = Depends(get_session_context)):
    return ctx.run(lambda: MemberService(ctx.store).accept_invitation(member_id, ctx.user_id))


@router.delete("/invitations/{member_id}", status_code=204)
async def reject_invitation(member_id: str, ctx: SessionContext = Depends(get_session_context)):
    ctx.run(lambda: MemberService(ctx.store).reject_invitation(member_id, ctx.user_id))
    return None
