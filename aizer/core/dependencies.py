"""
Core dependencies for route protection and group role checks
"""

from fastapi import Depends, Header, Response, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from supabase import Client
from typing import Optional
import logging

from aizer.core.exceptions import NotFoundError, PermissionDeniedError
from aizer.core.session import SessionContext
from aizer.database.store import Store, first_or_none, raise_for_error
from aizer.database.supabase_client import SupabaseClient, get_supabase
from aizer.modules.auth.service import AuthService

logger = logging.getLogger(__name__)

security = HTTPBearer()

ROLE_OWNER = "owner"
ROLE_ADMIN = "admin"
ROLE_MEMBER = "member"


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_access_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


def get_store(token: str = Depends(get_access_token)) -> Store:
    """Store bound to the caller's JWT so row-level security applies."""
    return Store(SupabaseClient.get_user_client(token))


def get_session_context(
    response: Response,
    token: str = Depends(get_access_token),
    x_refresh_token: Optional[str] = Header(None),
    store: Store = Depends(get_store),
    auth_service: AuthService = Depends(get_auth_service),
) -> SessionContext:
    """Authenticated per-request context; an expired token gets one refresh attempt."""
    ctx = SessionContext(
        auth_service=auth_service,
        store=store,
        access_token=token,
        refresh_token=x_refresh_token,
        response=response,
    )
    ctx.run(ctx.authenticate)
    return ctx


def get_group_role(store: Store, group_id: str, user_id: str) -> Optional[str]:
    """Role of user in group: owner from groups.owner_id, otherwise the accepted membership role."""
    group = first_or_none(raise_for_error(
        store.query("groups", [("id", group_id)], columns="id, owner_id"),
        "load group",
    ))
    if not group:
        raise NotFoundError("Group not found")
    if group.get("owner_id") == user_id:
        return ROLE_OWNER
    memberships = raise_for_error(
        store.query("group_members", [("group_id", group_id), ("user_id", user_id)]),
        "load group membership",
    )
    for member in memberships:
        if member.get("accepted_at") is not None:
            return member.get("role") or ROLE_MEMBER
    return None


def check_group_member(group_id: str, ctx: SessionContext) -> str:
    """Check if user is a member (any role) of a group"""
    role = get_group_role(ctx.store, group_id, ctx.user_id)
    if role is None:
        raise PermissionDeniedError("You must be a member of this group")
    return role


def check_group_admin(group_id: str, ctx: SessionContext) -> str:
    """Check if user is admin/owner of a group"""
    role = get_group_role(ctx.store, group_id, ctx.user_id)
    if role not in (ROLE_OWNER, ROLE_ADMIN):
        raise PermissionDeniedError("You must be a group owner or admin to perform this action")
    return role


def check_group_owner(group_id: str, ctx: SessionContext) -> str:
    role = get_group_role(ctx.store, group_id, ctx.user_id)
    if role != ROLE_OWNER:
        raise PermissionDeniedError("Only the group owner can perform this action")
    return role
