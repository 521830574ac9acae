"""
Group membership and invitations.

``effective_members`` is the pure view the listing is built on: the stored
membership rows plus the group owner, who is implied by ``groups.owner_id``
and usually has no row of its own.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from aizer.core.dependencies import ROLE_ADMIN, ROLE_MEMBER, ROLE_OWNER
from aizer.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from aizer.database.store import Store, first_or_none, raise_for_error, utcnow_iso
from aizer.modules.groups.schemas import GroupResponse
from aizer.modules.groups.service import GroupService
from aizer.modules.members.schemas import InvitationResponse, MemberResponse

logger = logging.getLogger(__name__)

OWNER_MEMBER_PREFIX = "owner-"


def _role_for(is_admin: bool) -> str:
    return ROLE_ADMIN if is_admin else ROLE_MEMBER


def effective_members(group: GroupResponse, stored_members: Iterable[Dict[str, Any]]) -> List[MemberResponse]:
    """Stored memberships with exactly one owner entry, owner first."""
    owner: Optional[MemberResponse] = None
    members: List[MemberResponse] = []
    for row in stored_members:
        if row["user_id"] == group.owner_id:
            if owner is None:
                owner = MemberResponse(**{**row, "role": ROLE_OWNER})
            continue
        role = row.get("role")
        if role not in (ROLE_ADMIN, ROLE_MEMBER):
            # only groups.owner_id can make someone the owner
            role = ROLE_MEMBER
        members.append(MemberResponse(**{**row, "role": role}))

    if owner is None:
        owner = MemberResponse(
            id=f"{OWNER_MEMBER_PREFIX}{group.owner_id}",
            group_id=group.id,
            user_id=group.owner_id,
            role=ROLE_OWNER,
            accepted_at=group.created_at,
            created_at=group.created_at,
            updated_at=group.updated_at,
        )
    return [owner] + members


class MemberService:
    def __init__(self, store: Store):
        self.store = store

    def _profiles_by_user(self, user_ids: List[str]) -> Dict[str, Dict[str, Any]]:
        rows = raise_for_error(
            self.store.query_in("profiles", "id", user_ids, columns="id, email, display_name"),
            "load member profiles",
        )
        return {row["id"]: row for row in rows}

    def get_member(self, member_id: str) -> Dict[str, Any]:
        if member_id.startswith(OWNER_MEMBER_PREFIX):
            raise PermissionDeniedError("The group owner cannot be changed through memberships")
        row = first_or_none(raise_for_error(
            self.store.query("group_members", [("id", member_id)]), "load membership"
        ))
        if not row:
            raise NotFoundError("Membership not found")
        return row

    def fetch_group_members(self, group_id: str) -> List[MemberResponse]:
        """All members of a group, owner first, with display name and email from profiles"""
        group = GroupService(self.store).get_group_by_id(group_id)
        rows = raise_for_error(
            self.store.query("group_members", [("group_id", group_id)], order_by="created_at", desc=False),
            "load group members",
        )
        members = effective_members(group, rows)
        profiles = self._profiles_by_user([m.user_id for m in members])
        enriched = []
        for member in members:
            profile = profiles.get(member.user_id, {})
            enriched.append(member.model_copy(update={
                "email": profile.get("email"),
                "display_name": profile.get("display_name") or profile.get("email") or member.user_id,
            }))
        return enriched

    def invite_user(self, group_id: str, email: str, is_admin: bool = False) -> MemberResponse:
        """Invite a registered user by email; the membership stays pending until accepted"""
        group = GroupService(self.store).get_group_by_id(group_id)
        profile = first_or_none(raise_for_error(
            self.store.query("profiles", [("email", email.strip().lower())], columns="id, email, display_name"),
            "look up user",
        ))
        if not profile:
            raise NotFoundError(f"No user registered with email {email}")
        if profile["id"] == group.owner_id:
            raise ConflictError("User is the owner of this group")

        existing = raise_for_error(
            self.store.query("group_members", [("group_id", group_id), ("user_id", profile["id"])]),
            "load group membership",
        )
        if existing:
            if existing[0].get("accepted_at") is None:
                raise ConflictError("User already has a pending invitation to this group")
            raise ConflictError("User is already a member of this group")

        rows = raise_for_error(self.store.insert("group_members", [{
            "group_id": group_id,
            "user_id": profile["id"],
            "role": _role_for(is_admin),
            "accepted_at": None,
        }]), "invite user")
        if not rows:
            raise NotFoundError("Failed to invite user")
        logger.info("Invited user %s to group %s as %s", profile["id"], group_id, rows[0]["role"])
        return MemberResponse(**{**rows[0], "email": profile.get("email"), "display_name": profile.get("display_name")})

    def update_member_role(self, member_id: str, is_admin: bool) -> MemberResponse:
        """Switch a membership between admin and member"""
        member = self.get_member(member_id)
        group = GroupService(self.store).get_group_by_id(member["group_id"])
        if member["user_id"] == group.owner_id:
            raise PermissionDeniedError("The group owner cannot be demoted")
        row = first_or_none(raise_for_error(self.store.update(
            "group_members",
            {"role": _role_for(is_admin), "updated_at": utcnow_iso()},
            [("id", member_id)],
        ), "update member role"))
        if not row:
            raise NotFoundError("Membership not found")
        return MemberResponse(**row)

    def remove_member(self, member_id: str) -> bool:
        member = self.get_member(member_id)
        group = GroupService(self.store).get_group_by_id(member["group_id"])
        if member["user_id"] == group.owner_id:
            raise PermissionDeniedError("The group owner cannot be removed")
        result = raise_for_error(self.store.delete("group_members", [("id", member_id)]), "remove member")
        logger.info("Removed user %s from group %s", member["user_id"], member["group_id"])
        return len(result) > 0

    def pending_invitations(self, user_id: str) -> List[InvitationResponse]:
        """Invitations the user has neither accepted nor rejected, newest first"""
        rows = raise_for_error(
            self.store.query(
                "group_members", [("user_id", user_id), ("accepted_at", None)],
                order_by="created_at", desc=True,
            ),
            "load invitations",
        )
        groups = raise_for_error(
            self.store.query_in("groups", "id", [row["group_id"] for row in rows], columns="id, name, description"),
            "load invitation groups",
        )
        groups_by_id = {group["id"]: group for group in groups}
        invitations = []
        for row in rows:
            group = groups_by_id.get(row["group_id"])
            if group is None:
                continue
            invitations.append(InvitationResponse(
                id=row["id"],
                group_id=row["group_id"],
                group_name=group["name"],
                group_description=group.get("description"),
                role=row.get("role") or ROLE_MEMBER,
                created_at=row.get("created_at"),
            ))
        return invitations

    def _own_invitation(self, member_id: str, user_id: str) -> Dict[str, Any]:
        member = self.get_member(member_id)
        if member["user_id"] != user_id:
            raise PermissionDeniedError("This invitation belongs to another user")
        if member.get("accepted_at") is not None:
            raise ConflictError("Invitation was already accepted")
        return member

    def accept_invitation(self, member_id: str, user_id: str) -> MemberResponse:
        self._own_invitation(member_id, user_id)
        now = utcnow_iso()
        row = first_or_none(raise_for_error(self.store.update(
            "group_members", {"accepted_at": now, "updated_at": now}, [("id", member_id)]
        ), "accept invitation"))
        if not row:
            raise NotFoundError("Invitation not found")
        logger.info("User %s joined group %s", user_id, row["group_id"])
        return MemberResponse(**row)

    def reject_invitation(self, member_id: str, user_id: str) -> bool:
        self._own_invitation(member_id, user_id)
        result = raise_for_error(self.store.delete("group_members", [("id", member_id)]), "reject invitation")
        return len(result) > 0
