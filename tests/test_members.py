"""Owner synthesis, invitations and group lifecycle."""

from datetime import datetime, timezone

import pytest

from aizer.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from aizer.modules.groups.schemas import GroupCreate, GroupResponse
from aizer.modules.groups.service import GroupService
from aizer.modules.members.service import MemberService, effective_members
from aizer.modules.spaces.schemas import SpaceCreate
from aizer.modules.spaces.service import SpaceService
from tests.fakes import MEMBER_ID, OUTSIDER_ID, OWNER_ID

CREATED = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _group(owner_id="owner-1") -> GroupResponse:
    return GroupResponse(id="g1", name="Home", owner_id=owner_id, created_at=CREATED)


def _row(row_id, user_id, role="member"):
    return {"id": row_id, "group_id": "g1", "user_id": user_id, "role": role, "accepted_at": CREATED}


def test_owner_is_synthesized_when_missing() -> None:
    members = effective_members(_group(), [_row("m1", "user-2"), _row("m2", "user-3", "admin")])

    owners = [m for m in members if m.role == "owner"]
    assert len(owners) == 1
    assert owners[0].user_id == "owner-1"
    assert owners[0].id == "owner-owner-1"
    assert members[0] is owners[0]
    assert [m.role for m in members[1:]] == ["member", "admin"]


def test_stored_owner_row_is_reported_as_owner_once() -> None:
    members = effective_members(_group(), [_row("m1", "owner-1", "admin"), _row("m2", "user-2")])

    assert [(m.id, m.role) for m in members] == [("m1", "owner"), ("m2", "member")]


def test_stored_owner_role_for_non_owner_is_downgraded() -> None:
    members = effective_members(_group(), [_row("m1", "user-2", "owner")])

    assert [m.role for m in members] == ["owner", "member"]
    assert members[0].user_id == "owner-1"


def test_fetch_group_members_enriches_profiles(store, group) -> None:
    members = MemberService(store).fetch_group_members(group["id"])

    assert [(m.user_id, m.role) for m in members] == [(OWNER_ID, "owner"), (MEMBER_ID, "member")]
    assert members[0].display_name == "Olivia"
    # no display name stored: fall back to email
    assert members[1].display_name == "member@example.com"


def test_invitation_lifecycle(store, group) -> None:
    service = MemberService(store)

    invited = service.invite_user(group["id"], "Outsider@Example.com", is_admin=True)
    assert invited.role == "admin"
    assert invited.accepted_at is None

    pending = service.pending_invitations(OUTSIDER_ID)
    assert [(p.group_name, p.role) for p in pending] == [("Home", "admin")]
    assert service.pending_invitations(MEMBER_ID) == []

    with pytest.raises(PermissionDeniedError):
        service.accept_invitation(invited.id, MEMBER_ID)

    accepted = service.accept_invitation(invited.id, OUTSIDER_ID)
    assert accepted.accepted_at is not None
    assert service.pending_invitations(OUTSIDER_ID) == []
    assert [g.id for g in GroupService(store).list_groups(OUTSIDER_ID)] == [group["id"]]


def test_reject_invitation_deletes_row(store, group) -> None:
    service = MemberService(store)
    invited = service.invite_user(group["id"], "outsider@example.com")

    assert service.reject_invitation(invited.id, OUTSIDER_ID) is True
    assert all(r["user_id"] != OUTSIDER_ID for r in store.rows("group_members"))


def test_invite_rejects_unknown_owner_and_existing(store, group) -> None:
    service = MemberService(store)

    with pytest.raises(NotFoundError):
        service.invite_user(group["id"], "nobody@example.com")
    with pytest.raises(ConflictError):
        service.invite_user(group["id"], "owner@example.com")
    with pytest.raises(ConflictError):
        service.invite_user(group["id"], "member@example.com")


def test_owner_cannot_be_demoted_or_removed(store, group) -> None:
    service = MemberService(store)
    synthesized = service.fetch_group_members(group["id"])[0]

    with pytest.raises(PermissionDeniedError):
        service.update_member_role(synthesized.id, is_admin=False)
    with pytest.raises(PermissionDeniedError):
        service.remove_member(synthesized.id)

    stored_owner = store.seed(
        "group_members", group_id=group["id"], user_id=OWNER_ID, role="admin", accepted_at=CREATED.isoformat(),
    )
    with pytest.raises(PermissionDeniedError):
        service.update_member_role(stored_owner["id"], is_admin=False)
    with pytest.raises(PermissionDeniedError):
        service.remove_member(stored_owner["id"])


def test_promote_and_remove_member(store, group) -> None:
    service = MemberService(store)
    member_row = next(r for r in store.rows("group_members") if r["user_id"] == MEMBER_ID)

    assert service.update_member_role(member_row["id"], is_admin=True).role == "admin"
    assert service.remove_member(member_row["id"]) is True
    assert [m.user_id for m in service.fetch_group_members(group["id"])] == [OWNER_ID]


def test_list_groups_owned_and_joined(store, group) -> None:
    service = GroupService(store)
    own = service.create_group(GroupCreate(name="Cabin"), MEMBER_ID)

    groups = service.list_groups(MEMBER_ID)
    assert [g.id for g in groups] == [own.id, group["id"]]
    assert service.list_groups(OUTSIDER_ID) == []


def test_delete_group_cascades(store, group) -> None:
    SpaceService(store).create_space(SpaceCreate(group_id=group["id"], name="Garage"))

    assert GroupService(store).delete_group(group["id"]) is True
    for table in ("spaces", "group_members", "groups"):
        assert store.rows(table) == []
