"""Shared fixtures: an in-memory store, a fake auth service and a TestClient wired to both."""

import pytest
from fastapi.testclient import TestClient

from aizer.core.dependencies import get_auth_service, get_store
from aizer.main import app
from aizer.modules.auth.service import _AUTH_USER_CACHE
from tests.fakes import MEMBER_ID, OUTSIDER_ID, OWNER_ID, FakeAuthService, FakeStore


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def auth():
    fake = FakeAuthService()
    fake.add_user("owner-token", OWNER_ID, "owner@example.com", refresh_token="owner-refresh")
    fake.add_user("member-token", MEMBER_ID, "member@example.com")
    fake.add_user("outsider-token", OUTSIDER_ID, "outsider@example.com")
    return fake


@pytest.fixture
def group(store):
    """Group owned by OWNER_ID with MEMBER_ID as an accepted member."""
    for user_id, email, name in (
        (OWNER_ID, "owner@example.com", "Olivia"),
        (MEMBER_ID, "member@example.com", None),
        (OUTSIDER_ID, "outsider@example.com", "Otto"),
    ):
        store.seed("profiles", id=user_id, email=email, display_name=name, accent_color=None)
    row = store.seed("groups", name="Home", description=None, owner_id=OWNER_ID)
    store.seed(
        "group_members", group_id=row["id"], user_id=MEMBER_ID, role="member",
        accepted_at="2024-01-01T00:00:00+00:00",
    )
    return row


@pytest.fixture
def client(store, auth):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_auth_service] = lambda: auth
    _AUTH_USER_CACHE.clear()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()