"""In-memory stand-ins for the Supabase-backed Store and AuthService.

``FakeStore`` follows the ``Store`` contract (results, never exceptions) and
enforces the foreign keys of the real schema, so deleting a referenced row
fails with ``23503`` exactly like PostgREST does.
"""

from __future__ import annotations

import copy
import uuid
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

from aizer.core.exceptions import AuthExpiredError
from aizer.database.errors import classify_error
from aizer.database.store import StoreError, StoreResult
from aizer.modules.auth.schemas import TokenResponse

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)

OWNER_ID = "user-owner"
MEMBER_ID = "user-member"
OUTSIDER_ID = "user-outsider"

# (child table, column) -> parent table
FOREIGN_KEYS = {
    ("spaces", "group_id"): "groups",
    ("spaces", "parent_id"): "spaces",
    ("inventories", "group_id"): "groups",
    ("inventories", "parent_space_id"): "spaces",
    ("inventories", "parent_inventory_id"): "inventories",
    ("items", "group_id"): "groups",
    ("items", "inventory_id"): "inventories",
    ("items", "space_id"): "spaces",
    ("group_members", "group_id"): "groups",
}

UNIQUE_KEYS = {
    "group_members": ("group_id", "user_id"),
}


def _error(code: str, message: str) -> StoreResult:
    return StoreResult(rows=[], error=StoreError(code=code, message=message, kind=classify_error(code, message)))


def _matches(row: Dict[str, Any], filters) -> bool:
    return all(row.get(column) == value for column, value in filters)


class FakeStore:
    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        self.calls: List[tuple] = []
        self.session_tokens: List[str] = []
        self._failures: Dict[tuple, List[StoreResult]] = defaultdict(list)
        self._clock = 0

    # Test helpers

    def fail_next(self, action: str, table: str, code: Optional[str], message: str) -> None:
        """Make the next ``action`` on ``table`` fail with the given provider error."""
        self._failures[(action, table)].append(_error(code, message))

    def seed(self, table: str, **row) -> Dict[str, Any]:
        """Insert a row without foreign key checks."""
        return self._stamp(table, row)

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return copy.deepcopy(self.tables[table])

    def _now(self) -> str:
        self._clock += 1
        return (BASE_TIME + timedelta(seconds=self._clock)).isoformat()

    def _stamp(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        row = dict(record)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", self._now())
        row.setdefault("updated_at", row["created_at"])
        self.tables[table].append(row)
        return copy.deepcopy(row)

    def _scripted(self, action: str, table: str) -> Optional[StoreResult]:
        self.calls.append((action, table))
        queue = self._failures.get((action, table))
        if queue:
            return queue.pop(0)
        return None

    def _missing_parent(self, table: str, row: Dict[str, Any]) -> Optional[str]:
        for (child, column), parent in FOREIGN_KEYS.items():
            if child != table or row.get(column) is None:
                continue
            if not any(p["id"] == row[column] for p in self.tables[parent]):
                return f'insert or update on table "{table}" violates foreign key constraint "{table}_{column}_fkey"'
        return None

    # Store contract

    def set_session(self, access_token: str) -> None:
        self.session_tokens.append(access_token)

    def query(self, table, filters=(), order_by=None, desc=True, columns="*") -> StoreResult:
        failure = self._scripted("query", table)
        if failure:
            return failure
        rows = [copy.deepcopy(r) for r in self.tables[table] if _matches(r, filters)]
        if order_by:
            rows.sort(key=lambda r: r.get(order_by) or "", reverse=desc)
        return StoreResult(rows=rows)

    def query_in(self, table, column, values: Iterable[Any], order_by=None, desc=True, columns="*") -> StoreResult:
        values = list(values)
        if not values:
            return StoreResult(rows=[])
        failure = self._scripted("query", table)
        if failure:
            return failure
        rows = [copy.deepcopy(r) for r in self.tables[table] if r.get(column) in values]
        if order_by:
            rows.sort(key=lambda r: r.get(order_by) or "", reverse=desc)
        return StoreResult(rows=rows)

    def insert(self, table, records) -> StoreResult:
        failure = self._scripted("insert", table)
        if failure:
            return failure
        for record in records:
            message = self._missing_parent(table, record)
            if message:
                return _error("23503", message)
            unique = UNIQUE_KEYS.get(table)
            if unique and any(all(r.get(c) == record.get(c) for c in unique) for r in self.tables[table]):
                return _error("23505", f'duplicate key value violates unique constraint "{table}_key"')
        return StoreResult(rows=[self._stamp(table, record) for record in records])

    def update(self, table, patch, filters) -> StoreResult:
        failure = self._scripted("update", table)
        if failure:
            return failure
        targets = [r for r in self.tables[table] if _matches(r, filters)]
        for row in targets:
            message = self._missing_parent(table, {**row, **patch})
            if message:
                return _error("23503", message)
        for row in targets:
            row.update(patch)
        return StoreResult(rows=[copy.deepcopy(r) for r in targets])

    def delete(self, table, filters) -> StoreResult:
        failure = self._scripted("delete", table)
        if failure:
            return failure
        doomed = [r for r in self.tables[table] if _matches(r, filters)]
        doomed_ids = {r["id"] for r in doomed}
        for (child, column), parent in FOREIGN_KEYS.items():
            if parent != table:
                continue
            for row in self.tables[child]:
                if child == table and row["id"] in doomed_ids:
                    continue
                if row.get(column) in doomed_ids:
                    return _error(
                        "23503",
                        f'update or delete on table "{table}" violates foreign key constraint '
                        f'"{child}_{column}_fkey" on table "{child}"',
                    )
        self.tables[table] = [r for r in self.tables[table] if r["id"] not in doomed_ids]
        return StoreResult(rows=copy.deepcopy(doomed))


class FakeAuthService:
    """Token -> user lookup with scriptable expiry and a single refresh path."""

    def __init__(self):
        self.users_by_token: Dict[str, Dict[str, Any]] = {}
        self.expired_tokens = set()
        self.refresh_tokens: Dict[str, str] = {}
        self.refresh_calls: List[str] = []

    def add_user(self, token: str, user_id: str, email: str, refresh_token: Optional[str] = None) -> Dict[str, Any]:
        user = {"id": user_id, "email": email, "user_metadata": {}, "created_at": BASE_TIME.isoformat()}
        self.users_by_token[token] = user
        if refresh_token:
            self.refresh_tokens[refresh_token] = user_id
        return user

    def get_current_user(self, token: str) -> Dict[str, Any]:
        if token in self.expired_tokens or token not in self.users_by_token:
            raise AuthExpiredError("Invalid or expired token")
        return self.users_by_token[token]

    def refresh_session(self, refresh_token: str) -> Optional[TokenResponse]:
        self.refresh_calls.append(refresh_token)
        user_id = self.refresh_tokens.pop(refresh_token, None)
        if user_id is None:
            return None
        user = next(u for u in self.users_by_token.values() if u["id"] == user_id)
        new_access, new_refresh = f"access-{uuid.uuid4()}", f"refresh-{uuid.uuid4()}"
        self.users_by_token[new_access] = user
        self.refresh_tokens[new_refresh] = user_id
        return TokenResponse(
            access_token=new_access, refresh_token=new_refresh, user_id=user_id, email=user["email"],
        )


def bearer(token: str, refresh_token: Optional[str] = None) -> Dict[str, str]:
    headers = {"Authorization": f"Bearer {token}"}
    if refresh_token:
        headers["X-Refresh-Token"] = refresh_token
    return headers
