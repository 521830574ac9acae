"""
Relational store adapter.

Thin wrapper over the Supabase PostgREST client exposing the table-scoped
operations the services need. No method raises for provider failures: each
returns a ``StoreResult`` whose ``error`` is set instead. ``raise_for_error``
turns a failed result into the matching domain exception.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from aizer.core.exceptions import exception_for_kind
from aizer.database.errors import ErrorKind, classify_error

logger = logging.getLogger(__name__)

Filters = Sequence[Tuple[str, Any]]


class StoreError(NamedTuple):
    code: Optional[str]
    message: str
    kind: ErrorKind


class StoreResult(NamedTuple):
    rows: List[Dict[str, Any]]
    error: Optional[StoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _error_from_exception(exc: Exception) -> StoreError:
    if isinstance(exc, APIError):
        code = str(exc.code) if exc.code is not None else None
        message = exc.message or str(exc)
    elif isinstance(exc, httpx.HTTPError):
        code, message = None, f"Store unavailable: {exc}"
    else:
        code, message = getattr(exc, "code", None), str(exc)
    return StoreError(code=code, message=message, kind=classify_error(code, message))


def _apply_filters(query, filters: Filters):
    for column, value in filters:
        if value is None:
            query = query.is_(column, "null")
        else:
            query = query.eq(column, value)
    return query


class Store:
    def __init__(self, client: Client):
        self.client = client

    def set_session(self, access_token: str) -> None:
        """Rebind the PostgREST Authorization header (after a session refresh)."""
        self.client.postgrest.auth(access_token)

    def _run(self, action: str, table: str, build) -> StoreResult:
        try:
            response = build().execute()
            return StoreResult(rows=list(response.data or []))
        except (APIError, httpx.HTTPError) as e:
            error = _error_from_exception(e)
            logger.error("Store %s on %s failed [%s]: %s", action, table, error.code, error.message)
            return StoreResult(rows=[], error=error)

    def query(
        self,
        table: str,
        filters: Filters = (),
        order_by: Optional[str] = None,
        desc: bool = True,
        columns: str = "*",
    ) -> StoreResult:
        def build():
            q = _apply_filters(self.client.table(table).select(columns), filters)
            if order_by:
                q = q.order(order_by, desc=desc)
            return q
        return self._run("query", table, build)

    def query_in(
        self,
        table: str,
        column: str,
        values: Iterable[Any],
        order_by: Optional[str] = None,
        desc: bool = True,
        columns: str = "*",
    ) -> StoreResult:
        values = list(values)
        if not values:
            return StoreResult(rows=[])

        def build():
            q = self.client.table(table).select(columns).in_(column, values)
            if order_by:
                q = q.order(order_by, desc=desc)
            return q
        return self._run("query", table, build)

    def insert(self, table: str, records: List[Dict[str, Any]]) -> StoreResult:
        return self._run("insert", table, lambda: self.client.table(table).insert(records))

    def update(self, table: str, patch: Dict[str, Any], filters: Filters) -> StoreResult:
        return self._run(
            "update", table,
            lambda: _apply_filters(self.client.table(table).update(patch), filters),
        )

    def delete(self, table: str, filters: Filters) -> StoreResult:
        return self._run(
            "delete", table,
            lambda: _apply_filters(self.client.table(table).delete(), filters),
        )


def raise_for_error(result: StoreResult, action: str) -> List[Dict[str, Any]]:
    """Return the rows of a successful result, or raise the classified domain error."""
    if result.error is None:
        return result.rows
    error = result.error
    if error.kind == ErrorKind.HAS_CHILDREN and not action.startswith("delete"):
        # On insert/update a foreign key violation means the referenced parent is gone
        raise exception_for_kind(ErrorKind.VALIDATION, f"Failed to {action}: referenced parent does not exist")
    if error.kind == ErrorKind.HAS_CHILDREN:
        message = f"Cannot {action}: still contains children"
    elif error.kind == ErrorKind.PERMISSION_DENIED:
        message = f"Permission denied while trying to {action}. Check your group membership."
    elif error.kind == ErrorKind.AUTH_EXPIRED:
        message = "Your session has expired. Please sign in again."
    else:
        message = f"Failed to {action}: {error.message}"
    raise exception_for_kind(error.kind, message)


def first_or_none(rows: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    return rows[0] if rows else None


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
