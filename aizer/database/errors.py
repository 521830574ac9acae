"""
Provider error classification.

Supabase (PostgREST and GoTrue) reports failures as codes plus free-form
messages. Everything above the adapters dispatches on ``ErrorKind`` only;
this module is the single place that reads provider error text.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    TRANSIENT = "transient"
    PERMISSION_DENIED = "permission_denied"
    AUTH_EXPIRED = "auth_expired"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    HAS_CHILDREN = "has_children"
    CONFLICT = "conflict"


# GoTrue / PostgREST messages signalling an unusable session
SESSION_EXPIRED_MARKERS = (
    "Invalid Refresh Token",
    "JWT expired",
    "JWT invalid",
)

_CODE_KINDS = {
    # PostgREST JWT errors
    "PGRST301": ErrorKind.AUTH_EXPIRED,
    "PGRST302": ErrorKind.AUTH_EXPIRED,
    "401": ErrorKind.AUTH_EXPIRED,
    # Row-level security / grants
    "42501": ErrorKind.PERMISSION_DENIED,
    "403": ErrorKind.PERMISSION_DENIED,
    # Referential integrity: row still referenced by children
    "23503": ErrorKind.HAS_CHILDREN,
    "23505": ErrorKind.CONFLICT,
    # Check / not-null / bad input
    "23514": ErrorKind.VALIDATION,
    "23502": ErrorKind.VALIDATION,
    "22P02": ErrorKind.VALIDATION,
    "22003": ErrorKind.VALIDATION,
    # .single() found no row
    "PGRST116": ErrorKind.NOT_FOUND,
    "404": ErrorKind.NOT_FOUND,
}


def classify_error(code: Optional[str], message: Optional[str]) -> ErrorKind:
    """Map a provider (code, message) pair to an ErrorKind."""
    text = message or ""
    if any(marker in text for marker in SESSION_EXPIRED_MARKERS):
        return ErrorKind.AUTH_EXPIRED
    kind = _CODE_KINDS.get(str(code)) if code is not None else None
    if kind is not None:
        return kind
    lowered = text.lower()
    if "row-level security" in lowered or "permission denied" in lowered:
        return ErrorKind.PERMISSION_DENIED
    if "violates foreign key constraint" in lowered:
        return ErrorKind.HAS_CHILDREN
    if "jwt" in lowered:
        return ErrorKind.AUTH_EXPIRED
    return ErrorKind.TRANSIENT
