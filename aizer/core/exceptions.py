"""
Domain exceptions for AIZER services.

Services raise these; the FastAPI exception handler in ``aizer.main`` turns
them into JSON responses the frontend can render. ``str(exc)`` is the
user-facing message.
"""

from aizer.database.errors import ErrorKind


class AizerError(Exception):
    """Base exception for all AIZER service errors."""

    kind = ErrorKind.TRANSIENT
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FetchFailedError(AizerError):
    """Raised when the store is unreachable or a query fails transiently."""

    kind = ErrorKind.TRANSIENT
    status_code = 503


class PermissionDeniedError(AizerError):
    """Raised when the store's access policy or a group role rejects the caller."""

    kind = ErrorKind.PERMISSION_DENIED
    status_code = 403


class AuthExpiredError(AizerError):
    """Raised when the access token is expired or invalid."""

    kind = ErrorKind.AUTH_EXPIRED
    status_code = 401


class ReauthenticationRequiredError(AuthExpiredError):
    """Raised when a session refresh failed and the user must sign in again."""


class ValidationError(AizerError):
    """Raised when input violates an invariant, before any store command."""

    kind = ErrorKind.VALIDATION
    status_code = 422


class NotFoundError(AizerError):
    """Raised when a requested row does not exist or is not visible."""

    kind = ErrorKind.NOT_FOUND
    status_code = 404


class HasChildrenError(AizerError):
    """Raised when deleting a parent that still contains children."""

    kind = ErrorKind.HAS_CHILDREN
    status_code = 409


class ConflictError(AizerError):
    """Raised when an operation conflicts with existing rows."""

    kind = ErrorKind.CONFLICT
    status_code = 409


_EXCEPTIONS_BY_KIND = {
    ErrorKind.TRANSIENT: FetchFailedError,
    ErrorKind.PERMISSION_DENIED: PermissionDeniedError,
    ErrorKind.AUTH_EXPIRED: AuthExpiredError,
    ErrorKind.VALIDATION: ValidationError,
    ErrorKind.NOT_FOUND: NotFoundError,
    ErrorKind.HAS_CHILDREN: HasChildrenError,
    ErrorKind.CONFLICT: ConflictError,
}


def exception_for_kind(kind: ErrorKind, message: str) -> AizerError:
    return _EXCEPTIONS_BY_KIND.get(kind, FetchFailedError)(message)
