"""
Per-request session context and the refresh-then-retry policy.

An operation failing with ``AuthExpiredError`` triggers exactly one session
refresh. If the refresh succeeds the store is rebound to the new access token
and the operation is retried once; otherwise the caller gets
``ReauthenticationRequiredError``. There is never a second refresh.
"""

import logging
from typing import Any, Callable, Dict, Optional, TypeVar

from fastapi import Response

from aizer.core.exceptions import AuthExpiredError, ReauthenticationRequiredError
from aizer.database.store import Store
from aizer.modules.auth.service import AuthService

logger = logging.getLogger(__name__)

T = TypeVar("T")

SESSION_EXPIRED_MESSAGE = "Your session has expired. Please sign in again."


class SessionContext:
    def __init__(
        self,
        auth_service: AuthService,
        store: Store,
        access_token: str,
        refresh_token: Optional[str] = None,
        response: Optional[Response] = None,
    ):
        self.auth_service = auth_service
        self.store = store
        self.access_token = access_token
        self.refresh_token = refresh_token
        self.response = response
        self.user: Optional[Dict[str, Any]] = None
        self._refresh_attempted = False

    @property
    def user_id(self) -> str:
        return self.user["id"]

    def authenticate(self) -> Dict[str, Any]:
        self.user = self.auth_service.get_current_user(self.access_token)
        return self.user

    def refresh(self) -> bool:
        """Attempt the single session refresh allowed for this context."""
        if self._refresh_attempted:
            return False
        self._refresh_attempted = True
        if not self.refresh_token:
            logger.info("Authentication error detected but no refresh token was supplied")
            return False
        logger.info("Authentication error detected, trying to refresh session...")
        session = self.auth_service.refresh_session(self.refresh_token)
        if session is None:
            return False
        self.access_token = session.access_token
        self.refresh_token = session.refresh_token
        self.store.set_session(session.access_token)
        if self.response is not None:
            self.response.headers["X-Access-Token"] = session.access_token
            self.response.headers["X-Refresh-Token"] = session.refresh_token
        logger.info("Session refreshed for user %s", session.user_id)
        return True

    def run(self, operation: Callable[[], T]) -> T:
        try:
            return operation()
        except AuthExpiredError as e:
            if isinstance(e, ReauthenticationRequiredError) or not self.refresh():
                raise ReauthenticationRequiredError(SESSION_EXPIRED_MESSAGE) from e
        try:
            return operation()
        except AuthExpiredError as e:
            logger.warning("Operation still unauthorized after session refresh")
            raise ReauthenticationRequiredError(SESSION_EXPIRED_MESSAGE) from e
