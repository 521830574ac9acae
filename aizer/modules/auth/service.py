import hashlib
import logging
import time
from typing import Any, Dict, Optional, Tuple

import httpx
from supabase import AuthError, Client

from aizer.config.settings import settings
from aizer.core.exceptions import (
    AizerError, AuthExpiredError, ConflictError, FetchFailedError, exception_for_kind,
)
from aizer.database.errors import ErrorKind, classify_error
from aizer.modules.auth.events import SessionEvent, SessionEvents, session_events
from aizer.modules.auth.schemas import LoginRequest, RegisterRequest, RegisterResponse, TokenResponse

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, Tuple[Dict[str, Any], float]] = {}


def classify_auth_error(exc: Exception) -> ErrorKind:
    if isinstance(exc, httpx.HTTPError):
        return ErrorKind.TRANSIENT
    code = getattr(exc, "code", None) or getattr(exc, "status", None)
    return classify_error(str(code) if code is not None else None, getattr(exc, "message", None) or str(exc))


def _evict_expired(now: float) -> None:
    for key in [k for k, (_, expiry) in _AUTH_USER_CACHE.items() if expiry <= now]:
        del _AUTH_USER_CACHE[key]


def is_session_expired(error: Exception) -> bool:
    """True when the user has to sign in again (drives the re-authentication prompt)."""
    if isinstance(error, AizerError):
        return error.kind == ErrorKind.AUTH_EXPIRED
    return classify_auth_error(error) == ErrorKind.AUTH_EXPIRED


def _token_response(session, user, fallback_email: Optional[str] = None) -> TokenResponse:
    return TokenResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        token_type="bearer",
        expires_in=getattr(session, "expires_in", None),
        user_id=user.id,
        email=user.email or fallback_email,
    )


class AuthService:
    def __init__(self, supabase: Client, events: SessionEvents = session_events):
        self.supabase = supabase
        self.events = events

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new user using Supabase Auth"""
        user_metadata = {}
        if register_data.display_name:
            user_metadata["display_name"] = register_data.display_name
        try:
            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": user_metadata
                }
            })
        except (AuthError, httpx.HTTPError) as e:
            error_message = str(e)
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise ConflictError("User already exists")
            logger.error("Registration failed: %s", error_message)
            raise exception_for_kind(classify_auth_error(e), f"Registration failed: {error_message}")

        if not auth_response.user:
            raise FetchFailedError("Failed to register user")
        if auth_response.session:
            self.events.emit(SessionEvent.SIGNED_IN, auth_response.user.id)
        return RegisterResponse(
            user_id=auth_response.user.id,
            email=auth_response.user.email or register_data.email,
            message="User registered successfully"
        )

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user using Supabase Auth"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })
        except (AuthError, httpx.HTTPError) as e:
            kind = classify_auth_error(e)
            if kind == ErrorKind.TRANSIENT and isinstance(e, httpx.HTTPError):
                raise FetchFailedError("Login failed: authentication service unavailable")
            raise AuthExpiredError("Invalid email or password")

        if not auth_response.user or not auth_response.session:
            raise AuthExpiredError("Invalid credentials")
        self.events.emit(SessionEvent.SIGNED_IN, auth_response.user.id)
        return _token_response(auth_response.session, auth_response.user, login_data.email)

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        cache_key = hashlib.sha256(token.encode()).hexdigest()
        now = time.monotonic()
        if cache_key in _AUTH_USER_CACHE:
            user_data, expiry = _AUTH_USER_CACHE[cache_key]
            if now < expiry:
                return user_data
            del _AUTH_USER_CACHE[cache_key]
        try:
            user_response = self.supabase.auth.get_user(jwt=token)
        except (AuthError, httpx.HTTPError) as e:
            kind = classify_auth_error(e)
            if kind == ErrorKind.TRANSIENT and isinstance(e, httpx.HTTPError):
                raise FetchFailedError("Authentication service unavailable")
            raise AuthExpiredError("Invalid or expired token")
        if not user_response or not user_response.user:
            raise AuthExpiredError("Invalid or expired token")
        user = user_response.user
        user_data = {
            "id": user.id,
            "email": user.email,
            "user_metadata": user.user_metadata or {},
            "created_at": user.created_at,
        }
        if len(_AUTH_USER_CACHE) >= settings.auth_user_cache_max_size:
            _evict_expired(now)
        if len(_AUTH_USER_CACHE) < settings.auth_user_cache_max_size:
            _AUTH_USER_CACHE[cache_key] = (user_data, now + settings.auth_user_cache_ttl_sec)
        return user_data

    def refresh_session(self, refresh_token: str) -> Optional[TokenResponse]:
        """Exchange a refresh token for a new session. Returns None when the refresh fails."""
        try:
            auth_response = self.supabase.auth.refresh_session(refresh_token)
        except (AuthError, httpx.HTTPError) as e:
            logger.error("Error refreshing session: %s", e)
            return None
        if not auth_response or not auth_response.session or not auth_response.user:
            logger.error("Session refresh returned no session")
            return None
        self.events.emit(SessionEvent.TOKEN_REFRESHED, auth_response.user.id)
        return _token_response(auth_response.session, auth_response.user)

    def logout(self, token: str) -> bool:
        """Logout user using Supabase Auth"""
        _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
        try:
            # Supabase Auth tokens are stateless JWTs; this revokes the refresh token server-side
            self.supabase.auth.sign_out()
        except (AuthError, httpx.HTTPError) as e:
            logger.warning("Sign out failed: %s", e)
            return False
        self.events.emit(SessionEvent.SIGNED_OUT)
        return True
