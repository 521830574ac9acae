from fastapi import APIRouter, Depends
from aizer.modules.auth.schemas import (
    LoginRequest, RegisterRequest, RefreshRequest, TokenResponse, RegisterResponse
)
from aizer.modules.auth.service import AuthService
from aizer.core.dependencies import get_access_token, get_auth_service, get_session_context
from aizer.core.exceptions import ReauthenticationRequiredError
from aizer.core.session import SESSION_EXPIRED_MESSAGE, SessionContext

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access + refresh tokens"""
    return service.login(login_data)


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    refresh_data: RefreshRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Exchange a refresh token for a new session"""
    session = service.refresh_session(refresh_data.refresh_token)
    if session is None:
        raise ReauthenticationRequiredError(SESSION_EXPIRED_MESSAGE)
    return session


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_access_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate the session"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me")
async def get_current_user(ctx: SessionContext = Depends(get_session_context)):
    """Get current authenticated user"""
    return ctx.user
