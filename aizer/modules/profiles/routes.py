from fastapi import APIRouter, Depends
from aizer.core.dependencies import get_session_context
from aizer.core.session import SessionContext
from aizer.modules.profiles.schemas import ProfileResponse, ProfileUpdate
from aizer.modules.profiles.service import ProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(ctx: SessionContext = Depends(get_session_context)):
    return ctx.run(lambda: ProfileService(ctx.store).get_profile(ctx.user))


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    profile_data: ProfileUpdate,
    ctx: SessionContext = Depends(get_session_context),
):
    """Update display name and accent color of the current user"""
    return ctx.run(lambda: ProfileService(ctx.store).update_profile(ctx.user, profile_data))
