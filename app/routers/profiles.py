# =============================================================================
# app/routers/profiles.py - Own Profile Endpoints
# =============================================================================
# The signed-in user's profile and the farmer availability toggle.
# =============================================================================

from fastapi import APIRouter

from app.dependencies import UserContextDep
from core.models.profile import AvailabilityUpdate, Profile, ProfileUpdate
from core.services.profile_service import ProfileService

router = APIRouter()


@router.get("/me", response_model=Profile)
async def get_my_profile(ctx: UserContextDep):
    """Get the caller's profile."""
    return ProfileService.get_profile_by_user(ctx.user_id)


@router.patch("/me", response_model=Profile)
async def update_my_profile(payload: ProfileUpdate, ctx: UserContextDep):
    """Update name, contact details, location or bio."""
    return ProfileService.update_profile(ctx, payload)


@router.post("/me/availability", response_model=Profile)
async def set_my_availability(ctx: UserContextDep, payload: AvailabilityUpdate | None = None):
    """
    Set whether the farmer is available for calls.

    Send {"is_available": true|false} to set it, or no body to toggle.
    Farmers only.
    """
    is_available = payload.is_available if payload else None
    return ProfileService.set_availability(ctx, is_available)
