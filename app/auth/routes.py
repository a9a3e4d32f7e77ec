# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Note: Actual signup/login is handled by Supabase Auth client-side.
# These routes are for checking a token and reading who it belongs to.
# =============================================================================

import logging
from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser
from core.models.profile import Profile
from core.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=Profile)
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> Profile:
    """
    Get the current authenticated user's marketplace profile.

    Raises:
        401: If not authenticated
        404: If the account has no profile yet
    """
    return ProfileService.get_profile_by_user(user.id)


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Useful for checking if a stored token is still valid.

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email
    }
