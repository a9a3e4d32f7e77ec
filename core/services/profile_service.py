# =============================================================================
# core/services/profile_service.py - Profile Business Logic
# =============================================================================
# Reads and self-service updates of marketplace profiles, including the
# farmer availability toggle shown next to every listing.
# =============================================================================

import logging
from datetime import datetime, timezone
from uuid import UUID

from lib.supabase_client import SupabaseClient
from core.models.profile import Profile, ProfileUpdate, UserContext
from app.exceptions import ProfileNotFoundError
from core.services.catalog_service import require_farmer

logger = logging.getLogger(__name__)


class ProfileService:
    """Service for profile operations."""

    @staticmethod
    def get_profile(profile_id: UUID | str) -> Profile:
        """
        Get a profile by its id.

        Raises:
            ProfileNotFoundError: If no profile has this id
        """
        row = SupabaseClient.fetch_profile(profile_id)
        if not row:
            raise ProfileNotFoundError(str(profile_id))
        return Profile.from_db_row(row)

    @staticmethod
    def get_profile_by_user(user_id: UUID | str) -> Profile:
        """
        Get the profile of an auth user.

        Raises:
            ProfileNotFoundError: If the user has no profile yet
        """
        row = SupabaseClient.fetch_profile_by_user(user_id)
        if not row:
            raise ProfileNotFoundError(str(user_id))
        return Profile.from_db_row(row)

    @staticmethod
    def build_context(user_id: UUID | str) -> UserContext:
        """Build the explicit caller context from the user's profile."""
        profile = ProfileService.get_profile_by_user(user_id)
        return UserContext(
            user_id=profile.user_id,
            role=profile.role,
            profile_id=profile.id,
            full_name=profile.full_name,
        )

    @staticmethod
    def update_profile(ctx: UserContext, payload: ProfileUpdate) -> Profile:
        """
        Update the caller's own profile.

        Raises:
            ProfileNotFoundError: If the caller has no profile
        """
        data = payload.to_db_payload()
        if not data:
            return ProfileService.get_profile_by_user(ctx.user_id)

        data["updated_at"] = datetime.now(timezone.utc).isoformat()
        row = SupabaseClient.update_profile(ctx.user_id, data)
        if not row:
            raise ProfileNotFoundError(str(ctx.user_id))

        logger.info(f"Updated profile for user {ctx.user_id}: {sorted(data)}")
        return Profile.from_db_row(row)

    @staticmethod
    def set_availability(ctx: UserContext, is_available: bool | None = None) -> Profile:
        """
        Set the caller's availability, or flip it when is_available is None.

        Raises:
            RoleRequiredError: If the caller is not a farmer
            ProfileNotFoundError: If the caller has no profile
        """
        require_farmer(ctx)

        if is_available is None:
            current = ProfileService.get_profile_by_user(ctx.user_id)
            is_available = not current.is_available

        row = SupabaseClient.update_profile(
            ctx.user_id,
            {
                "is_available": is_available,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            },
        )
        if not row:
            raise ProfileNotFoundError(str(ctx.user_id))

        logger.info(f"Availability {'enabled' if is_available else 'disabled'} for user {ctx.user_id}")
        return Profile.from_db_row(row)
