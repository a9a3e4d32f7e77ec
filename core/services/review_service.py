# =============================================================================
# core/services/review_service.py - Review Business Logic
# =============================================================================

import logging
from uuid import UUID

from lib.supabase_client import SupabaseClient
from core.models.profile import Profile, UserContext, UserRole
from core.models.review import RatingSummary, Review, ReviewCreate
from app.exceptions import NotAFarmerError, RoleRequiredError

logger = logging.getLogger(__name__)


class ReviewService:
    """Service for farmer reviews."""

    @staticmethod
    def list_reviews(farmer_id: UUID | str) -> list[Review]:
        """Reviews of a farmer (by auth user id), newest first."""
        return [Review(**row) for row in SupabaseClient.fetch_reviews(farmer_id)]

    @staticmethod
    def summarize(reviews: list[Review]) -> RatingSummary:
        """Average rating rounded to one decimal."""
        if not reviews:
            return RatingSummary()
        average = sum(r.rating for r in reviews) / len(reviews)
        return RatingSummary(average=round(average, 1), count=len(reviews))

    @staticmethod
    def create_review(
        ctx: UserContext,
        farmer: Profile,
        payload: ReviewCreate,
    ) -> Review:
        """
        Leave a review for a farmer.

        Args:
            ctx: The reviewing customer
            farmer: Profile being reviewed; must be someone else's farm

        Raises:
            RoleRequiredError: If the caller is not a customer
            NotAFarmerError: If the profile is not a farmer, or is the caller's own
        """
        if ctx.role != UserRole.CUSTOMER:
            raise RoleRequiredError(UserRole.CUSTOMER.value, ctx.role.value)
        if farmer.role != UserRole.FARMER:
            raise NotAFarmerError(str(farmer.id), f"profile role is '{farmer.role.value}'")
        if farmer.user_id == ctx.user_id:
            raise NotAFarmerError(str(farmer.id), "you cannot review yourself")

        row = SupabaseClient.insert_review({
            "customer_id": str(ctx.user_id),
            "farmer_id": str(farmer.user_id),
            "rating": payload.rating,
            "comment": payload.comment,
        })
        logger.info(f"Customer {ctx.user_id} reviewed farmer {farmer.user_id} ({payload.rating} stars)")
        return Review(**row)
