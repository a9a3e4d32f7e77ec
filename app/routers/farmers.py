# =============================================================================
# app/routers/farmers.py - Public Farmer Pages
# =============================================================================
# A farmer's public profile with their active listings, and their reviews.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path
from pydantic import BaseModel, Field

from app.dependencies import UserContextDep
from core.models.listing import Listing
from core.models.profile import Profile
from core.models.review import RatingSummary, Review, ReviewCreate
from core.services.catalog_service import CatalogService
from core.services.profile_service import ProfileService
from core.services.review_service import ReviewService

router = APIRouter()


class FarmerPageResponse(BaseModel):
    """Everything shown on a farmer's public page."""
    farmer: Profile
    listings: list[Listing] = Field(default_factory=list)
    rating: RatingSummary


@router.get("/{profile_id}", response_model=FarmerPageResponse)
async def get_farmer(
    profile_id: Annotated[UUID, Path(description="Farmer profile UUID")],
):
    """Get a farmer's profile, active listings and rating."""
    farmer = ProfileService.get_profile(profile_id)
    listings = CatalogService.list_farmer_listings(farmer.user_id)
    rating = ReviewService.summarize(ReviewService.list_reviews(farmer.user_id))

    return FarmerPageResponse(farmer=farmer, listings=listings, rating=rating)


@router.get("/{profile_id}/reviews", response_model=list[Review])
async def list_farmer_reviews(
    profile_id: Annotated[UUID, Path(description="Farmer profile UUID")],
):
    """Reviews of a farmer, newest first."""
    farmer = ProfileService.get_profile(profile_id)
    return ReviewService.list_reviews(farmer.user_id)


@router.post("/{profile_id}/reviews", response_model=Review, status_code=201)
async def review_farmer(
    profile_id: Annotated[UUID, Path(description="Farmer profile UUID")],
    payload: ReviewCreate,
    ctx: UserContextDep,
):
    """
    Leave a review for a farmer. Customers only.

    Returns 400 NOT_A_FARMER when the profile is not a farmer or is the
    caller's own.
    """
    farmer = ProfileService.get_profile(profile_id)
    return ReviewService.create_review(ctx, farmer, payload)
