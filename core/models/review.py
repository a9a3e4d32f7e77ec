# =============================================================================
# core/models/review.py - Review Schemas
# =============================================================================

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class Review(BaseModel):
    """A customer's review of a farmer."""

    id: UUID
    customer_id: UUID
    farmer_id: UUID
    rating: int = Field(..., ge=1, le=5)
    comment: str = ""
    created_at: datetime | None = None


class ReviewCreate(BaseModel):
    """Input for leaving a review."""

    rating: int = Field(..., ge=1, le=5, description="Stars, 1 to 5")
    comment: str = Field(default="", max_length=2000)


class RatingSummary(BaseModel):
    """Average rating over a farmer's reviews."""

    average: float | None = Field(default=None, description="None when there are no reviews")
    count: int = Field(default=0, ge=0)
