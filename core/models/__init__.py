# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - listing.py: Listings, sellers, categories/units and filter criteria
# - profile.py: User profiles, roles and the explicit caller context
# - contact.py: Contact intent, phone/email actions and outcomes
# - review.py: Farmer reviews and rating summaries
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Listing Models - The catalog
# -----------------------------------------------------------------------------
from .listing import (
    CatalogView,
    Category,
    FilterCriteria,
    Listing,
    ListingCreate,
    ListingUpdate,
    Seller,
    Unit,
)

# -----------------------------------------------------------------------------
# Profile Models - Farmers and customers
# -----------------------------------------------------------------------------
from .profile import (
    AvailabilityUpdate,
    Profile,
    ProfileUpdate,
    UserContext,
    UserRole,
)

# -----------------------------------------------------------------------------
# Contact Models - Reaching a farmer about a listing
# -----------------------------------------------------------------------------
from .contact import (
    ContactFlowState,
    ContactIntent,
    ContactOutcome,
    ContactRequest,
    DialAction,
    EmailDraft,
    PhoneAction,
    UnavailableAction,
)

# -----------------------------------------------------------------------------
# Review Models
# -----------------------------------------------------------------------------
from .review import (
    RatingSummary,
    Review,
    ReviewCreate,
)

__all__ = [
    # Listing
    "CatalogView",
    "Category",
    "FilterCriteria",
    "Listing",
    "ListingCreate",
    "ListingUpdate",
    "Seller",
    "Unit",
    # Profile
    "AvailabilityUpdate",
    "Profile",
    "ProfileUpdate",
    "UserContext",
    "UserRole",
    # Contact
    "ContactFlowState",
    "ContactIntent",
    "ContactOutcome",
    "ContactRequest",
    "DialAction",
    "EmailDraft",
    "PhoneAction",
    "UnavailableAction",
    # Review
    "RatingSummary",
    "Review",
    "ReviewCreate",
]
