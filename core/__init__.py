# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the marketplace business logic:
# - models/: Pydantic schemas for listings, profiles, contact and reviews
# - services/: Catalog store, contact router, messengers, profiles,
#   reviews and product image storage
#
# Services take the caller's UserContext explicitly and never read
# request state, so they can be tested without the HTTP layer.
# =============================================================================
