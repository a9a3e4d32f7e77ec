# =============================================================================
# core/services/catalog_service.py - Catalog Store
# =============================================================================
# Owns the authoritative listing set for a request:
# - reads active listings joined with seller info (newest first)
# - filtered browsing on top of the filter engine
# - seller CRUD, always scoped to the caller's own user id
# =============================================================================

import logging
from datetime import datetime, timezone
from uuid import UUID

from lib.supabase_client import SupabaseClient
from lib.catalog_filter import filter_listings, unique_locations
from core.models.listing import (
    CatalogView,
    FilterCriteria,
    Listing,
    ListingCreate,
    ListingUpdate,
)
from core.models.profile import UserContext, UserRole
from app.config import settings
from app.exceptions import ListingNotFoundError, NotListingOwnerError, RoleRequiredError

logger = logging.getLogger(__name__)


def require_farmer(ctx: UserContext) -> None:
    """Raise RoleRequiredError unless the caller is a farmer."""
    if ctx.role != UserRole.FARMER:
        raise RoleRequiredError(UserRole.FARMER.value, ctx.role.value)


class CatalogService:
    """
    Service for catalog reads and seller writes.

    Every read goes to the database; nothing is cached between requests.
    """

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @staticmethod
    def fetch_catalog() -> list[Listing]:
        """
        Fetch all active listings with seller info, newest first.

        Raises:
            SupabaseClientError: If the query fails
        """
        rows = SupabaseClient.fetch_active_products(limit=settings.CATALOG_FETCH_LIMIT)
        return [Listing.from_db_row(row) for row in rows]

    @staticmethod
    def browse(criteria: FilterCriteria) -> CatalogView:
        """
        Fetch the catalog and apply the filter criteria.

        Returns:
            CatalogView with the visible listings and both counts
        """
        catalog = CatalogService.fetch_catalog()
        visible = filter_listings(catalog, criteria)

        logger.debug(f"Catalog filter kept {len(visible)} of {len(catalog)} listings")
        return CatalogView(
            listings=visible,
            shown=len(visible),
            total=len(catalog),
            criteria=criteria,
        )

    @staticmethod
    def list_locations() -> list[str]:
        """Distinct seller locations across the active catalog."""
        return unique_locations(CatalogService.fetch_catalog())

    @staticmethod
    def get_listing(listing_id: UUID | str, include_inactive: bool = False) -> Listing:
        """
        Get one listing by id.

        Args:
            listing_id: The listing UUID
            include_inactive: Also return deactivated listings

        Raises:
            ListingNotFoundError: If missing, or inactive and not requested
        """
        row = SupabaseClient.fetch_product(listing_id)
        if not row:
            raise ListingNotFoundError(str(listing_id))

        listing = Listing.from_db_row(row)
        if not listing.is_active and not include_inactive:
            raise ListingNotFoundError(str(listing_id))
        return listing

    @staticmethod
    def list_farmer_listings(farmer_id: UUID | str, active_only: bool = True) -> list[Listing]:
        """One farmer's listings, newest first."""
        rows = SupabaseClient.fetch_products_by_farmer(farmer_id, active_only=active_only)
        return [Listing.from_db_row(row) for row in rows]

    @staticmethod
    def list_own_listings(ctx: UserContext) -> list[Listing]:
        """The caller's own listings, active and inactive."""
        require_farmer(ctx)
        return CatalogService.list_farmer_listings(ctx.user_id, active_only=False)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @staticmethod
    def create_listing(ctx: UserContext, payload: ListingCreate) -> Listing:
        """
        Create a listing owned by the caller.

        Raises:
            RoleRequiredError: If the caller is not a farmer
        """
        require_farmer(ctx)

        data = payload.to_db_payload()
        data["farmer_id"] = str(ctx.user_id)

        row = SupabaseClient.insert_product(data)
        logger.info(f"Created listing {row.get('id')} for farmer {ctx.user_id}")
        return Listing.from_db_row(row)

    @staticmethod
    def get_owned_listing(ctx: UserContext, listing_id: UUID | str) -> Listing:
        """
        Get a listing (active or not) that the caller owns.

        Raises:
            RoleRequiredError: If the caller is not a farmer
            ListingNotFoundError: If the listing doesn't exist
            NotListingOwnerError: If another farmer owns it
        """
        require_farmer(ctx)
        listing = CatalogService.get_listing(listing_id, include_inactive=True)
        if listing.farmer_id != ctx.user_id:
            raise NotListingOwnerError(str(listing_id))
        return listing

    @staticmethod
    def update_listing(
        ctx: UserContext,
        listing_id: UUID | str,
        payload: ListingUpdate,
    ) -> Listing:
        """
        Update a listing the caller owns.

        Raises:
            ListingNotFoundError: If the listing doesn't exist
            NotListingOwnerError: If another farmer owns it
        """
        listing = CatalogService.get_owned_listing(ctx, listing_id)

        data = payload.to_db_payload()
        if not data:
            return listing

        data["updated_at"] = datetime.now(timezone.utc).isoformat()
        row = SupabaseClient.update_product(listing_id, ctx.user_id, data)
        if not row:
            raise ListingNotFoundError(str(listing_id))

        logger.info(f"Updated listing {listing_id}: {sorted(data)}")
        # update() returns the bare row; keep the seller info we already have
        updated = Listing.from_db_row(row)
        return updated.model_copy(update={"seller": listing.seller})

    @staticmethod
    def set_image_url(ctx: UserContext, listing_id: UUID | str, image_url: str) -> Listing:
        """Point a listing the caller owns at a new image."""
        return CatalogService.update_listing(ctx, listing_id, ListingUpdate(image_url=image_url))

    @staticmethod
    def delete_listing(ctx: UserContext, listing_id: UUID | str) -> None:
        """
        Delete a listing the caller owns.

        Raises:
            ListingNotFoundError: If the listing doesn't exist
            NotListingOwnerError: If another farmer owns it
        """
        CatalogService.get_owned_listing(ctx, listing_id)

        if not SupabaseClient.delete_product(listing_id, ctx.user_id):
            raise ListingNotFoundError(str(listing_id))
        logger.info(f"Deleted listing {listing_id} for farmer {ctx.user_id}")
