# =============================================================================
# app/routers/products.py - Catalog Endpoints
# =============================================================================
# Public catalog browsing (search/category/location filters) and the
# farmer-only listing management endpoints.
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, File, Path, Query, UploadFile
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field, ValidationError

from app.dependencies import UserContextDep
from core.models.listing import (
    CatalogView,
    Category,
    FilterCriteria,
    Listing,
    ListingCreate,
    ListingUpdate,
    Unit,
)
from core.services.catalog_service import CatalogService
from core.services.storage_service import StorageService

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class CatalogResponse(BaseModel):
    """Filtered catalog with counts for "Showing X of Y products"."""
    listings: list[Listing] = Field(default_factory=list)
    shown: int = Field(..., example=3)
    total: int = Field(..., example=12)
    summary: str = Field(..., example="Showing 3 of 12 products")

    @classmethod
    def from_view(cls, view: CatalogView) -> "CatalogResponse":
        return cls(
            listings=view.listings,
            shown=view.shown,
            total=view.total,
            summary=view.summary,
        )


class DeleteResponse(BaseModel):
    """Response when a listing is deleted."""
    listing_id: str
    message: str = "Product deleted successfully"


# Criteria field -> query parameter it came from
_QUERY_PARAMS = {"search_text": "q", "category": "category", "location": "location"}


def _as_query_errors(exc: ValidationError) -> list[dict]:
    """Re-locate FilterCriteria errors onto the query string, as FastAPI reports them."""
    errors = []
    for error in exc.errors(include_url=False):
        field, *rest = error["loc"]
        errors.append({**error, "loc": ("query", _QUERY_PARAMS.get(field, field), *rest)})
    return errors


# =============================================================================
# Public Endpoints
# =============================================================================

@router.get("", response_model=CatalogResponse)
async def browse_products(
    q: Annotated[str | None, Query(description="Search product, description or farmer name")] = None,
    category: Annotated[str | None, Query(description="Exact category; blank means any")] = None,
    location: Annotated[str | None, Query(description="Part of the farmer's location")] = None,
):
    """
    Browse active listings, newest first.

    All filters are optional and combine with AND. Omitting them returns
    the whole catalog. Blank values count as omitted.
    """
    try:
        criteria = FilterCriteria(search_text=q, category=category, location=location)
    except ValidationError as e:
        raise RequestValidationError(_as_query_errors(e))
    return CatalogResponse.from_view(CatalogService.browse(criteria))


@router.get("/categories")
async def list_categories() -> list[str]:
    """Categories a listing can have, in display order."""
    return [c.value for c in Category]


@router.get("/units")
async def list_units() -> list[str]:
    """Units a listing can be sold by."""
    return [u.value for u in Unit]


@router.get("/locations")
async def list_locations() -> list[str]:
    """Distinct farmer locations across the active catalog."""
    return CatalogService.list_locations()


# =============================================================================
# Farmer Endpoints
# =============================================================================

@router.get("/mine", response_model=list[Listing])
async def list_my_products(ctx: UserContextDep):
    """The caller's own listings, including inactive ones. Farmers only."""
    return CatalogService.list_own_listings(ctx)


@router.post("", response_model=Listing, status_code=201)
async def create_product(payload: ListingCreate, ctx: UserContextDep):
    """Create a listing owned by the caller. Farmers only."""
    return CatalogService.create_listing(ctx, payload)


@router.get("/{listing_id}", response_model=Listing)
async def get_product(
    listing_id: Annotated[UUID, Path(description="Listing UUID")],
):
    """Get one active listing with its farmer info."""
    return CatalogService.get_listing(listing_id)


@router.patch("/{listing_id}", response_model=Listing)
async def update_product(
    listing_id: Annotated[UUID, Path(description="Listing UUID")],
    payload: ListingUpdate,
    ctx: UserContextDep,
):
    """Update a listing. Only the farmer who owns it may do this."""
    return CatalogService.update_listing(ctx, listing_id, payload)


@router.delete("/{listing_id}", response_model=DeleteResponse)
async def delete_product(
    listing_id: Annotated[UUID, Path(description="Listing UUID")],
    ctx: UserContextDep,
):
    """Delete a listing. Only the farmer who owns it may do this."""
    CatalogService.delete_listing(ctx, listing_id)
    return DeleteResponse(listing_id=str(listing_id))


@router.post("/{listing_id}/image", response_model=Listing)
async def upload_product_image(
    listing_id: Annotated[UUID, Path(description="Listing UUID")],
    ctx: UserContextDep,
    file: UploadFile = File(..., description="Product image"),
):
    """
    Upload a product image and attach it to the listing.

    The image goes to Supabase Storage; the listing stores its public URL.
    """
    # Ownership is checked before anything is written to storage
    CatalogService.get_owned_listing(ctx, listing_id)

    content = await file.read()
    path = StorageService.upload_product_image(
        ctx.user_id,
        file.filename or "",
        content,
        file.content_type,
    )

    try:
        return CatalogService.set_image_url(ctx, listing_id, StorageService.get_public_url(path))
    except Exception:
        # Nothing references the object unless the listing row was updated
        logger.warning(f"Attaching image to listing {listing_id} failed, removing {path}")
        StorageService.delete_product_image(path)
        raise
