# =============================================================================
# core/models/listing.py - Listing Schemas
# =============================================================================
# These models define the catalog contract:
# - Category / Unit: closed enumerations for product classification
# - Seller: the farmer fields joined onto each listing
# - Listing: one product offered for sale
# - ListingCreate / ListingUpdate: seller input for catalog writes
# - FilterCriteria: the transient search/filter state of a catalog view
# - CatalogView: a filtered catalog plus "showing X of Y" counts
# =============================================================================

import logging
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)


class Category(str, Enum):
    """
    Product categories.

    Matching on category is exact equality, so the set is closed.
    To add a category, add a member here. The products.category column is
    free text, so no migration is needed; stored values that are not a
    member decode to OTHER.

    Lookup by value is case-insensitive: Category("fruits") is FRUITS.
    """
    VEGETABLES = "Vegetables"
    FRUITS = "Fruits"
    GRAINS = "Grains"
    DAIRY = "Dairy"
    MEAT = "Meat"
    HERBS = "Herbs"
    NUTS = "Nuts"
    OTHER = "Other"

    @classmethod
    def _missing_(cls, value: object):
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        return None


class Unit(str, Enum):
    """
    Selling units. Extended the same way as Category; unknown stored
    values decode to PIECE.
    """
    LB = "lb"
    KG = "kg"
    OZ = "oz"
    PIECE = "piece"
    DOZEN = "dozen"
    BUNCH = "bunch"
    BAG = "bag"
    BOX = "box"

    @classmethod
    def _missing_(cls, value: object):
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value == wanted:
                    return member
        return None


def _decode_stored(enum_cls: type[Enum], value: Any, fallback: Enum) -> Any:
    """Map a stored free-text value onto an enum, falling back for unknowns."""
    if isinstance(value, enum_cls) or not isinstance(value, str):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        logger.warning(f"Unknown {enum_cls.__name__} value {value!r}, using {fallback.value!r}")
        return fallback


def _to_decimal(value: Any) -> Any:
    # floats from PostgREST go through str() so 2.5 stays Decimal("2.5")
    if isinstance(value, float):
        return Decimal(str(value))
    return value


class Seller(BaseModel):
    """
    Seller fields embedded in a listing by the catalog join.

    Every field is optional in practice: a missing join or a half-filled
    profile must never break filtering or contact.
    """

    full_name: str = Field(
        default="",
        description="Seller display name"
    )

    location: str | None = Field(
        default=None,
        description="Free-text location, e.g. 'Springfield, IL'"
    )

    phone: str | None = Field(
        default=None,
        description="Phone number as entered by the farmer"
    )

    is_available: bool = Field(
        default=False,
        description="Whether the farmer currently takes calls (displayed, not gated)"
    )

    @field_validator("full_name", mode="before")
    @classmethod
    def _none_name_to_blank(cls, value: Any) -> Any:
        return "" if value is None else value


class Listing(BaseModel):
    """
    A product offered for sale by a seller.

    Built from a products row; the joined profile (PostgREST key
    "profiles") becomes `seller`.

    Example:
        {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "farmer_id": "660e8400-e29b-41d4-a716-446655440001",
            "name": "Heirloom Tomatoes",
            "category": "Vegetables",
            "price": "2.50",
            "unit": "lb",
            "quantity_available": 40,
            "seller": {"full_name": "Green Acres", "location": "Springfield"}
        }
    """

    id: UUID = Field(..., description="Unique, stable listing identifier")
    farmer_id: UUID = Field(..., description="Auth user id of the seller")
    name: str = Field(..., min_length=1, description="Product name")
    description: str = Field(default="", description="Product description")
    category: Category = Field(..., description="Product category")
    price: Decimal = Field(..., ge=0, description="Unit price")
    unit: Unit = Field(..., description="Selling unit")
    quantity_available: int = Field(..., ge=0, description="Units in stock")
    image_url: str | None = Field(default=None, description="Public image URL")
    is_active: bool = Field(default=True, description="Shown in the catalog")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime | None = Field(default=None, description="Last update timestamp")
    seller: Seller | None = Field(default=None, description="Joined seller info")

    @field_validator("category", mode="before")
    @classmethod
    def _decode_category(cls, value: Any) -> Any:
        return _decode_stored(Category, value, Category.OTHER)

    @field_validator("unit", mode="before")
    @classmethod
    def _decode_unit(cls, value: Any) -> Any:
        return _decode_stored(Unit, value, Unit.PIECE)

    @field_validator("price", mode="before")
    @classmethod
    def _decode_price(cls, value: Any) -> Any:
        return _to_decimal(value)

    @field_validator("description", mode="before")
    @classmethod
    def _none_description_to_blank(cls, value: Any) -> Any:
        return "" if value is None else value

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "Listing":
        """Create a Listing from a products row (with optional profiles join)."""
        data = dict(row)
        profile = data.pop("profiles", None)
        if profile is not None:
            data["seller"] = profile
        return cls(**data)


class ListingCreate(BaseModel):
    """
    Seller input for creating a listing.

    farmer_id is never taken from the body; it comes from the caller's
    verified identity.
    """

    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=5000)
    category: Category
    price: Decimal = Field(..., ge=0, max_digits=12, description="Unit price; sub-cent amounts are kept")
    unit: Unit
    quantity_available: int = Field(..., ge=0)
    image_url: str | None = None
    is_active: bool = True

    def to_db_payload(self) -> dict[str, Any]:
        """Column values for an insert."""
        payload = self.model_dump(mode="json")
        payload["price"] = float(self.price)
        return payload


class ListingUpdate(BaseModel):
    """Partial update of a listing; only supplied fields are written."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    category: Category | None = None
    price: Decimal | None = Field(default=None, ge=0, max_digits=12)
    unit: Unit | None = None
    quantity_available: int | None = Field(default=None, ge=0)
    image_url: str | None = None
    is_active: bool | None = None

    def to_db_payload(self) -> dict[str, Any]:
        """
        Column values for an update.

        Unset fields are skipped. An explicit null is only written for
        image_url (removing the image); the other columns are NOT NULL.
        """
        payload = {
            key: value
            for key, value in self.model_dump(mode="json", exclude_unset=True).items()
            if value is not None or key == "image_url"
        }
        if "price" in payload:
            payload["price"] = float(self.price)
        return payload


class FilterCriteria(BaseModel):
    """
    Current search/filter constraints on the catalog view.

    Every axis is optional; a blank string means "no constraint".
    Criteria are transient and never persisted.
    """

    search_text: str | None = Field(
        default=None,
        description="Case-insensitive substring of name, description or seller name"
    )

    category: Category | None = Field(
        default=None,
        description="Exact category"
    )

    location: str | None = Field(
        default=None,
        description="Case-insensitive substring of the seller location"
    )

    @field_validator("search_text", "category", "location", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def is_empty(self) -> bool:
        """True when no axis is constrained."""
        return self.search_text is None and self.category is None and self.location is None

    @classmethod
    def cleared(cls) -> "FilterCriteria":
        """Criteria with every axis reset ("Clear Filters")."""
        return cls()


class CatalogView(BaseModel):
    """
    A filtered catalog ready for display.

    Example:
        {"listings": [...], "shown": 3, "total": 12, "criteria": {...}}
    """

    listings: list[Listing] = Field(default_factory=list)
    shown: int = Field(default=0, ge=0, description="Listings after filtering")
    total: int = Field(default=0, ge=0, description="Listings before filtering")
    criteria: FilterCriteria = Field(default_factory=FilterCriteria)

    @property
    def summary(self) -> str:
        return f"Showing {self.shown} of {self.total} products"
