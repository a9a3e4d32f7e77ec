# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the marketplace models to ensure:
# - Database rows (with the seller join) decode correctly
# - Unknown stored category/unit values fall back instead of failing
# - Write payloads only carry the columns that should be written
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

from decimal import Decimal

import pytest
from pydantic import ValidationError

from core.models import (
    Category,
    ContactIntent,
    FilterCriteria,
    Listing,
    ListingCreate,
    ListingUpdate,
    Profile,
    Unit,
    UserContext,
    UserRole,
)
from tests.conftest import FARMER_ID, TOMATO_ID, product_row, profile_row


# =============================================================================
# Listing
# =============================================================================

class TestListing:
    """Tests for Listing decoding."""

    def test_from_db_row(self):
        listing = Listing.from_db_row(product_row())

        assert listing.id == TOMATO_ID
        assert listing.farmer_id == FARMER_ID
        assert listing.category == Category.VEGETABLES
        assert listing.unit == Unit.LB
        assert listing.price == Decimal("2.5")
        assert listing.seller.location == "Springfield"

    def test_float_price_has_no_binary_noise(self):
        listing = Listing.from_db_row(product_row(price=0.1))

        assert listing.price == Decimal("0.1")

    @pytest.mark.parametrize("stored, expected", [
        ("vegetables", Category.VEGETABLES),
        ("Seafood", Category.OTHER),
    ])
    def test_stored_category(self, stored, expected):
        assert Listing.from_db_row(product_row(category=stored)).category == expected

    def test_unknown_unit_is_piece(self):
        assert Listing.from_db_row(product_row(unit="pallet")).unit == Unit.PIECE

    def test_null_description(self):
        assert Listing.from_db_row(product_row(description=None)).description == ""

    def test_negative_quantity_rejected(self):
        with pytest.raises(ValidationError):
            Listing.from_db_row(product_row(quantity_available=-1))


class TestListingPayloads:

    def test_create_payload(self):
        payload = ListingCreate(
            name="Basil",
            category="herbs",
            price="1.99",
            unit="bunch",
            quantity_available=10,
        ).to_db_payload()

        assert payload["category"] == "Herbs"
        assert payload["unit"] == "bunch"
        assert payload["price"] == 1.99
        assert "farmer_id" not in payload

    def test_create_keeps_sub_cent_price(self):
        listing = ListingCreate(name="Basil", category="Herbs", price="0.333", unit="bunch", quantity_available=1)

        assert listing.price == Decimal("0.333")
        assert listing.to_db_payload()["price"] == 0.333

    def test_update_keeps_sub_cent_price(self):
        assert ListingUpdate(price="0.333").to_db_payload() == {"price": 0.333}

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            ListingCreate(name="Basil", category="Herbs", price="-1", unit="bunch", quantity_available=1)

    def test_update_only_sends_set_fields(self):
        assert ListingUpdate(quantity_available=0).to_db_payload() == {"quantity_available": 0}

    def test_update_can_clear_image(self):
        assert ListingUpdate(image_url=None).to_db_payload() == {"image_url": None}

    def test_update_skips_null_required_column(self):
        assert ListingUpdate(name=None).to_db_payload() == {}


# =============================================================================
# Filter criteria
# =============================================================================

class TestFilterCriteria:

    def test_defaults_are_empty(self):
        assert FilterCriteria().is_empty()

    def test_cleared(self):
        assert FilterCriteria.cleared() == FilterCriteria()

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError):
            FilterCriteria(category="Mushrooms")

    def test_non_empty(self):
        assert not FilterCriteria(location="spring").is_empty()


# =============================================================================
# Profile and context
# =============================================================================

class TestProfile:

    def test_null_name_becomes_blank(self):
        profile = Profile.from_db_row(profile_row(full_name=None))

        assert profile.full_name == ""
        assert profile.role == UserRole.FARMER

    def test_context_is_immutable(self, customer_ctx):
        assert customer_ctx.is_customer
        with pytest.raises(ValidationError):
            customer_ctx.role = UserRole.FARMER

    def test_unknown_role_rejected(self):
        with pytest.raises(ValidationError):
            UserContext(user_id=FARMER_ID, role="grower")


class TestContactIntent:

    def test_defaults(self):
        intent = ContactIntent(listing_id=TOMATO_ID)

        assert intent.requested_quantity == 1
        assert intent.message == ""

    def test_quantity_at_least_one(self):
        with pytest.raises(ValidationError):
            ContactIntent(listing_id=TOMATO_ID, requested_quantity=0)
