# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides listing/profile rows shaped like PostgREST responses
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-length")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from decimal import Decimal
from uuid import UUID

import pytest

from core.models.listing import Listing
from core.models.profile import UserContext, UserRole


# =============================================================================
# Stable IDs
# =============================================================================

FARMER_ID = UUID("11111111-1111-4111-8111-111111111111")
OTHER_FARMER_ID = UUID("22222222-2222-4222-8222-222222222222")
CUSTOMER_ID = UUID("33333333-3333-4333-8333-333333333333")
TOMATO_ID = UUID("aaaaaaaa-aaaa-4aaa-8aaa-aaaaaaaaaaaa")
APPLE_ID = UUID("bbbbbbbb-bbbb-4bbb-8bbb-bbbbbbbbbbbb")
FARMER_PROFILE_ID = UUID("44444444-4444-4444-8444-444444444444")


def product_row(**overrides) -> dict:
    """A products row with the seller join, as the catalog query returns it."""
    row = {
        "id": str(TOMATO_ID),
        "farmer_id": str(FARMER_ID),
        "name": "Tomatoes",
        "description": "Vine-ripened heirloom tomatoes",
        "category": "Vegetables",
        "price": 2.5,
        "unit": "lb",
        "quantity_available": 5,
        "image_url": None,
        "is_active": True,
        "created_at": "2024-06-02T10:00:00+00:00",
        "updated_at": "2024-06-02T10:00:00+00:00",
        "profiles": {
            "full_name": "Green Acres Farm",
            "location": "Springfield",
            "phone": "+1 555 0100",
            "is_available": True,
        },
    }
    row.update(overrides)
    return row


def make_listing(**overrides) -> Listing:
    """Build a Listing; seller fields can be overridden via `profiles`."""
    return Listing.from_db_row(product_row(**overrides))


def profile_row(**overrides) -> dict:
    row = {
        "id": str(FARMER_PROFILE_ID),
        "user_id": str(FARMER_ID),
        "role": "farmer",
        "full_name": "Green Acres Farm",
        "avatar_url": None,
        "phone": "+1 555 0100",
        "location": "Springfield",
        "bio": "Family farm since 1952",
        "is_available": True,
        "created_at": "2024-01-01T00:00:00+00:00",
        "updated_at": "2024-01-01T00:00:00+00:00",
    }
    row.update(overrides)
    return row


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def tomato() -> Listing:
    return make_listing()


@pytest.fixture
def apple() -> Listing:
    return make_listing(
        id=str(APPLE_ID),
        farmer_id=str(OTHER_FARMER_ID),
        name="Apples",
        description="Crisp Honeycrisp apples",
        category="Fruits",
        price=1.25,
        created_at="2024-06-01T10:00:00+00:00",
        profiles={
            "full_name": "Orchard Hill",
            "location": "Shelbyville",
            "phone": "",
            "is_available": False,
        },
    )


@pytest.fixture
def catalog(tomato, apple) -> list[Listing]:
    """Newest first, as the catalog store returns it."""
    return [tomato, apple]


@pytest.fixture
def farmer_ctx() -> UserContext:
    return UserContext(
        user_id=FARMER_ID,
        role=UserRole.FARMER,
        profile_id=FARMER_PROFILE_ID,
        full_name="Green Acres Farm",
    )


@pytest.fixture
def customer_ctx() -> UserContext:
    return UserContext(user_id=CUSTOMER_ID, role=UserRole.CUSTOMER, full_name="Pat Buyer")


@pytest.fixture
def cheap_listing() -> Listing:
    """Price with more precision than cents."""
    return make_listing(price=Decimal("0.333"))
