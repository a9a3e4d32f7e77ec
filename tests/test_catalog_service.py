# =============================================================================
# tests/test_catalog_service.py - Catalog Store Tests
# =============================================================================
# SupabaseClient is patched where the service imports it, so these tests
# exercise the ownership and role rules without a database.
# =============================================================================

from decimal import Decimal
from unittest.mock import patch

import pytest

from app.exceptions import ListingNotFoundError, NotListingOwnerError, RoleRequiredError
from core.models.listing import Category, FilterCriteria, ListingCreate, ListingUpdate
from core.services.catalog_service import CatalogService
from tests.conftest import APPLE_ID, FARMER_ID, OTHER_FARMER_ID, TOMATO_ID, product_row

CLIENT = "core.services.catalog_service.SupabaseClient"


def _apple_row():
    return product_row(
        id=str(APPLE_ID),
        farmer_id=str(OTHER_FARMER_ID),
        name="Apples",
        description="Crisp Honeycrisp apples",
        category="Fruits",
        profiles={"full_name": "Orchard Hill", "location": "Shelbyville", "phone": ""},
    )


class TestBrowse:

    @patch(CLIENT)
    def test_counts_and_summary(self, mock_client):
        mock_client.fetch_active_products.return_value = [product_row(), _apple_row()]

        view = CatalogService.browse(FilterCriteria(category=Category.FRUITS))

        assert [listing.name for listing in view.listings] == ["Apples"]
        assert view.shown == 1
        assert view.total == 2
        assert view.summary == "Showing 1 of 2 products"

    @patch(CLIENT)
    def test_unknown_stored_values_fall_back(self, mock_client):
        mock_client.fetch_active_products.return_value = [product_row(category="Mushrooms", unit="crate")]

        listing = CatalogService.fetch_catalog()[0]

        assert listing.category == Category.OTHER
        assert listing.unit.value == "piece"

    @patch(CLIENT)
    def test_locations(self, mock_client):
        mock_client.fetch_active_products.return_value = [product_row(), _apple_row(), product_row()]

        assert CatalogService.list_locations() == ["Springfield", "Shelbyville"]


class TestGetListing:

    @patch(CLIENT)
    def test_missing(self, mock_client):
        mock_client.fetch_product.return_value = None

        with pytest.raises(ListingNotFoundError):
            CatalogService.get_listing(TOMATO_ID)

    @patch(CLIENT)
    def test_inactive_hidden_by_default(self, mock_client):
        mock_client.fetch_product.return_value = product_row(is_active=False)

        with pytest.raises(ListingNotFoundError):
            CatalogService.get_listing(TOMATO_ID)
        assert CatalogService.get_listing(TOMATO_ID, include_inactive=True).is_active is False


class TestWrites:

    @patch(CLIENT)
    def test_create_sets_owner_from_context(self, mock_client, farmer_ctx):
        mock_client.insert_product.return_value = product_row(profiles=None)
        payload = ListingCreate(
            name="Tomatoes",
            category="Vegetables",
            price=Decimal("2.50"),
            unit="lb",
            quantity_available=5,
        )

        listing = CatalogService.create_listing(farmer_ctx, payload)

        data = mock_client.insert_product.call_args[0][0]
        assert data["farmer_id"] == str(FARMER_ID)
        assert data["price"] == 2.5
        assert data["category"] == "Vegetables"
        assert listing.farmer_id == FARMER_ID

    @patch(CLIENT)
    def test_customer_cannot_create(self, mock_client, customer_ctx):
        payload = ListingCreate(name="Eggs", category="Dairy", price=3, unit="dozen", quantity_available=2)

        with pytest.raises(RoleRequiredError):
            CatalogService.create_listing(customer_ctx, payload)
        mock_client.insert_product.assert_not_called()

    @patch(CLIENT)
    def test_update_keeps_seller(self, mock_client, farmer_ctx):
        mock_client.fetch_product.return_value = product_row()
        mock_client.update_product.return_value = product_row(price=3.0, profiles=None)

        listing = CatalogService.update_listing(farmer_ctx, TOMATO_ID, ListingUpdate(price=Decimal("3.00")))

        assert listing.price == Decimal("3.0")
        assert listing.seller.full_name == "Green Acres Farm"
        data = mock_client.update_product.call_args[0][2]
        assert data["price"] == 3.0
        assert "updated_at" in data

    @patch(CLIENT)
    def test_empty_update_writes_nothing(self, mock_client, farmer_ctx):
        mock_client.fetch_product.return_value = product_row()

        listing = CatalogService.update_listing(farmer_ctx, TOMATO_ID, ListingUpdate())

        assert listing.name == "Tomatoes"
        mock_client.update_product.assert_not_called()

    @patch(CLIENT)
    def test_update_by_another_seller(self, mock_client, farmer_ctx):
        mock_client.fetch_product.return_value = _apple_row()

        with pytest.raises(NotListingOwnerError):
            CatalogService.update_listing(farmer_ctx, APPLE_ID, ListingUpdate(name="Mine now"))
        mock_client.update_product.assert_not_called()

    @patch(CLIENT)
    def test_delete_by_another_seller(self, mock_client, farmer_ctx):
        mock_client.fetch_product.return_value = _apple_row()

        with pytest.raises(NotListingOwnerError) as exc_info:
            CatalogService.delete_listing(farmer_ctx, APPLE_ID)

        assert exc_info.value.status_code == 403
        mock_client.delete_product.assert_not_called()

    @patch(CLIENT)
    def test_delete_own(self, mock_client, farmer_ctx):
        mock_client.fetch_product.return_value = product_row()
        mock_client.delete_product.return_value = True

        CatalogService.delete_listing(farmer_ctx, TOMATO_ID)

        mock_client.delete_product.assert_called_once_with(TOMATO_ID, FARMER_ID)

    @patch(CLIENT)
    def test_delete_race_reports_not_found(self, mock_client, farmer_ctx):
        mock_client.fetch_product.return_value = product_row()
        mock_client.delete_product.return_value = False

        with pytest.raises(ListingNotFoundError):
            CatalogService.delete_listing(farmer_ctx, TOMATO_ID)

    @patch(CLIENT)
    def test_own_listings_include_inactive(self, mock_client, farmer_ctx):
        mock_client.fetch_products_by_farmer.return_value = [product_row(is_active=False)]

        listings = CatalogService.list_own_listings(farmer_ctx)

        assert len(listings) == 1
        mock_client.fetch_products_by_farmer.assert_called_once_with(FARMER_ID, active_only=False)
