# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides specialized methods for:
# - Product listings (catalog reads joined with seller info, seller CRUD)
# - Profiles (farmer/customer records, availability flag)
# - Reviews left by customers for farmers
# - Platform messages sent from customers to farmers
#
# Every method returns plain dicts (rows as PostgREST returns them).
# Converting rows into models is the job of the service layer.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   rows = SupabaseClient.fetch_active_products(limit=200)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings
from lib.utils import normalize_uuid

# Set up logging for this module
logger = logging.getLogger(__name__)

# Columns pulled from the seller's profile when reading the catalog.
# The FK name matches the products.farmer_id -> profiles.user_id constraint.
SELLER_JOIN = "profiles!products_farmer_id_fkey (full_name, location, phone, is_available)"
PRODUCT_WITH_SELLER = f"*, {SELLER_JOIN}"

# PostgREST code returned by .single() when no row matches
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Carries a machine-readable code and an actionable suggestion so the
    API layer can turn it into a useful response.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        rows = SupabaseClient.fetch_active_products(limit=100)
        profile = SupabaseClient.fetch_profile_by_user(user_id)
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS), so
        every write below scopes itself to the caller explicitly.

        Returns:
            Client: Supabase client instance

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    # -------------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_active_products(cls, limit: int = 500) -> list[dict[str, Any]]:
        """
        Fetch active product listings joined with seller info.

        Rows come back newest first; the filter engine relies on this
        ordering and never re-sorts.

        Args:
            limit: Maximum number of rows to return

        Returns:
            List of product dicts, each with a nested "profiles" dict
            holding full_name, location, phone and is_available.

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table("products")
                .select(PRODUCT_WITH_SELLER)
                .eq("is_active", True)
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )

            rows = response.data or []
            logger.debug(f"Fetched {len(rows)} active products")
            return rows

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch products: {e}",
                code="FETCH_PRODUCTS_FAILED",
                suggestion="Check that the products table and its profiles foreign key exist",
                details={"limit": limit}
            )

    @classmethod
    def fetch_product(cls, product_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a single product (active or not) with seller info.

        Args:
            product_id: The product UUID

        Returns:
            Product dict, or None if not found

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        product_id_str = normalize_uuid(product_id)

        try:
            response = (
                client.table("products")
                .select(PRODUCT_WITH_SELLER)
                .eq("id", product_id_str)
                .single()
                .execute()
            )

            return response.data

        except Exception as e:
            if NO_ROWS_CODE in str(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch product: {e}",
                code="FETCH_PRODUCT_FAILED",
                suggestion="Check that the product_id exists",
                details={"product_id": product_id_str}
            )

    @classmethod
    def fetch_products_by_farmer(
        cls,
        farmer_id: str | UUID,
        active_only: bool = True,
    ) -> list[dict[str, Any]]:
        """
        Fetch one farmer's products, newest first.

        Args:
            farmer_id: The farmer's auth user id (products.farmer_id)
            active_only: Skip listings the farmer has deactivated

        Returns:
            List of product dicts with seller info

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        farmer_id_str = normalize_uuid(farmer_id)

        try:
            query = (
                client.table("products")
                .select(PRODUCT_WITH_SELLER)
                .eq("farmer_id", farmer_id_str)
            )
            if active_only:
                query = query.eq("is_active", True)

            response = query.order("created_at", desc=True).execute()
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch farmer products: {e}",
                code="FETCH_FARMER_PRODUCTS_FAILED",
                details={"farmer_id": farmer_id_str, "active_only": active_only}
            )

    @classmethod
    def insert_product(cls, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a new product row.

        Args:
            data: Column values, must include farmer_id

        Returns:
            Inserted product dict with generated id and created_at

        Raises:
            SupabaseClientError: If insert fails
        """
        client = cls.get_client()

        try:
            response = client.table("products").insert(data).execute()

            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA"
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert product: {e}",
                code="INSERT_PRODUCT_FAILED",
                suggestion="Check the product fields against the products table constraints",
                details={"farmer_id": data.get("farmer_id")}
            )

    @classmethod
    def update_product(
        cls,
        product_id: str | UUID,
        farmer_id: str | UUID,
        data: dict[str, Any],
    ) -> dict[str, Any] | None:
        """
        Update a product owned by farmer_id.

        Returns:
            Updated product dict, or None if no row matched
            (wrong id or not owned by this farmer)

        Raises:
            SupabaseClientError: If update fails
        """
        client = cls.get_client()
        product_id_str = normalize_uuid(product_id)
        farmer_id_str = normalize_uuid(farmer_id)

        try:
            response = (
                client.table("products")
                .update(data)
                .eq("id", product_id_str)
                .eq("farmer_id", farmer_id_str)
                .execute()
            )

            return response.data[0] if response.data else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update product: {e}",
                code="UPDATE_PRODUCT_FAILED",
                details={"product_id": product_id_str, "farmer_id": farmer_id_str}
            )

    @classmethod
    def delete_product(cls, product_id: str | UUID, farmer_id: str | UUID) -> bool:
        """
        Delete a product owned by farmer_id.

        Returns:
            True if a row was deleted

        Raises:
            SupabaseClientError: If delete fails
        """
        client = cls.get_client()
        product_id_str = normalize_uuid(product_id)
        farmer_id_str = normalize_uuid(farmer_id)

        try:
            response = (
                client.table("products")
                .delete()
                .eq("id", product_id_str)
                .eq("farmer_id", farmer_id_str)
                .execute()
            )

            return bool(response.data)

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete product: {e}",
                code="DELETE_PRODUCT_FAILED",
                details={"product_id": product_id_str, "farmer_id": farmer_id_str}
            )

    # -------------------------------------------------------------------------
    # Profiles
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_profile(cls, profile_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a profile by its own id.

        Returns:
            Profile dict, or None if not found

        Raises:
            SupabaseClientError: If query fails
        """
        return cls._fetch_profile_by("id", profile_id)

    @classmethod
    def fetch_profile_by_user(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch the profile belonging to an auth user.

        Returns:
            Profile dict, or None if the user has no profile yet

        Raises:
            SupabaseClientError: If query fails
        """
        return cls._fetch_profile_by("user_id", user_id)

    @classmethod
    def _fetch_profile_by(cls, column: str, value: str | UUID) -> dict[str, Any] | None:
        client = cls.get_client()
        value_str = normalize_uuid(value)

        try:
            response = (
                client.table("profiles")
                .select("*")
                .eq(column, value_str)
                .single()
                .execute()
            )

            return response.data

        except Exception as e:
            if NO_ROWS_CODE in str(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch profile: {e}",
                code="FETCH_PROFILE_FAILED",
                details={column: value_str}
            )

    @classmethod
    def update_profile(cls, user_id: str | UUID, data: dict[str, Any]) -> dict[str, Any] | None:
        """
        Update the profile belonging to an auth user.

        Returns:
            Updated profile dict, or None if the user has no profile

        Raises:
            SupabaseClientError: If update fails
        """
        client = cls.get_client()
        user_id_str = normalize_uuid(user_id)

        try:
            response = (
                client.table("profiles")
                .update(data)
                .eq("user_id", user_id_str)
                .execute()
            )

            return response.data[0] if response.data else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update profile: {e}",
                code="UPDATE_PROFILE_FAILED",
                details={"user_id": user_id_str, "fields": sorted(data)}
            )

    # -------------------------------------------------------------------------
    # Reviews
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_reviews(cls, farmer_id: str | UUID, limit: int = 50) -> list[dict[str, Any]]:
        """
        Fetch reviews for a farmer, newest first.

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        farmer_id_str = normalize_uuid(farmer_id)

        try:
            response = (
                client.table("reviews")
                .select("*")
                .eq("farmer_id", farmer_id_str)
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )

            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch reviews: {e}",
                code="FETCH_REVIEWS_FAILED",
                details={"farmer_id": farmer_id_str}
            )

    @classmethod
    def insert_review(cls, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a review row.

        Raises:
            SupabaseClientError: If insert fails
        """
        client = cls.get_client()

        try:
            response = client.table("reviews").insert(data).execute()

            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA"
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert review: {e}",
                code="INSERT_REVIEW_FAILED",
                details={"farmer_id": data.get("farmer_id")}
            )

    # -------------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------------

    @classmethod
    def insert_message(cls, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a platform message from a customer to a farmer.

        Args:
            data: sender_id, farmer_id, product_id, quantity, body

        Returns:
            Inserted message dict with generated id

        Raises:
            SupabaseClientError: If insert fails
        """
        client = cls.get_client()

        try:
            response = client.table("messages").insert(data).execute()

            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA"
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert message: {e}",
                code="INSERT_MESSAGE_FAILED",
                suggestion="Check that the messages table exists and accepts the sender",
                details={"product_id": data.get("product_id")}
            )
