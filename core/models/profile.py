# =============================================================================
# core/models/profile.py - User Profile Schemas
# =============================================================================
# A profile is the marketplace identity attached to a Supabase auth user:
# - UserRole: farmer, customer or admin
# - Profile: the profiles row
# - ProfileUpdate / AvailabilityUpdate: self-service edits
# - UserContext: the caller identity passed explicitly into services
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class UserRole(str, Enum):
    """
    Marketplace roles.

    - farmer: lists products and receives contact requests
    - customer: browses, contacts farmers and leaves reviews
    - admin: operator account
    """
    FARMER = "farmer"
    CUSTOMER = "customer"
    ADMIN = "admin"


class Profile(BaseModel):
    """
    A profiles row.

    Example:
        {
            "id": "770e8400-e29b-41d4-a716-446655440002",
            "user_id": "660e8400-e29b-41d4-a716-446655440001",
            "role": "farmer",
            "full_name": "Green Acres Farm",
            "location": "Springfield",
            "phone": "+1 555 0100",
            "is_available": true
        }
    """

    id: UUID
    user_id: UUID
    role: UserRole
    full_name: str = ""
    avatar_url: str | None = None
    phone: str | None = None
    location: str | None = None
    bio: str | None = None
    is_available: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "Profile":
        data = dict(row)
        if data.get("full_name") is None:
            data["full_name"] = ""
        return cls(**data)


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile."""

    full_name: str | None = Field(default=None, min_length=1, max_length=200)
    avatar_url: str | None = None
    phone: str | None = Field(default=None, max_length=40)
    location: str | None = Field(default=None, max_length=200)
    bio: str | None = Field(default=None, max_length=2000)

    def to_db_payload(self) -> dict[str, Any]:
        payload = self.model_dump(exclude_unset=True)
        # full_name is NOT NULL
        if payload.get("full_name", "") is None:
            payload.pop("full_name")
        return payload


class AvailabilityUpdate(BaseModel):
    """
    Availability change. Leave `is_available` out to toggle the
    current value.
    """

    is_available: bool | None = None


class UserContext(BaseModel):
    """
    The caller of a service operation.

    Built once per request from the verified token and the caller's
    profile, then passed into services explicitly.
    """

    user_id: UUID
    role: UserRole
    profile_id: UUID | None = None
    full_name: str = ""

    model_config = {"frozen": True}

    @property
    def is_farmer(self) -> bool:
        return self.role == UserRole.FARMER

    @property
    def is_customer(self) -> bool:
        return self.role == UserRole.CUSTOMER
