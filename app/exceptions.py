# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error tells the client HOW to fix it, not just WHAT failed.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from lib.supabase_client import SupabaseClientError


class MarketplaceException(Exception):
    """
    Base exception for the marketplace API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "MARKETPLACE_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Listing Exceptions
# =============================================================================

class ListingNotFoundError(MarketplaceException):
    """Raised when a listing ID doesn't exist or is not visible to the caller."""

    def __init__(self, listing_id: str):
        super().__init__(
            message=f"Listing not found: {listing_id}",
            code="LISTING_NOT_FOUND",
            status_code=404,
            suggestion="The listing may have been removed or deactivated; refresh the catalog",
            details={"listing_id": listing_id}
        )


class NotListingOwnerError(MarketplaceException):
    """Raised when a seller tries to change another seller's listing."""

    def __init__(self, listing_id: str):
        super().__init__(
            message=f"You do not own listing: {listing_id}",
            code="NOT_LISTING_OWNER",
            status_code=403,
            suggestion="Only the farmer who created a listing can edit or delete it",
            details={"listing_id": listing_id}
        )


# =============================================================================
# Profile Exceptions
# =============================================================================

class ProfileNotFoundError(MarketplaceException):
    """Raised when a profile doesn't exist."""

    def __init__(self, identifier: str):
        super().__init__(
            message=f"Profile not found: {identifier}",
            code="PROFILE_NOT_FOUND",
            status_code=404,
            suggestion="Complete sign-up so a profile is created for this account",
            details={"profile": identifier}
        )


class RoleRequiredError(MarketplaceException):
    """Raised when the caller's role does not allow the operation."""

    def __init__(self, required: str, actual: str):
        super().__init__(
            message=f"This action requires the '{required}' role",
            code="ROLE_REQUIRED",
            status_code=403,
            suggestion=f"Sign in with a {required} account",
            details={"required_role": required, "role": actual}
        )


class NotAFarmerError(MarketplaceException):
    """Raised when a review targets a profile that is not another user's farm."""

    def __init__(self, profile_id: str, reason: str):
        super().__init__(
            message=f"Profile {profile_id} cannot be reviewed: {reason}",
            code="NOT_A_FARMER",
            status_code=400,
            suggestion="Reviews can only be left for other users' farmer profiles",
            details={"profile_id": profile_id, "reason": reason}
        )


# =============================================================================
# Contact Exceptions
# =============================================================================

class PhoneUnavailableError(MarketplaceException):
    """Raised when a phone call is requested for a seller with no phone on file."""

    def __init__(self, listing_id: str, reason: str):
        super().__init__(
            message=reason,
            code="PHONE_UNAVAILABLE",
            status_code=409,
            suggestion="Contact the farmer by email or platform message instead",
            details={"listing_id": listing_id}
        )


class MessageDeliveryError(MarketplaceException):
    """Raised by a messenger when a platform message could not be delivered."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to deliver message: {error}",
            code="MESSAGE_DELIVERY_FAILED",
            status_code=502,
            suggestion="Try sending the message again",
            details={"error": error}
        )


class ContactFlowClosedError(MarketplaceException):
    """Raised when a contact action is attempted on a closed contact flow."""

    def __init__(self):
        super().__init__(
            message="The contact flow is closed",
            code="CONTACT_FLOW_CLOSED",
            status_code=409,
            suggestion="Open the contact flow on a listing first",
        )


# =============================================================================
# Image Upload Exceptions
# =============================================================================

class InvalidImageError(MarketplaceException):
    """Raised when an uploaded image type is not allowed."""

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            message=f"Invalid image type: {filename}",
            code="INVALID_IMAGE_TYPE",
            status_code=400,
            suggestion=f"Only these image types are supported: {', '.join(allowed)}",
            details={"filename": filename, "allowed_types": allowed}
        )


class ImageTooLargeError(MarketplaceException):
    """Raised when an uploaded image exceeds the size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"Image too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="IMAGE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload an image smaller than {max_mb}MB",
            details={"size_mb": size_mb, "max_mb": max_mb}
        )


class StorageUploadError(MarketplaceException):
    """Raised when file upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to upload image to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def marketplace_exception_handler(
    request: Request,
    exc: MarketplaceException
) -> JSONResponse:
    """
    Convert MarketplaceException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def supabase_exception_handler(
    request: Request,
    exc: SupabaseClientError
) -> JSONResponse:
    """
    Convert data-layer failures to a 502 upstream error.

    The request fails, nothing is retried, and client state stays as it was
    so the user can try again.
    """
    content: dict[str, Any] = {
        "detail": "The marketplace database is unavailable right now",
        "code": exc.code,
    }
    if exc.suggestion:
        content["suggestion"] = exc.suggestion
    return JSONResponse(status_code=502, content=content)
