# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .catalog_service import CatalogService, require_farmer
from .contact_service import ContactFlow, ContactRouter
from .message_service import NoopMessenger, SupabaseMessenger, get_messenger
from .profile_service import ProfileService
from .review_service import ReviewService
from .storage_service import StorageService

__all__ = [
    "CatalogService",
    "require_farmer",
    "ContactFlow",
    "ContactRouter",
    "NoopMessenger",
    "SupabaseMessenger",
    "get_messenger",
    "ProfileService",
    "ReviewService",
    "StorageService",
]
