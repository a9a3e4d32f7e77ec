# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - catalog_filter.py: Pure filter engine over catalog listings
# - utils.py: Shared utilities (UUID normalization)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.catalog_filter import filter_listings, matches, unique_locations
from lib.utils import normalize_uuid

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Catalog filtering
    "filter_listings",
    "matches",
    "unique_locations",
    # Utils
    "normalize_uuid",
]
