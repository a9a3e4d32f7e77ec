# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - products.py: Catalog browsing and farmer listing management
# - contact.py: Contacting the farmer behind a listing
# - profiles.py: The caller's own profile and availability
# - farmers.py: Public farmer pages and reviews
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import products
from . import contact
from . import profiles
from . import farmers

__all__ = [
    "health",
    "products",
    "contact",
    "profiles",
    "farmers",
]
