# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the FarmFresh Market API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.exceptions import (
    MarketplaceException,
    marketplace_exception_handler,
    supabase_exception_handler,
)
from app.routers import health, products, contact, profiles, farmers
from app.auth import routes as auth_routes
from lib.supabase_client import SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    The Supabase client is created lazily on first use, so startup only
    reports configuration.
    """
    logger.info(f"Starting FarmFresh Market API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(f"Platform message delivery: {settings.MESSAGE_DELIVERY}")

    yield

    logger.info("Shutting down FarmFresh Market API")


# Create FastAPI application
app = FastAPI(
    title="FarmFresh Market API",
    description="""
## Farmer-to-Customer Produce Marketplace

Browse fresh produce listed by local farmers and contact them directly.

### How It Works

1. **Browse** - Search the catalog by product, farmer, category or location
2. **Contact** - Call, email or message the farmer about a listing
3. **Sell** - Farmers list products, upload photos and set their availability

### Quick Start

```bash
# Search the catalog
curl "http://localhost:8000/api/v1/products?q=tom&location=spring"

# Draft an email for 3 units
curl -X POST http://localhost:8000/api/v1/products/{id}/contact/email \\
  -H "Content-Type: application/json" \\
  -d '{"quantity": "3", "message": "Can I pick up Saturday?"}'
```
""",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Verify Supabase access tokens",
        },
        {
            "name": "Products",
            "description": "Browse the catalog and manage your listings",
        },
        {
            "name": "Contact",
            "description": "Reach the farmer behind a listing",
        },
        {
            "name": "Profiles",
            "description": "Your profile and availability",
        },
        {
            "name": "Farmers",
            "description": "Public farmer pages and reviews",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(MarketplaceException)
async def handle_marketplace_exception(request: Request, exc: MarketplaceException):
    """Handle custom marketplace exceptions."""
    return await marketplace_exception_handler(request, exc)


@app.exception_handler(SupabaseClientError)
async def handle_supabase_error(request: Request, exc: SupabaseClientError):
    """Handle data-layer failures as upstream errors."""
    logger.error(f"Upstream failure on {request.url.path}: {exc}")
    return await supabase_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Contact routes are mounted first so /products/{id}/contact/* never
# competes with the listing routes
app.include_router(
    contact.router,
    prefix="/api/v1/products",
    tags=["Contact"]
)

app.include_router(
    products.router,
    prefix="/api/v1/products",
    tags=["Products"]
)

app.include_router(
    profiles.router,
    prefix="/api/v1/profiles",
    tags=["Profiles"]
)

app.include_router(
    farmers.router,
    prefix="/api/v1/farmers",
    tags=["Farmers"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "FarmFresh Market API",
        "version": __version__,
        "docs": "/docs",
        "health": "/api/v1/health",
    }
