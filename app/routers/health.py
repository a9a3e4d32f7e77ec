# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Liveness for the process, readiness for its Supabase dependencies.
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter, Response
from pydantic import BaseModel

from app import __version__
from app.config import settings
from lib.supabase_client import SupabaseClient

router = APIRouter()


class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    environment: str
    version: str


class ChecksResponse(BaseModel):
    """Result of each dependency probe."""
    catalog: str
    image_storage: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    checks: ChecksResponse
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic health status for load balancers and monitoring."""
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=__version__,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(response: Response):
    """
    Whether the catalog can be served.

    Probes the products table and the product image bucket. Returns 503
    while either is unreachable.
    """
    checks = ChecksResponse(catalog="unknown", image_storage="unknown")

    try:
        client = SupabaseClient.get_client()
        client.table("products").select("id").limit(1).execute()
        checks.catalog = "healthy"
    except Exception as e:
        checks.catalog = f"unhealthy: {str(e)[:50]}"

    try:
        client = SupabaseClient.get_client()
        client.storage.get_bucket(settings.PRODUCT_IMAGE_BUCKET)
        checks.image_storage = "healthy"
    except Exception as e:
        checks.image_storage = f"unhealthy: {str(e)[:50]}"

    ready = checks.catalog == "healthy" and checks.image_storage == "healthy"
    if not ready:
        response.status_code = 503

    return ReadinessResponse(
        status="ready" if ready else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live")
async def liveness_check() -> dict:
    """Whether the process is alive."""
    return {"status": "alive", "timestamp": _now()}
