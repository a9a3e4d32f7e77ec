# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Verifies Supabase access tokens and turns them into the caller context
# the marketplace services expect.
#
# Signing keys:
# - ES256/RS256 tokens are checked against the project's JWKS (cached)
# - HS256 tokens are checked against SUPABASE_JWT_SECRET
#
# Usage:
#   @router.post("/products")
#   async def create(payload: ListingCreate, ctx: UserContext = Depends(get_user_context)):
#       ...
# =============================================================================

import logging
import time
from uuid import UUID

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError
from pydantic import ValidationError

from app.config import settings
from app.auth.models import AuthUser, TokenPayload
from core.models.profile import UserContext
from core.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

security = HTTPBearer()

# Audience Supabase puts on signed-in user tokens
TOKEN_AUDIENCE = "authenticated"

JWKS_CACHE_TTL = 3600  # seconds

_jwks: dict = {}
_jwks_fetched_at: float = 0


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _load_jwks() -> dict:
    """
    The project's public signing keys, refreshed at most once per TTL.

    A failed refresh keeps serving the last good key set.
    """
    global _jwks, _jwks_fetched_at

    now = time.time()
    if _jwks and now - _jwks_fetched_at < JWKS_CACHE_TTL:
        return _jwks

    url = f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1/.well-known/jwks.json"
    try:
        response = httpx.get(url, timeout=10)
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning(f"Could not refresh JWKS from {url}: {e}")
        return _jwks or {"keys": []}

    _jwks = response.json()
    _jwks_fetched_at = now
    logger.debug(f"Loaded {len(_jwks.get('keys', []))} signing keys from {url}")
    return _jwks


def _verification_key(token: str) -> tuple[str | dict, str]:
    """
    Pick the key and algorithm a token must be verified with.

    Returns:
        (key, algorithm); the shared secret with HS256 whenever no
        matching public key is published
    """
    try:
        header = jwt.get_unverified_header(token)
    except JWTError:
        return settings.SUPABASE_JWT_SECRET, "HS256"

    algorithm = header.get("alg", "HS256")
    kid = header.get("kid")
    if algorithm == "HS256" or not kid:
        return settings.SUPABASE_JWT_SECRET, "HS256"

    for key in _load_jwks().get("keys", []):
        if key.get("kid") == kid:
            return key, algorithm

    logger.warning(f"No published key for kid={kid} (alg={algorithm}), trying the shared secret")
    return settings.SUPABASE_JWT_SECRET, "HS256"


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> AuthUser:
    """
    Verify the Bearer token and return who it belongs to.

    Raises:
        HTTPException: 401 if the token is expired, badly signed or has no
            usable subject
    """
    token = credentials.credentials
    key, algorithm = _verification_key(token)

    try:
        payload = jwt.decode(token, key, algorithms=[algorithm], audience=TOKEN_AUDIENCE)
        claims = TokenPayload(**payload)
    except ExpiredSignatureError:
        logger.warning("Rejected expired access token")
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.warning(f"Rejected access token: {e}")
        raise _unauthorized(f"Invalid token: {e}")
    except ValidationError:
        logger.warning("Access token has no subject claim")
        raise _unauthorized("Invalid token: missing user ID")

    try:
        user_id = UUID(claims.sub)
    except ValueError:
        logger.warning(f"Access token subject is not a UUID: {claims.sub}")
        raise _unauthorized("Invalid token: malformed user ID")

    logger.debug(f"Authenticated user {user_id}")
    return AuthUser(id=user_id, email=claims.email)


async def get_user_context(
    user: AuthUser = Depends(get_current_user)
) -> UserContext:
    """
    Build the explicit caller context (user id + marketplace role).

    Services receive this object instead of reading any ambient session
    state, so they can be tested in isolation.

    Raises:
        ProfileNotFoundError: 404 if the user has no profile yet
    """
    return ProfileService.build_context(user.id)
