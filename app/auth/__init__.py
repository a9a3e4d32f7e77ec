# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based authentication using Supabase Auth.
#
# Usage:
#   from app.auth import get_user_context
#
#   @router.get("/protected")
#   async def protected(ctx: UserContext = Depends(get_user_context)):
#       return {"user_id": ctx.user_id, "role": ctx.role}
# =============================================================================

from app.auth.dependencies import get_current_user, get_user_context
from app.auth.models import AuthUser

__all__ = [
    "get_current_user",
    "get_user_context",
    "AuthUser",
]
