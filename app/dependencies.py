# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated

from fastapi import Depends

from core.models.profile import UserContext
from core.services.contact_service import ContactRouter
from app.auth import get_user_context


def get_contact_router() -> ContactRouter:
    """
    Get a contact router wired to the configured messenger.

    Tests override this to swap in a fake messenger.
    """
    return ContactRouter()


# Type aliases for dependency injection
ContactRouterDep = Annotated[ContactRouter, Depends(get_contact_router)]
UserContextDep = Annotated[UserContext, Depends(get_user_context)]
