# =============================================================================
# app/routers/contact.py - Contact Farmer Endpoints
# =============================================================================
# Each request replays the contact flow for one listing: open it, apply
# the customer's quantity and message, then run one action.
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Response
from pydantic import BaseModel, Field

from app.dependencies import ContactRouterDep, UserContextDep
from app.exceptions import PhoneUnavailableError
from core.models.contact import ContactIntent, ContactOutcome, ContactRequest, DialAction, EmailDraft
from core.services.catalog_service import CatalogService
from core.services.contact_service import ContactFlow, ContactRouter, format_money

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class QuoteResponse(BaseModel):
    """The normalized intent and its total, for the contact dialog."""
    intent: ContactIntent
    max_quantity: int = Field(..., example=40)
    unit: str = Field(..., example="lb")
    total: str = Field(..., example="7.50")


class EmailResponse(BaseModel):
    """Email draft plus the quote it was built from."""
    quote: QuoteResponse
    draft: EmailDraft


# =============================================================================
# Helpers
# =============================================================================

def _open_flow(
    contact_router: ContactRouter,
    listing_id: UUID,
    request: ContactRequest | None,
) -> ContactFlow:
    """Open a flow on an active listing and apply the request's edits."""
    listing = CatalogService.get_listing(listing_id)

    flow = ContactFlow(contact_router)
    flow.open(listing)
    if request is not None:
        flow.set_quantity(request.quantity)
        flow.set_message(request.message)
    return flow


def _quote(flow: ContactFlow) -> QuoteResponse:
    return QuoteResponse(
        intent=flow.intent,
        max_quantity=flow.listing.quantity_available,
        unit=flow.listing.unit.value,
        total=format_money(flow.total),
    )


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/{listing_id}/contact/quote", response_model=QuoteResponse)
async def quote_contact(
    listing_id: Annotated[UUID, Path(description="Listing UUID")],
    contact_router: ContactRouterDep,
    request: ContactRequest | None = None,
):
    """
    Normalize a requested quantity and price it.

    Non-numeric or empty quantities become 1; larger quantities are capped
    at what the farmer has available.
    """
    return _quote(_open_flow(contact_router, listing_id, request))


@router.post("/{listing_id}/contact/phone", response_model=DialAction)
async def call_farmer(
    listing_id: Annotated[UUID, Path(description="Listing UUID")],
    contact_router: ContactRouterDep,
):
    """
    Get the tel: link for the farmer behind a listing.

    Returns 409 PHONE_UNAVAILABLE when the farmer has no phone on file.
    """
    flow = _open_flow(contact_router, listing_id, None)
    action = flow.call()

    if not isinstance(action, DialAction):
        raise PhoneUnavailableError(str(listing_id), action.reason)
    return action


@router.post("/{listing_id}/contact/email", response_model=EmailResponse)
async def email_farmer(
    listing_id: Annotated[UUID, Path(description="Listing UUID")],
    contact_router: ContactRouterDep,
    request: ContactRequest | None = None,
):
    """
    Draft an inquiry email and its mailto: link.

    Subject and body are percent-encoded in the link.
    """
    flow = _open_flow(contact_router, listing_id, request)
    quote = _quote(flow)
    return EmailResponse(quote=quote, draft=flow.email())


@router.post("/{listing_id}/contact/message", response_model=ContactOutcome)
async def message_farmer(
    listing_id: Annotated[UUID, Path(description="Listing UUID")],
    contact_router: ContactRouterDep,
    ctx: UserContextDep,
    response: Response,
    request: ContactRequest | None = None,
):
    """
    Send an in-platform message to the farmer.

    On failure the outcome carries the notification to show and the
    status is 502; nothing is retried automatically.
    """
    flow = _open_flow(contact_router, listing_id, request)
    outcome = flow.send_message(ctx)

    if not outcome.success:
        logger.warning(f"Platform message for listing {listing_id} failed: {outcome.notification}")
        response.status_code = 502
    return outcome
