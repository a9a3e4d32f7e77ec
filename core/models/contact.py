# =============================================================================
# core/models/contact.py - Contact Schemas
# =============================================================================
# Models for a customer contacting the farmer behind a listing:
# - ContactIntent: quantity and message being composed
# - DialAction / UnavailableAction: result of asking for a phone call
# - EmailDraft: subject and body ready for a mailto: link
# - ContactOutcome: result of sending a platform message
# - ContactFlowState: states of the contact flow
# - ContactRequest: raw quantity/message input from the client
# =============================================================================

from enum import Enum
from typing import Annotated, Literal, Union
from urllib.parse import quote
from uuid import UUID

from pydantic import BaseModel, Field, computed_field


class ContactFlowState(str, Enum):
    """
    States of the contact flow for one listing.

    Flow: closed -> open -> (call/email) -> dispatched -> ... -> closed
    A successful platform message or an explicit cancel closes the flow.
    """
    CLOSED = "closed"
    OPEN = "open"
    DISPATCHED = "dispatched"


class ContactIntent(BaseModel):
    """
    In-progress contact request. Never persisted.

    requested_quantity is already clamped to [1, quantity_available].
    """

    listing_id: UUID
    requested_quantity: int = Field(default=1, ge=1)
    message: str = ""


class DialAction(BaseModel):
    """Hand-off to the phone dialer."""

    kind: Literal["dial"] = "dial"
    phone: str = Field(..., description="Phone string as stored")
    tel_uri: str = Field(..., description="tel: URI for the dialer")


class UnavailableAction(BaseModel):
    """The seller has no phone on file; nothing is dialed."""

    kind: Literal["unavailable"] = "unavailable"
    reason: str = "Phone number not available"


PhoneAction = Annotated[Union[DialAction, UnavailableAction], Field(discriminator="kind")]


class EmailDraft(BaseModel):
    """
    An email ready to hand to the user's mail client.

    The recipient is left blank; sellers do not publish an address.
    """

    subject: str
    body: str

    @computed_field
    @property
    def mailto_uri(self) -> str:
        return (
            f"mailto:?subject={quote(self.subject, safe='')}"
            f"&body={quote(self.body, safe='')}"
        )


class ContactOutcome(BaseModel):
    """Result of a platform message, shown to the user as a notification."""

    success: bool
    notification: str
    message_id: str | None = None


class ContactRequest(BaseModel):
    """
    Raw contact input from a client.

    quantity is accepted as typed (string, number or nothing) and is
    normalized server-side: anything non-numeric becomes 1, then it is
    clamped to what the listing has available.
    """

    quantity: int | float | str | None = Field(
        default=None,
        examples=["3", 3, ""],
        description="Requested quantity as typed by the customer"
    )

    message: str | None = Field(
        default=None,
        max_length=2000,
        description="Optional free-text message to the farmer"
    )
