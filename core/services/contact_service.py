# =============================================================================
# core/services/contact_service.py - Contact Router
# =============================================================================
# Decides how a customer reaches the farmer behind a listing and formats
# the payload for each channel:
# - phone: tel: hand-off, only when the seller has a phone on file
# - email: subject/body for a mailto: link
# - platform message: handed to the configured messenger
#
# ContactFlow wraps the router with the per-listing state machine
# (closed -> open -> dispatched -> closed).
# =============================================================================

import logging
import math
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Any
from urllib.parse import quote

from core.models.contact import (
    ContactFlowState,
    ContactIntent,
    ContactOutcome,
    DialAction,
    EmailDraft,
    UnavailableAction,
)
from core.models.listing import Listing
from core.models.profile import UserContext
from core.services.message_service import get_messenger
from app.exceptions import ContactFlowClosedError, MessageDeliveryError

logger = logging.getLogger(__name__)

# Leading integer, the way a browser number input is parsed
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

CENTS = Decimal("0.01")


# =============================================================================
# Quantity and Price Helpers
# =============================================================================

def parse_quantity(raw: Any) -> int:
    """
    Parse a quantity as typed by the customer.

    Non-numeric, empty and zero input all become 1.

    Example:
        parse_quantity("3") -> 3
        parse_quantity("12abc") -> 12
        parse_quantity("abc") -> 1
    """
    if isinstance(raw, bool) or raw is None:
        return 1
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, float):
        value = int(raw) if math.isfinite(raw) else 0
    else:
        match = _LEADING_INT.match(str(raw))
        value = int(match.group(1)) if match else 0
    return value or 1


def clamp_quantity(raw: Any, available: int) -> int:
    """
    Normalize a requested quantity to [1, available].

    When nothing is available the lower bound wins and the result is 1.
    """
    return max(1, min(parse_quantity(raw), available))


def compute_total(quantity: int, price: Decimal) -> Decimal:
    """Exact total; rounding only happens when it is displayed."""
    return Decimal(quantity) * price


def format_money(value: Decimal) -> str:
    """Render an amount with two fraction digits, rounding half up."""
    return str(value.quantize(CENTS, rounding=ROUND_HALF_UP))


# =============================================================================
# Contact Router
# =============================================================================

class ContactRouter:
    """
    Builds the contact action for each channel.

    The messenger is the external collaborator for platform messages;
    anything with deliver(listing, intent, sender) -> str works. A
    MessageDeliveryError carries the reason shown to the customer; any
    other error is logged and reported as a generic delivery failure.
    """

    def __init__(self, messenger=None):
        self.messenger = messenger if messenger is not None else get_messenger()

    def resolve_phone_action(self, listing: Listing) -> DialAction | UnavailableAction:
        """
        Dial the seller if a phone number is on file.

        Returns:
            DialAction carrying the raw phone string, or UnavailableAction
            when the seller has no (or a blank) phone number
        """
        phone = listing.seller.phone if listing.seller else None
        if not phone or not phone.strip():
            logger.debug(f"No phone on file for listing {listing.id}")
            return UnavailableAction()

        return DialAction(
            phone=phone,
            tel_uri=f"tel:{quote(phone.strip(), safe='+-().')}",
        )

    def compose_email(self, listing: Listing, intent: ContactIntent) -> EmailDraft:
        """
        Draft an inquiry email about a listing.

        The body greets the seller, states quantity, unit price and total,
        and appends the customer's message when there is one.
        """
        seller_name = listing.seller.full_name if listing.seller and listing.seller.full_name else "there"
        unit = listing.unit.value
        total = compute_total(intent.requested_quantity, listing.price)

        paragraphs = [
            f"Hello {seller_name},",
            (
                f"I'm interested in purchasing {intent.requested_quantity} {unit} "
                f"of your {listing.name} at ${listing.price} per {unit} "
                f"(total ${format_money(total)})."
            ),
        ]
        if intent.message.strip():
            paragraphs.append(intent.message)
        paragraphs.append("Thank you!")

        return EmailDraft(
            subject=f"Inquiry about {listing.name}",
            body="\n\n".join(paragraphs),
        )

    def send_platform_message(
        self,
        listing: Listing,
        intent: ContactIntent,
        sender: UserContext,
    ) -> ContactOutcome:
        """
        Hand the intent to the messenger and report what it says.

        Delivery failures are reported as an unsuccessful outcome; they
        are never raised to the caller.
        """
        try:
            message_id = self.messenger.deliver(listing, intent, sender)
        except MessageDeliveryError as e:
            return ContactOutcome(success=False, notification=e.message)
        except Exception as e:
            logger.exception(f"Messenger failed for listing {listing.id}: {e}")
            return ContactOutcome(
                success=False,
                notification=MessageDeliveryError("messenger unavailable").message,
            )

        return ContactOutcome(
            success=True,
            notification="Message sent to farmer!",
            message_id=message_id,
        )


# =============================================================================
# Contact Flow
# =============================================================================

class ContactFlow:
    """
    The contact dialog for one listing.

    Opening initializes the intent (quantity 1, empty message). Phone and
    email dispatch leave the flow usable; a delivered platform message or
    cancel() closes it and discards the intent.

    Example:
        flow = ContactFlow(ContactRouter())
        flow.open(listing)
        flow.set_quantity("3")
        draft = flow.email()
    """

    def __init__(self, router: ContactRouter):
        self.router = router
        self.state = ContactFlowState.CLOSED
        self.listing: Listing | None = None
        self.intent: ContactIntent | None = None

    @property
    def is_open(self) -> bool:
        return self.state != ContactFlowState.CLOSED

    def open(self, listing: Listing) -> ContactIntent:
        self.listing = listing
        self.intent = ContactIntent(listing_id=listing.id, requested_quantity=1, message="")
        self.state = ContactFlowState.OPEN
        return self.intent

    def _require_open(self) -> tuple[Listing, ContactIntent]:
        if not self.is_open or self.listing is None or self.intent is None:
            raise ContactFlowClosedError()
        return self.listing, self.intent

    def set_quantity(self, raw: Any) -> int:
        listing, intent = self._require_open()
        quantity = clamp_quantity(raw, listing.quantity_available)
        self.intent = intent.model_copy(update={"requested_quantity": quantity})
        return quantity

    def set_message(self, text: str | None) -> None:
        _, intent = self._require_open()
        self.intent = intent.model_copy(update={"message": text or ""})

    @property
    def total(self) -> Decimal:
        listing, intent = self._require_open()
        return compute_total(intent.requested_quantity, listing.price)

    def call(self) -> DialAction | UnavailableAction:
        listing, _ = self._require_open()
        action = self.router.resolve_phone_action(listing)
        if isinstance(action, DialAction):
            self.state = ContactFlowState.DISPATCHED
        return action

    def email(self) -> EmailDraft:
        listing, intent = self._require_open()
        draft = self.router.compose_email(listing, intent)
        self.state = ContactFlowState.DISPATCHED
        return draft

    def send_message(self, sender: UserContext) -> ContactOutcome:
        listing, intent = self._require_open()
        outcome = self.router.send_platform_message(listing, intent, sender)
        if outcome.success:
            self.cancel()
        return outcome

    def cancel(self) -> None:
        self.state = ContactFlowState.CLOSED
        self.listing = None
        self.intent = None
