# =============================================================================
# core/services/message_service.py - Platform Messaging
# =============================================================================
# Delivers in-platform messages from customers to farmers.
#
# Two messengers exist, selected by settings.MESSAGE_DELIVERY:
# - SupabaseMessenger: inserts into the messages table and reports the
#   insert's success or failure
# - NoopMessenger: accepts every message without delivering it
#
# Both expose deliver(listing, intent, sender) -> message id and raise
# MessageDeliveryError on failure.
# =============================================================================

import logging
import uuid

from lib.supabase_client import SupabaseClient, SupabaseClientError
from core.models.contact import ContactIntent
from core.models.listing import Listing
from core.models.profile import UserContext
from app.config import settings
from app.exceptions import MessageDeliveryError

logger = logging.getLogger(__name__)


class SupabaseMessenger:
    """Stores each message as a row the farmer reads from their inbox."""

    def deliver(
        self,
        listing: Listing,
        intent: ContactIntent,
        sender: UserContext,
    ) -> str:
        """
        Deliver a message about a listing to its farmer.

        Returns:
            The stored message id

        Raises:
            MessageDeliveryError: If the insert fails
        """
        data = {
            "sender_id": str(sender.user_id),
            "farmer_id": str(listing.farmer_id),
            "product_id": str(intent.listing_id),
            "quantity": intent.requested_quantity,
            "body": intent.message,
        }

        try:
            row = SupabaseClient.insert_message(data)
        except SupabaseClientError as e:
            logger.error(f"Message delivery failed for listing {intent.listing_id}: {e}")
            raise MessageDeliveryError(e.message)

        message_id = str(row.get("id", ""))
        logger.info(f"Delivered message {message_id} to farmer {listing.farmer_id}")
        return message_id


class NoopMessenger:
    """Accepts every message and delivers nothing."""

    def deliver(
        self,
        listing: Listing,
        intent: ContactIntent,
        sender: UserContext,
    ) -> str:
        message_id = f"noop-{uuid.uuid4()}"
        logger.debug(f"Dropped message {message_id} for listing {intent.listing_id}")
        return message_id


def get_messenger() -> SupabaseMessenger | NoopMessenger:
    """Return the messenger configured by MESSAGE_DELIVERY."""
    if settings.MESSAGE_DELIVERY == "noop":
        return NoopMessenger()
    return SupabaseMessenger()
