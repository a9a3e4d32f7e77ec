# =============================================================================
# tests/test_contact.py - Contact Router Tests
# =============================================================================
# Covers quantity clamping, totals, the three contact channels and the
# contact flow state machine. The messenger is a stub; nothing here
# touches Supabase.
# =============================================================================

from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest

from app.exceptions import ContactFlowClosedError, MessageDeliveryError
from core.models.contact import ContactFlowState, ContactIntent, DialAction, UnavailableAction
from core.services.contact_service import (
    ContactFlow,
    ContactRouter,
    clamp_quantity,
    compute_total,
    format_money,
    parse_quantity,
)
from core.services.message_service import NoopMessenger, SupabaseMessenger, get_messenger
from lib.supabase_client import SupabaseClientError
from tests.conftest import TOMATO_ID, make_listing


@pytest.fixture
def messenger():
    stub = MagicMock()
    stub.deliver.return_value = "msg-1"
    return stub


@pytest.fixture
def router(messenger):
    return ContactRouter(messenger=messenger)


# =============================================================================
# Quantity
# =============================================================================

class TestClampQuantity:
    """Quantities are clamped to [1, quantity_available]."""

    @pytest.mark.parametrize("raw", [0, -3, "abc", "", None, "0", "-2"])
    def test_invalid_or_low_becomes_one(self, raw):
        assert clamp_quantity(raw, 5) == 1

    @pytest.mark.parametrize("raw", [9, "9", 5, 100.0])
    def test_above_stock_clamps_to_available(self, raw):
        assert clamp_quantity(raw, 5) == 5

    @pytest.mark.parametrize("raw, expected", [(3, 3), ("3", 3), (" 4 ", 4), ("2abc", 2), (2.9, 2)])
    def test_in_range_kept(self, raw, expected):
        assert clamp_quantity(raw, 5) == expected

    def test_nothing_available_still_one(self):
        assert clamp_quantity(3, 0) == 1

    def test_parse_ignores_non_finite(self):
        assert parse_quantity(float("nan")) == 1
        assert parse_quantity(float("inf")) == 1

    def test_bool_is_not_a_quantity(self):
        assert parse_quantity(True) == 1


class TestTotals:

    def test_total_uses_clamped_quantity(self):
        assert format_money(compute_total(3, Decimal("2.50"))) == "7.50"

    def test_half_up_rounding(self):
        total = compute_total(3, Decimal("0.335"))
        assert total == Decimal("1.005")
        assert format_money(total) == "1.01"

    def test_unit_price_kept_exact(self, router, cheap_listing):
        intent = ContactIntent(listing_id=cheap_listing.id, requested_quantity=3)
        draft = router.compose_email(cheap_listing, intent)

        assert format_money(compute_total(3, cheap_listing.price)) == "1.00"
        assert "$0.333 per lb" in draft.body
        assert "(total $1.00)" in draft.body


# =============================================================================
# Phone
# =============================================================================

class TestResolvePhoneAction:

    def test_dial_when_phone_present(self, router, tomato):
        action = router.resolve_phone_action(tomato)

        assert isinstance(action, DialAction)
        assert action.phone == "+1 555 0100"
        assert action.tel_uri == "tel:+1%20555%200100"

    @pytest.mark.parametrize("phone", ["", "   ", None])
    def test_unavailable_without_phone(self, router, phone):
        listing = make_listing(profiles={"full_name": "Green Acres Farm", "phone": phone})
        action = router.resolve_phone_action(listing)

        assert isinstance(action, UnavailableAction)
        assert action.reason == "Phone number not available"

    def test_unavailable_without_seller(self, router):
        assert isinstance(router.resolve_phone_action(make_listing(profiles=None)), UnavailableAction)


# =============================================================================
# Email
# =============================================================================

class TestComposeEmail:

    def test_subject_and_body(self, router, tomato):
        intent = ContactIntent(listing_id=tomato.id, requested_quantity=3, message="Pickup Saturday?")
        draft = router.compose_email(tomato, intent)

        assert draft.subject == "Inquiry about Tomatoes"
        assert draft.body.startswith("Hello Green Acres Farm,")
        assert "3 lb of your Tomatoes at $2.5 per lb (total $7.50)" in draft.body
        assert "Pickup Saturday?" in draft.body
        assert draft.body.endswith("Thank you!")

    def test_blank_message_omitted(self, router, tomato):
        with_blank = router.compose_email(tomato, ContactIntent(listing_id=tomato.id, message="   "))
        without = router.compose_email(tomato, ContactIntent(listing_id=tomato.id))

        assert with_blank.body == without.body

    def test_missing_seller_name(self, router):
        listing = make_listing(profiles={"full_name": ""})
        draft = router.compose_email(listing, ContactIntent(listing_id=listing.id))

        assert draft.body.startswith("Hello there,")

    def test_mailto_uri_is_fully_encoded(self, router, tomato):
        intent = ContactIntent(listing_id=tomato.id, requested_quantity=2, message="Line one\nLine two & more")
        uri = router.compose_email(tomato, intent).mailto_uri

        assert uri.startswith("mailto:?subject=Inquiry%20about%20Tomatoes&body=")
        assert "\n" not in uri
        assert " " not in uri
        assert uri.count("&") == 1
        assert "%0A%0A" in uri


# =============================================================================
# Platform message
# =============================================================================

class TestSendPlatformMessage:

    def test_success(self, router, messenger, tomato, customer_ctx):
        intent = ContactIntent(listing_id=tomato.id, message="Hi")
        outcome = router.send_platform_message(tomato, intent, customer_ctx)

        assert outcome.success is True
        assert outcome.notification == "Message sent to farmer!"
        assert outcome.message_id == "msg-1"
        messenger.deliver.assert_called_once_with(tomato, intent, customer_ctx)

    def test_failure_reported_not_raised(self, router, messenger, tomato, customer_ctx):
        messenger.deliver.side_effect = MessageDeliveryError("inbox is full")
        outcome = router.send_platform_message(
            tomato, ContactIntent(listing_id=tomato.id), customer_ctx
        )

        assert outcome.success is False
        assert "inbox is full" in outcome.notification
        assert outcome.message_id is None

    def test_unexpected_messenger_error_reported(self, router, messenger, tomato, customer_ctx):
        messenger.deliver.side_effect = ConnectionError("connection reset")
        outcome = router.send_platform_message(
            tomato, ContactIntent(listing_id=tomato.id), customer_ctx
        )

        assert outcome.success is False
        assert outcome.notification.startswith("Failed to deliver message")
        assert "connection reset" not in outcome.notification
        assert outcome.message_id is None

    def test_flow_stays_open_after_unexpected_error(self, router, messenger, tomato, customer_ctx):
        messenger.deliver.side_effect = RuntimeError("bug in messenger")
        flow = ContactFlow(router)
        flow.open(tomato)

        assert flow.send_message(customer_ctx).success is False
        assert flow.is_open


class TestMessengers:

    @patch("core.services.message_service.SupabaseClient")
    def test_supabase_messenger_inserts_row(self, mock_client, tomato, customer_ctx):
        mock_client.insert_message.return_value = {"id": 42}
        intent = ContactIntent(listing_id=tomato.id, requested_quantity=2, message="Hi")

        message_id = SupabaseMessenger().deliver(tomato, intent, customer_ctx)

        assert message_id == "42"
        data = mock_client.insert_message.call_args[0][0]
        assert data["sender_id"] == str(customer_ctx.user_id)
        assert data["farmer_id"] == str(tomato.farmer_id)
        assert data["product_id"] == str(TOMATO_ID)
        assert data["quantity"] == 2
        assert data["body"] == "Hi"

    @patch("core.services.message_service.SupabaseClient")
    def test_supabase_messenger_failure(self, mock_client, tomato, customer_ctx):
        mock_client.insert_message.side_effect = SupabaseClientError("insert failed")

        with pytest.raises(MessageDeliveryError):
            SupabaseMessenger().deliver(tomato, ContactIntent(listing_id=tomato.id), customer_ctx)

    def test_noop_messenger_accepts(self, tomato, customer_ctx):
        message_id = NoopMessenger().deliver(tomato, ContactIntent(listing_id=tomato.id), customer_ctx)
        assert message_id.startswith("noop-")

    @patch("core.services.message_service.settings")
    def test_selected_by_setting(self, mock_settings):
        mock_settings.MESSAGE_DELIVERY = "noop"
        assert isinstance(get_messenger(), NoopMessenger)

        mock_settings.MESSAGE_DELIVERY = "supabase"
        assert isinstance(get_messenger(), SupabaseMessenger)


# =============================================================================
# Contact flow
# =============================================================================

class TestContactFlow:

    def test_starts_closed(self, router):
        flow = ContactFlow(router)

        assert flow.state == ContactFlowState.CLOSED
        with pytest.raises(ContactFlowClosedError):
            flow.set_quantity(2)

    def test_open_initializes_intent(self, router, tomato):
        flow = ContactFlow(router)
        intent = flow.open(tomato)

        assert flow.state == ContactFlowState.OPEN
        assert intent.requested_quantity == 1
        assert intent.message == ""

    def test_edits_clamp_and_total(self, router, tomato):
        flow = ContactFlow(router)
        flow.open(tomato)

        assert flow.set_quantity("9") == 5
        assert flow.total == Decimal("12.5")
        assert flow.set_quantity(3) == 3
        flow.set_message("Hello")
        assert flow.intent.message == "Hello"

    def test_call_dispatches_and_stays_usable(self, router, tomato):
        flow = ContactFlow(router)
        flow.open(tomato)
        flow.call()

        assert flow.state == ContactFlowState.DISPATCHED
        assert flow.email().subject == "Inquiry about Tomatoes"

    def test_call_without_phone_keeps_open(self, router, apple):
        flow = ContactFlow(router)
        flow.open(apple)

        assert isinstance(flow.call(), UnavailableAction)
        assert flow.state == ContactFlowState.OPEN

    def test_message_success_closes(self, router, tomato, customer_ctx):
        flow = ContactFlow(router)
        flow.open(tomato)
        flow.send_message(customer_ctx)

        assert flow.state == ContactFlowState.CLOSED
        assert flow.intent is None

    def test_message_failure_keeps_intent(self, router, messenger, tomato, customer_ctx):
        messenger.deliver.side_effect = MessageDeliveryError("down")
        flow = ContactFlow(router)
        flow.open(tomato)
        flow.set_quantity(2)
        outcome = flow.send_message(customer_ctx)

        assert outcome.success is False
        assert flow.is_open
        assert flow.intent.requested_quantity == 2

    def test_cancel_discards(self, router, tomato):
        flow = ContactFlow(router)
        flow.open(tomato)
        flow.set_quantity(4)
        flow.cancel()

        assert flow.state == ContactFlowState.CLOSED
        assert flow.open(tomato).requested_quantity == 1
