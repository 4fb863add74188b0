"""Tests for EmailOrderNotifier using Django's locmem mail backend."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from django.core import mail
from freezegun import freeze_time

from modules.notifications.exceptions import NotificationError
from modules.notifications.notifier import EmailOrderNotifier
from modules.orders.models import Order, OrderItem

pytestmark = pytest.mark.unit


@pytest.fixture()
def order_with_items(tomatoes, carrots):
    with freeze_time("2026-03-14 10:30:00"):
        order = Order.objects.create(
            customer_name="Jane",
            customer_email="jane@example.com",
            customer_phone="555-0100",
            total_amount=Decimal("11.10"),
            total_items=Decimal("5"),
            notes="Leave at the back door",
        )
    items = [
        OrderItem.objects.create(
            order=order,
            product=product,
            product_name=product.name,
            unit=product.unit,
            price=product.price,
            quantity=quantity,
        )
        for product, quantity in ((tomatoes, Decimal("3")), (carrots, Decimal("2")))
    ]
    return order, items


class TestEmailOrderNotifier:
    def test_sends_to_configured_recipients(self, order_with_items):
        order, items = order_with_items

        EmailOrderNotifier().send_order_notification(order, items)

        assert len(mail.outbox) == 1
        message = mail.outbox[0]
        assert message.to == ["orders@example.com"]
        assert message.reply_to == ["jane@example.com"]
        assert message.subject == f"Order #{order.id} - 2026-03-14"

    def test_body_lists_customer_and_items(self, order_with_items):
        order, items = order_with_items

        EmailOrderNotifier().send_order_notification(order, items)

        body = mail.outbox[0].body
        assert "Jane" in body
        assert "Tomatoes: 3kg" in body
        assert "Carrots: 2kg" in body
        assert "Leave at the back door" in body

        html, mimetype = mail.outbox[0].alternatives[0]
        assert mimetype == "text/html"
        assert "Tomatoes" in html

    def test_no_reply_to_without_customer_email(self, order_with_items):
        order, items = order_with_items
        order.customer_email = ""

        EmailOrderNotifier().send_order_notification(order, items)

        assert mail.outbox[0].reply_to == []

    def test_explicit_recipients_override_settings(self, order_with_items):
        order, items = order_with_items

        EmailOrderNotifier(recipients=["kitchen@example.com"]).send_order_notification(
            order, items
        )

        assert mail.outbox[0].to == ["kitchen@example.com"]

    def test_missing_recipients_is_a_failure(self, order_with_items, settings):
        settings.ORDER_EMAIL_RECIPIENTS = []
        order, items = order_with_items

        with pytest.raises(NotificationError, match="No order email recipients"):
            EmailOrderNotifier().send_order_notification(order, items)
        assert mail.outbox == []

    def test_transport_error_wrapped(self, order_with_items):
        order, items = order_with_items
        connection = MagicMock()
        connection.send_messages.side_effect = TimeoutError("timed out")

        with pytest.raises(NotificationError, match="timed out"):
            EmailOrderNotifier(connection=connection).send_order_notification(
                order, items
            )
