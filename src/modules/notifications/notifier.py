"""Order notifiers.

``OrderNotifier`` is the contract the order service depends on.
``EmailOrderNotifier`` sends the order summary to the shop's order
inbox through Django's email framework; the SMTP connection uses
``EMAIL_TIMEOUT`` so a stalled provider surfaces as a failure rather
than a hung request.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional, Protocol, Sequence

import structlog
from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils import timezone

from modules.notifications.exceptions import NotificationError

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderItem

logger = structlog.get_logger(__name__)


class OrderNotifier(Protocol):
    """Sends an order confirmation; raises ``NotificationError`` on failure."""

    def send_order_notification(
        self, order: Order, items: Sequence[OrderItem]
    ) -> None: ...


class EmailOrderNotifier:
    """Email the order summary (plain text + HTML) to the order recipients.

    The customer, when an address was given, is set as ``Reply-To`` so
    staff can answer directly from the inbox.
    """

    text_template = "notifications/order_confirmation.txt"
    html_template = "notifications/order_confirmation.html"

    def __init__(
        self,
        recipients: Optional[Sequence[str]] = None,
        from_email: Optional[str] = None,
        connection: Any = None,
    ) -> None:
        self._recipients = recipients
        self._from_email = from_email
        self._connection = connection

    @property
    def recipients(self) -> list[str]:
        configured = (
            self._recipients
            if self._recipients is not None
            else settings.ORDER_EMAIL_RECIPIENTS
        )
        return [address.strip() for address in configured if address.strip()]

    def build_subject(self, order: Order) -> str:
        created = timezone.localtime(order.created_at)
        return f"Order #{order.id} - {created:%Y-%m-%d}"

    def build_context(self, order: Order, items: Sequence[OrderItem]) -> Dict[str, Any]:
        return {
            "order": order,
            "items": items,
            "created": timezone.localtime(order.created_at),
        }

    def build_message(
        self, order: Order, items: Sequence[OrderItem]
    ) -> EmailMultiAlternatives:
        context = self.build_context(order, items)
        message = EmailMultiAlternatives(
            subject=self.build_subject(order),
            body=render_to_string(self.text_template, context),
            from_email=self._from_email or settings.DEFAULT_FROM_EMAIL,
            to=self.recipients,
            reply_to=[order.customer_email] if order.customer_email else None,
            connection=self._connection,
        )
        message.attach_alternative(
            render_to_string(self.html_template, context), "text/html"
        )
        return message

    def send_order_notification(self, order: Order, items: Sequence[OrderItem]) -> None:
        log = logger.bind(order_id=order.id)
        if not self.recipients:
            raise NotificationError("No order email recipients are configured.")

        try:
            message = self.build_message(order, items)
            sent = message.send(fail_silently=False)
        except Exception as exc:
            log.warning("notification.email_send_failed", error=str(exc))
            raise NotificationError(str(exc) or exc.__class__.__name__) from exc

        if not sent:
            raise NotificationError("Mail backend accepted no messages.")
        log.info("notification.email_sent", recipients=len(self.recipients))
