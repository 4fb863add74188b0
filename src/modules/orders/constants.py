"""Order domain constants.

Defines status choices, the valid status transitions of the order
state machine and the currency precision used for all money values.
"""

from decimal import Decimal

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    PREPARING = "preparing", "Preparing"
    READY = "ready", "Ready"
    DELIVERED = "delivered", "Delivered"
    CANCELLED = "cancelled", "Cancelled"


VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PREPARING, OrderStatus.CANCELLED},
    OrderStatus.PREPARING: {OrderStatus.READY, OrderStatus.CANCELLED},
    OrderStatus.READY: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}

TERMINAL_STATES: set[str] = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}

CURRENCY_QUANTUM = Decimal("0.01")

EMAIL_FAILED_MESSAGE = "Email notification failed"

# Largest value a Decimal(10,2) column can hold.
MAX_DECIMAL_VALUE = Decimal("99999999.99")

# Upper bound of a BigAutoField primary key.
MAX_PRODUCT_ID = 2**63 - 1
