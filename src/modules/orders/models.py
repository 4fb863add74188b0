"""Order, OrderItem and EmailFailure models.

Business rules implemented:
- Orders start ``pending``; later transitions follow ``VALID_TRANSITIONS``.
- OrderItem snapshots product name, unit and price at creation time, so
  historical orders stay accurate after catalog changes.
- OrderItem ``total_price`` is always ``price * quantity`` at currency
  precision (recalculated on save).
- Items and email-failure records are deleted with their order (CASCADE).
- EmailFailure is an append-only audit trail of undelivered notifications.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import TimeStampedModel
from modules.orders.constants import TERMINAL_STATES, VALID_TRANSITIONS, OrderStatus
from modules.orders.pricing import line_total


class Order(TimeStampedModel):
    """Order aggregate root.

    Customer contact details are stored on the order itself; the mobile
    ordering app has no customer accounts.
    """

    customer_name: models.CharField = models.CharField(max_length=255)
    customer_email: models.EmailField = models.EmailField(
        max_length=255, blank=True, default=""
    )
    customer_phone: models.CharField = models.CharField(
        max_length=50, blank=True, default=""
    )
    customer_address: models.TextField = models.TextField(blank=True, default="")
    total_amount: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    total_items: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    notes: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "orders"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        """Return ``True`` if the order is in a terminal state."""
        return self.status in TERMINAL_STATES

    def can_transition_to(self, new_status: str) -> bool:
        """Check whether transitioning to *new_status* is valid."""
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    def __str__(self) -> str:
        return f"Order #{self.pk} ({self.status})"


class OrderItem(TimeStampedModel):
    """Line item of an Order with a snapshot of the product at order time."""

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product: models.ForeignKey = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    product_name: models.CharField = models.CharField(max_length=255)
    unit: models.CharField = models.CharField(max_length=50)
    price: models.DecimalField = models.DecimalField(max_digits=10, decimal_places=2)
    quantity: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    total_price: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        editable=False,
    )

    class Meta:
        db_table = "order_items"
        ordering = ["id"]
        indexes = [
            models.Index(fields=["order"], name="order_items_order_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="order_items_quantity_positive",
            ),
        ]

    def clean(self) -> None:
        super().clean()
        if self.quantity is not None and self.quantity <= 0:
            raise ValidationError({"quantity": "Quantity must be greater than zero."})

    def save(self, *args: Any, **kwargs: Any) -> None:
        self.total_price = line_total(self.price, self.quantity)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.product_name} x{self.quantity}{self.unit} ({self.total_price})"


class EmailFailure(models.Model):
    """Record of an order notification that could not be delivered.

    Written only after the order committed; consumed by whoever retries
    notifications.  Never updated.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="email_failures",
    )
    email: models.CharField = models.CharField(max_length=255, blank=True, default="")
    error_message: models.TextField = models.TextField()
    created_at: models.DateTimeField = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "email_failures"
        ordering = ["created_at", "id"]

    def __str__(self) -> str:
        return f"Email failure for order #{self.order_id}"
