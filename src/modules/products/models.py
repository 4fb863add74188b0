"""Product model with price authority and stock counters.

Business rules implemented:
- Price must be greater than zero; it is the only price orders ever use.
- Stock counters (``stock``, ``used``, ``need_to_order``) cannot be negative.
- ``is_available = False`` products cannot be ordered (enforced at service layer).
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import TimeStampedModel

logger = structlog.get_logger(__name__)

ZERO = Decimal("0.00")

# Stock above need_to_order but within this factor of it is "medium".
MEDIUM_STOCK_FACTOR = Decimal("1.5")


class ProductType(models.TextChoices):
    KITCHEN = "kitchen", "Kitchen"
    BAR = "bar", "Bar"


class StockStatus(models.TextChoices):
    LOW = "low", "Low"
    MEDIUM = "medium", "Medium"
    HIGH = "high", "High"


class Product(TimeStampedModel):
    """Catalog entry for a sellable product.

    ``used`` accumulates the quantity consumed by orders and
    ``need_to_order`` is the shortfall ``max(0, used - stock)``; both are
    maintained by the order service when order items are created or deleted.
    """

    name = models.CharField(max_length=255)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    unit = models.CharField(max_length=50, default="kg")
    is_available = models.BooleanField(default=True)
    stock = models.DecimalField(max_digits=10, decimal_places=2, default=ZERO)
    used = models.DecimalField(max_digits=10, decimal_places=2, default=ZERO)
    need_to_order = models.DecimalField(max_digits=10, decimal_places=2, default=ZERO)
    description = models.TextField(blank=True, default="")
    image_url = models.URLField(max_length=500, blank=True, default="")
    category = models.CharField(max_length=100, null=True, blank=True)  # noqa: DJ01
    type = models.CharField(
        max_length=50,
        choices=ProductType.choices,
        blank=True,
        default="",
    )

    class Meta:
        db_table = "products"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["category"], name="products_category_idx"),
            models.Index(fields=["is_available"], name="products_available_idx"),
            models.Index(fields=["type"], name="products_type_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name="products_price_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(stock__gte=0)
                & models.Q(used__gte=0)
                & models.Q(need_to_order__gte=0),
                name="products_stock_counters_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Stock helpers
    # ------------------------------------------------------------------

    @property
    def available_stock(self) -> Decimal:
        return max(ZERO, self.stock - self.used)

    @property
    def stock_status(self) -> str:
        if self.stock <= self.need_to_order:
            return StockStatus.LOW
        if self.stock <= self.need_to_order * MEDIUM_STOCK_FACTOR:
            return StockStatus.MEDIUM
        return StockStatus.HIGH

    @property
    def stock_display(self) -> str:
        return f"{Decimal(self.stock).normalize():f}{self.unit}"

    @property
    def shortage(self) -> Decimal:
        return max(ZERO, self.need_to_order - self.stock)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.price is not None and self.price <= 0:
            raise ValidationError({"price": "Price must be greater than zero."})
        for field in ("stock", "used", "need_to_order"):
            value = getattr(self, field)
            if value is not None and value < 0:
                raise ValidationError({field: f"{field} cannot be negative."})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=self.id,
                name=self.name,
                price=str(self.price),
            )

    def __str__(self) -> str:
        return f"{self.name} ({self.unit})"
