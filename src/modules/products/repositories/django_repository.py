"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: look-ups return ``None``
instead of raising HTTP-level exceptions; the Service Layer decides
how to translate a missing entity into an API response.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional

import structlog
from django.db import models, transaction
from django.db.models import Count, F, Q, Sum, Value
from django.db.models.functions import Greatest

from modules.products.models import ZERO, Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

_COUNTER = models.DecimalField(max_digits=10, decimal_places=2)


def _non_negative(expression) -> Greatest:
    return Greatest(expression, Value(ZERO), output_field=_COUNTER)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: int) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or malformed IDs.
        """
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, TypeError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        """List products with optional Django ORM look-ups.

        Examples of valid filters::

            {"is_available": True}
            {"category__iexact": "vegetables"}
        """
        queryset = Product.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        entity.save()
        logger.info("product.saved", product_id=entity.id)
        return entity

    # ------------------------------------------------------------------
    # Order support
    # ------------------------------------------------------------------

    def find_by_ids(
        self, ids: Iterable[int], for_update: bool = False
    ) -> List[Product]:
        queryset = Product.objects.filter(id__in=list(ids)).order_by("id")
        if for_update:
            queryset = queryset.select_for_update()
        return list(queryset)

    def record_consumption(self, quantities: Mapping[int, Decimal]) -> None:
        for product_id, quantity in sorted(quantities.items()):
            Product.objects.filter(id=product_id).update(
                used=F("used") + quantity,
                need_to_order=_non_negative(F("used") + quantity - F("stock")),
            )
        logger.info("product.consumption_recorded", product_ids=sorted(quantities))

    def release_consumption(self, quantities: Mapping[int, Decimal]) -> None:
        for product_id, quantity in sorted(quantities.items()):
            Product.objects.filter(id=product_id).update(
                used=_non_negative(F("used") - quantity),
                need_to_order=_non_negative(F("used") - quantity - F("stock")),
            )
        logger.info("product.consumption_released", product_ids=sorted(quantities))

    # ------------------------------------------------------------------
    # Stock reports
    # ------------------------------------------------------------------

    def categories(self) -> List[str]:
        return list(
            Product.objects.exclude(category__isnull=True)
            .exclude(category="")
            .order_by("category")
            .values_list("category", flat=True)
            .distinct()
        )

    def low_stock(self) -> models.QuerySet:
        return (
            Product.objects.filter(is_available=True, stock__lte=F("need_to_order"))
            .annotate(margin=F("stock") - F("need_to_order"))
            .order_by("margin", "name")
        )

    def stock_report(self) -> List[Dict[str, Any]]:
        rows = (
            Product.objects.filter(is_available=True)
            .values("category")
            .annotate(
                total_products=Count("id"),
                total_stock=Sum("stock"),
                total_used=Sum("used"),
                total_need_to_order=Sum("need_to_order"),
                low_stock_count=Count("id", filter=Q(stock__lte=F("need_to_order"))),
            )
            .order_by("category")
        )
        return list(rows)
