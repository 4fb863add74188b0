"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.  Insert
methods do not open their own transaction: they join whatever
``transaction.atomic()`` block the service has opened, so the order and
its items commit or roll back together.

Concurrency control on status updates uses ``select_for_update()``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.db import models, transaction
from django.db.models import Avg, Count, Q, Sum

from modules.orders.constants import OrderStatus
from modules.orders.models import EmailFailure, Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Order creation (caller owns the transaction)
    # ------------------------------------------------------------------

    def insert_order(self, data: Dict[str, Any]) -> Order:
        order = Order.objects.create(**data)
        logger.info("order.inserted", order_id=order.id)
        return order

    def insert_order_items(
        self, order: Order, items: List[Dict[str, Any]]
    ) -> List[OrderItem]:
        created = []
        for item_data in items:
            item = OrderItem(order=order, **item_data)
            item.save()
            created.append(item)
        logger.info("order.items_inserted", order_id=order.id, item_count=len(created))
        return created

    def insert_email_failure(
        self, order_id: int, email: str, error_message: str
    ) -> EmailFailure:
        return EmailFailure.objects.create(
            order_id=order_id,
            email=email or "",
            error_message=error_message,
        )

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: int) -> Optional[Order]:
        """Retrieve an order with its items prefetched.

        Returns ``None`` for non-existent or malformed IDs.
        """
        try:
            return Order.objects.prefetch_related("items").filter(id=id).first()
        except (ValueError, TypeError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        """List orders annotated with ``item_count``.

        Filters are plain ORM look-ups, e.g. ``{"status": "pending"}``.
        """
        queryset = Order.objects.annotate(item_count=Count("items"))
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def get_for_update(self, id: int) -> Optional[Order]:
        try:
            return (
                Order.objects.select_for_update()
                .prefetch_related("items")
                .filter(id=id)
                .first()
            )
        except (ValueError, TypeError):
            return None

    def stats(self) -> Dict[str, Any]:
        return Order.objects.aggregate(
            total_orders=Count("id"),
            pending_orders=Count("id", filter=Q(status=OrderStatus.PENDING)),
            confirmed_orders=Count("id", filter=Q(status=OrderStatus.CONFIRMED)),
            delivered_orders=Count("id", filter=Q(status=OrderStatus.DELIVERED)),
            total_revenue=Sum("total_amount"),
            average_order_value=Avg("total_amount"),
        )

    # ------------------------------------------------------------------
    # Save / Delete
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist (create or update) an order."""
        entity.save()
        logger.info("order.saved", order_id=entity.id, status=entity.status)
        return entity

    @transaction.atomic
    def delete(self, order: Order) -> None:
        order_id = order.id
        order.delete()
        logger.info("order.deleted", order_id=order_id)
