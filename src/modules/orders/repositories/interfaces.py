"""Order repository interface.

Extends ``IRepository[Order]`` with the writes the order-creation
workflow performs inside one ambient transaction (order row, item rows)
and the post-commit email-failure audit record.

The Service Layer depends exclusively on this contract (DIP); the caller
owns the transaction boundary.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import EmailFailure, Order, OrderItem


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def insert_order(self, data: Dict[str, Any]) -> Order:
        """Insert the order row (customer fields, totals, status)."""

    @abstractmethod
    def insert_order_items(
        self, order: Order, items: List[Dict[str, Any]]
    ) -> List[OrderItem]:
        """Insert one row per line (``product``, ``product_name``, ``unit``,
        ``price``, ``quantity``) referencing *order*."""

    @abstractmethod
    def insert_email_failure(
        self, order_id: int, email: str, error_message: str
    ) -> EmailFailure:
        """Append a notification-failure audit record."""

    @abstractmethod
    def get_for_update(self, id: int) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE)."""

    @abstractmethod
    def delete(self, order: Order) -> None:
        """Hard-delete an order; items and audit records cascade."""

    @abstractmethod
    def stats(self) -> Dict[str, Any]:
        """Counts per status, revenue and average order value."""
