"""Order service layer (Use Cases).

Orchestrates order capture, status management and deletion.

Order creation is a single unit of work: product look-up, validation,
pricing, the order row, its item rows and the stock-counter update all
commit together or not at all.  The confirmation email is sent only
after that commit; a failed send never undoes the order and is recorded
as an ``EmailFailure`` row instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import DatabaseError, transaction

from modules.notifications.exceptions import NotificationError
from modules.orders.constants import OrderStatus
from modules.orders.exceptions import (
    InvalidOrderStatus,
    OrderLimitExceeded,
    OrderNotFound,
    OrderPersistenceError,
    ProductNotFound,
    ProductUnavailable,
)
from modules.orders.pricing import check_limits, merge_lines, price_order

if TYPE_CHECKING:
    from django.db import models

    from modules.notifications.notifier import OrderNotifier
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.models import Order, OrderItem
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OrderCreationResult:
    """Outcome of ``OrderService.create_order``.

    ``email_error`` carries the notifier's message when ``email_sent`` is
    ``False``; it is meant for logs, not for API clients.
    """

    order: Order
    items: List[OrderItem]
    email_sent: bool
    email_error: Optional[str] = None


class OrderService:
    """Application service for Order use-cases.

    Receives repositories and the notifier via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        notifier: OrderNotifier,
    ) -> None:
        self._order_repo = order_repository
        self._product_repo = product_repository
        self._notifier = notifier

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, dto: CreateOrderDTO) -> OrderCreationResult:
        """Validate, price and persist an order, then notify.

        Steps (inside one transaction):
        1. Merge repeated product ids, summing quantities.
        2. Lock every referenced product in one query, ordered by id.
        3. Reject the order if any id is unknown (all ids reported).
        4. Reject the order if any product is unavailable (first in
           line order reported).
        5. Price each line from the catalog price and check every value
           fits the Decimal(10,2) columns.
        6. Insert the order, then its items.
        7. Add the quantities to the products' ``used`` counters.

        After commit the notifier runs; its failure is absorbed.

        Raises:
            ProductNotFound: unknown product id(s); nothing is written.
            ProductUnavailable: a product is not orderable; nothing is written.
            OrderLimitExceeded: a quantity or amount overflows the stored
                precision; nothing is written.
            OrderPersistenceError: the store failed; nothing is written.
        """
        quantities = merge_lines(dto.items)
        log = logger.bind(line_count=len(quantities))
        log.info("order.creation_started", product_ids=list(quantities))

        try:
            with transaction.atomic():
                products = {
                    product.id: product
                    for product in self._product_repo.find_by_ids(
                        quantities.keys(), for_update=True
                    )
                }

                missing = [pid for pid in quantities if pid not in products]
                if missing:
                    log.warning("order.invalid_products", missing_ids=missing)
                    raise ProductNotFound(missing)

                for product_id in quantities:
                    product = products[product_id]
                    if not product.is_available:
                        log.warning("order.product_unavailable", product_id=product_id)
                        raise ProductUnavailable(product.id, product.name)

                priced = price_order(quantities, products)
                try:
                    check_limits(priced)
                except OrderLimitExceeded as exc:
                    log.warning(
                        "order.limit_exceeded", field=exc.field, value=str(exc.value)
                    )
                    raise

                order = self._order_repo.insert_order(
                    {
                        "customer_name": dto.customer_name,
                        "customer_email": dto.customer_email or "",
                        "customer_phone": dto.customer_phone or "",
                        "customer_address": dto.customer_address or "",
                        "notes": dto.notes or "",
                        "total_amount": priced.total_amount,
                        "total_items": priced.total_items,
                        "status": OrderStatus.PENDING,
                    }
                )
                items = self._order_repo.insert_order_items(
                    order,
                    [
                        {
                            "product": line.product,
                            "product_name": line.product.name,
                            "unit": line.product.unit,
                            "price": line.unit_price,
                            "quantity": line.quantity,
                        }
                        for line in priced.lines
                    ],
                )
                self._product_repo.record_consumption(quantities)
        except DatabaseError as exc:
            log.error("order.persistence_failed", error=str(exc))
            raise OrderPersistenceError("Failed to save the order.") from exc

        log = log.bind(order_id=order.id)
        log.info(
            "order.created",
            total_amount=str(order.total_amount),
            total_items=str(order.total_items),
        )

        email_error = self._notify(order, items)
        return OrderCreationResult(
            order=order,
            items=items,
            email_sent=email_error is None,
            email_error=email_error,
        )

    @transaction.atomic
    def update_status(self, order_id: int, new_status: str) -> Order:
        """Transition an order to a new status.

        Acquires a row-level lock (``SELECT FOR UPDATE``) on the order
        before validating the transition against ``VALID_TRANSITIONS``.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: unknown status or forbidden transition.
        """
        if new_status not in OrderStatus.values:
            raise InvalidOrderStatus(
                f"Invalid status. Must be one of: {', '.join(OrderStatus.values)}."
            )

        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        log = logger.bind(
            order_id=order_id,
            current_status=order.status,
            new_status=new_status,
        )

        if not order.can_transition_to(new_status):
            log.warning("order.invalid_transition")
            raise InvalidOrderStatus(
                f"Cannot transition from {order.status} to {new_status}."
            )

        order.status = new_status
        self._order_repo.save(order)
        log.info("order.status_updated")
        return self._order_repo.get_by_id(order_id)

    @transaction.atomic
    def delete_order(self, order_id: int) -> None:
        """Hard-delete an order and give its quantities back to the products.

        Raises:
            OrderNotFound: order does not exist.
        """
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        released: Dict[int, Decimal] = {}
        for item in order.items.all():
            released[item.product_id] = released.get(item.product_id, Decimal("0")) + item.quantity

        if released:
            self._product_repo.release_consumption(released)
        self._order_repo.delete(order)
        logger.info("order.deleted", order_id=order_id, product_ids=sorted(released))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: int) -> Order:
        """Retrieve a single order with its items.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        """Return orders (newest first) annotated with ``item_count``."""
        return self._order_repo.list(filters)

    def stats(self) -> Dict[str, Any]:
        """Order counts per status plus revenue figures."""
        return self._order_repo.stats()

    # ------------------------------------------------------------------
    # Notification (post-commit)
    # ------------------------------------------------------------------

    def _notify(self, order: Order, items: List[OrderItem]) -> Optional[str]:
        """Send the order notification; return the error message on failure."""
        log = logger.bind(order_id=order.id)
        try:
            self._notifier.send_order_notification(order, items)
        except NotificationError as exc:
            log.warning("order.email_failed", error=str(exc))
            self._record_email_failure(order, str(exc))
            return str(exc)
        except Exception as exc:
            # The order is already committed; no notifier error may undo that.
            message = str(exc) or exc.__class__.__name__
            log.error("order.email_failed", error=message, exc_info=True)
            self._record_email_failure(order, message)
            return message

        log.info("order.email_sent")
        return None

    def _record_email_failure(self, order: Order, error_message: str) -> None:
        try:
            with transaction.atomic():
                self._order_repo.insert_email_failure(
                    order_id=order.id,
                    email=order.customer_email,
                    error_message=error_message,
                )
        except DatabaseError as exc:
            logger.error(
                "order.email_failure_log_failed",
                order_id=order.id,
                error=str(exc),
            )
