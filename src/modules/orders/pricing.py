"""Server-side pricing of order lines.

Only ``Product.price`` read inside the order transaction is ever used;
whatever price or name a client sends is discarded before reaching here.
All arithmetic is ``Decimal`` and line totals are rounded half-up to the
currency quantum.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping

from modules.orders.constants import CURRENCY_QUANTUM, MAX_DECIMAL_VALUE
from modules.orders.exceptions import OrderLimitExceeded

if TYPE_CHECKING:
    from modules.orders.dtos import CreateOrderItemDTO
    from modules.products.models import Product


def line_total(price: Decimal, quantity: Decimal) -> Decimal:
    """``price * quantity`` rounded to two decimal places."""
    return (Decimal(price) * Decimal(quantity)).quantize(
        CURRENCY_QUANTUM, rounding=ROUND_HALF_UP
    )


def merge_lines(items: Iterable[CreateOrderItemDTO]) -> Dict[int, Decimal]:
    """Collapse repeated ``product_id``s by summing their quantities.

    Keeps the position of each product's first appearance.
    """
    merged: Dict[int, Decimal] = {}
    for item in items:
        merged[item.product_id] = merged.get(item.product_id, Decimal("0")) + item.quantity
    return merged


@dataclass(frozen=True)
class PricedLine:
    product: Product
    quantity: Decimal
    total_price: Decimal

    @property
    def unit_price(self) -> Decimal:
        return self.product.price


@dataclass(frozen=True)
class PricedOrder:
    lines: List[PricedLine]
    total_amount: Decimal
    total_items: Decimal


def price_order(
    quantities: Mapping[int, Decimal], products: Mapping[int, Product]
) -> PricedOrder:
    """Price every line from the catalog record of its product.

    ``total_items`` counts units (sum of quantities), not lines.
    """
    lines = [
        PricedLine(
            product=products[product_id],
            quantity=quantity,
            total_price=line_total(products[product_id].price, quantity),
        )
        for product_id, quantity in quantities.items()
    ]
    return PricedOrder(
        lines=lines,
        total_amount=sum((line.total_price for line in lines), Decimal("0.00")),
        total_items=sum((line.quantity for line in lines), Decimal("0")),
    )


def check_limits(priced: PricedOrder, limit: Decimal = MAX_DECIMAL_VALUE) -> None:
    """Raise ``OrderLimitExceeded`` if any stored value would overflow ``limit``.

    Covers merged line quantities, line totals, the order total, the item
    count and each product's ``used`` counter after consumption.
    """
    for line in priced.lines:
        if line.quantity > limit:
            raise OrderLimitExceeded("quantity", line.quantity, limit)
        if line.total_price > limit:
            raise OrderLimitExceeded("total_price", line.total_price, limit)
        if line.product.used + line.quantity > limit:
            raise OrderLimitExceeded("used", line.product.used + line.quantity, limit)
    if priced.total_items > limit:
        raise OrderLimitExceeded("total_items", priced.total_items, limit)
    if priced.total_amount > limit:
        raise OrderLimitExceeded("total_amount", priced.total_amount, limit)
