"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from typing import Iterable


class OrderNotFound(Exception):
    """The requested order does not exist."""


class InvalidOrderStatus(Exception):
    """Unknown status value or a transition the state machine forbids."""


class ProductNotFound(Exception):
    """One or more products referenced by the order do not exist.

    ``missing_ids`` lists every missing id so the client can fix all of
    them at once.
    """

    def __init__(self, missing_ids: Iterable[int]) -> None:
        self.missing_ids = sorted(missing_ids)
        joined = ", ".join(str(product_id) for product_id in self.missing_ids)
        super().__init__(f"Invalid product IDs: {joined}")


class ProductUnavailable(Exception):
    """A referenced product exists but is flagged as not orderable."""

    def __init__(self, product_id: int, product_name: str) -> None:
        self.product_id = product_id
        self.product_name = product_name
        super().__init__(
            f"Product '{product_name}' is currently unavailable and cannot be ordered."
        )


class OrderPersistenceError(Exception):
    """The store failed while writing the order; nothing was committed."""


class OrderLimitExceeded(Exception):
    """A quantity or amount of the order does not fit the stored precision."""

    def __init__(self, field: str, value, limit) -> None:
        self.field = field
        self.value = value
        self.limit = limit
        super().__init__(f"{field} {value} exceeds the maximum of {limit}.")
