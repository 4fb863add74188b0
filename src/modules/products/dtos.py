"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

STOCK_FIELDS = ("stock", "used", "need_to_order")


class UpdateStockDTO(BaseModel):
    """Partial update of a product's stock counters.

    At least one counter must be supplied and none may be negative.
    """

    model_config = ConfigDict(frozen=True)

    stock: Optional[Decimal] = None
    used: Optional[Decimal] = None
    need_to_order: Optional[Decimal] = None

    @field_validator(*STOCK_FIELDS)
    @classmethod
    def counters_must_be_non_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v < 0:
            raise ValueError("Stock counters cannot be negative.")
        return v

    @model_validator(mode="after")
    def at_least_one_counter(self):
        if all(getattr(self, field) is None for field in STOCK_FIELDS):
            raise ValueError(
                "At least one field (stock, used, need_to_order) is required."
            )
        return self

    def changes(self) -> dict[str, Decimal]:
        """Return only the counters that were supplied."""
        return {
            field: getattr(self, field)
            for field in STOCK_FIELDS
            if getattr(self, field) is not None
        }
