"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateOrderItemDTO``: input for a single order line.
- ``CreateOrderDTO``: input for order creation (nested items).

Only ``product_id`` and ``quantity`` are carried per line: prices and
product names always come from the catalog.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.orders.constants import CURRENCY_QUANTUM, MAX_PRODUCT_ID

CUSTOMER_NAME_MAX_LENGTH = 255
CUSTOMER_PHONE_MAX_LENGTH = 50


class CreateOrderItemDTO(BaseModel):
    """Immutable DTO for a single order line in a creation request."""

    model_config = ConfigDict(frozen=True)

    product_id: int = Field(gt=0, le=MAX_PRODUCT_ID)
    quantity: Decimal

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Quantity must be greater than zero.")
        if v != v.quantize(CURRENCY_QUANTUM):
            raise ValueError("Quantity must have at most two decimal places.")
        return v


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests.

    Validates:
    - ``customer_name`` is non-empty and at most 255 characters.
    - ``customer_email`` is a valid address when given.
    - ``items`` contains at least one line.

    Blank optional contact fields are normalised to ``""``.
    """

    model_config = ConfigDict(frozen=True)

    customer_name: str
    customer_email: Optional[str] = ""
    customer_phone: Optional[str] = ""
    customer_address: Optional[str] = ""
    notes: Optional[str] = ""
    items: List[CreateOrderItemDTO]

    @field_validator("customer_name")
    @classmethod
    def customer_name_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Customer name is required.")
        if len(v) > CUSTOMER_NAME_MAX_LENGTH:
            raise ValueError(
                f"Customer name must be at most {CUSTOMER_NAME_MAX_LENGTH} characters."
            )
        return v

    @field_validator("customer_email")
    @classmethod
    def customer_email_format(cls, v: Optional[str]) -> str:
        v = (v or "").strip()
        if v:
            try:
                validate_email(v)
            except DjangoValidationError as exc:
                raise ValueError("Enter a valid email address.") from exc
        return v

    @field_validator("customer_phone")
    @classmethod
    def customer_phone_length(cls, v: Optional[str]) -> str:
        v = (v or "").strip()
        if len(v) > CUSTOMER_PHONE_MAX_LENGTH:
            raise ValueError(
                f"Phone must be at most {CUSTOMER_PHONE_MAX_LENGTH} characters."
            )
        return v

    @field_validator("customer_address", "notes")
    @classmethod
    def blank_to_empty(cls, v: Optional[str]) -> str:
        return v or ""

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: List[CreateOrderItemDTO]
    ) -> List[CreateOrderItemDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v
