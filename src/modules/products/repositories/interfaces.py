"""Product repository interface.

Extends ``IRepository[Product]`` with the bulk look-up used by order
creation and the stock-counter maintenance performed alongside it.
"""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product catalog."""

    @abstractmethod
    def find_by_ids(
        self, ids: Iterable[int], for_update: bool = False
    ) -> List[Product]:
        """Return the subset of ``ids`` that exist, ordered by id.

        With ``for_update`` the rows are locked (SELECT FOR UPDATE) until
        the surrounding transaction ends.
        """

    @abstractmethod
    def record_consumption(self, quantities: Mapping[int, Decimal]) -> None:
        """Add ordered quantities to ``used`` and recompute ``need_to_order``."""

    @abstractmethod
    def release_consumption(self, quantities: Mapping[int, Decimal]) -> None:
        """Remove quantities from ``used`` (order deleted)."""

    @abstractmethod
    def categories(self) -> List[str]:
        """Distinct, non-empty categories sorted alphabetically."""

    @abstractmethod
    def low_stock(self) -> "models.QuerySet[Product]":
        """Available products whose stock is at or below ``need_to_order``."""

    @abstractmethod
    def stock_report(self) -> List[Dict[str, Any]]:
        """Per-category stock aggregates over available products."""
