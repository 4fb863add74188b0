"""Product service layer (Use Cases).

Read access to the catalog plus stock-counter maintenance, delegating
persistence to the injected ``IProductRepository``.  Products themselves
are created and edited outside the API (see ``seed_data``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.products.exceptions import ProductNotFound

if TYPE_CHECKING:
    from django.db import models

    from modules.products.dtos import UpdateStockDTO
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        return self._repo.list(filters)

    def get_product(self, id: int) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product

    def list_categories(self) -> List[str]:
        return self._repo.categories()

    def low_stock_products(self) -> models.QuerySet:
        return self._repo.low_stock()

    def stock_report(self) -> List[Dict[str, Any]]:
        return self._repo.stock_report()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def update_stock(self, id: int, dto: UpdateStockDTO) -> Product:
        """Overwrite the supplied stock counters of a product.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")

        changes = dto.changes()
        for field, value in changes.items():
            setattr(product, field, value)

        product = self._repo.save(product)
        logger.info(
            "product.stock_updated",
            product_id=product.id,
            **{field: str(value) for field, value in changes.items()},
        )
        return product
