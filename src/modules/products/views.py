"""Product API views.

Exposes the ``ProductService`` via HTTP using DRF ViewSets.
Catalog reads are public (the ordering app browses them anonymously);
stock reports and stock updates require authentication.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.permissions import AllowAny, BasePermission, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.products.dtos import UpdateStockDTO
from modules.products.exceptions import ProductNotFound
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import (
    LowStockProductSerializer,
    ProductSerializer,
    StockReportRowSerializer,
    UpdateStockSerializer,
)
from modules.products.services import ProductService

PUBLIC_ACTIONS = {"list", "retrieve", "categories"}


class ProductViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for catalog reads and stock maintenance.

    Uses ``ProductService`` with ``ProductDjangoRepository`` (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    filterset_class = ProductFilter
    search_fields = ["name", "description", "category"]
    ordering_fields = ["name", "price", "stock", "category"]
    ordering = ["name", "id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = Product.objects.all()
    serializer_class = ProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    def get_permissions(self) -> list[BasePermission]:
        if self.action in PUBLIC_ACTIONS:
            return [AllowAny()]
        return [IsAuthenticated()]

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def get_queryset(self):
        return self._service.list_products()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self._service.get_product(int(pk))
        except (ProductNotFound, TypeError, ValueError):
            return Response(
                {"detail": "Product not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(ProductSerializer(product).data)

    @action(detail=False, methods=["get"])
    def categories(self, request: Request) -> Response:
        """GET /api/v1/products/categories/"""
        return Response({"categories": self._service.list_categories()})

    # ------------------------------------------------------------------
    # Stock
    # ------------------------------------------------------------------

    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request: Request) -> Response:
        """GET /api/v1/products/low-stock/"""
        products = self._service.low_stock_products()
        serializer = LowStockProductSerializer(products, many=True)
        return Response({"count": len(serializer.data), "results": serializer.data})

    @action(detail=False, methods=["get"], url_path="stock-report")
    def stock_report(self, request: Request) -> Response:
        """GET /api/v1/products/stock-report/"""
        rows = self._service.stock_report()
        return Response(StockReportRowSerializer(rows, many=True).data)

    @action(detail=True, methods=["patch"], url_path="stock")
    def update_stock(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/stock/

        Accepts any of ``stock``, ``used`` and ``need_to_order``.
        """
        serializer = UpdateStockSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = UpdateStockDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            return Response(
                {"detail": [error["msg"] for error in exc.errors()]},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            product = self._service.update_stock(int(pk), dto)
        except (ProductNotFound, TypeError, ValueError):
            return Response(
                {"detail": "Product not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(ProductSerializer(product).data)
