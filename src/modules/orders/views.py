"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; anything else propagates.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.permissions import AllowAny, BasePermission, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.notifications.notifier import EmailOrderNotifier
from modules.orders.constants import EMAIL_FAILED_MESSAGE
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import (
    InvalidOrderStatus,
    OrderLimitExceeded,
    OrderNotFound,
    OrderPersistenceError,
    ProductNotFound,
    ProductUnavailable,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CreateOrderSerializer,
    OrderDetailSerializer,
    OrderItemSerializer,
    OrderListSerializer,
    OrderSerializer,
    OrderStatsSerializer,
    StatusUpdateSerializer,
)
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository

ORDER_NOT_FOUND = "Order not found."


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories and notifier (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.

    Order creation is public (the mobile ordering app has no accounts);
    every other action requires authentication.
    """

    queryset = Order.objects.all()
    filterset_class = OrderFilter
    search_fields = ["customer_name", "customer_email"]
    ordering_fields = ["created_at", "total_amount", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
            notifier=EmailOrderNotifier(),
        )

    def get_permissions(self) -> list[BasePermission]:
        if self.action == "create":
            return [AllowAny()]
        return [IsAuthenticated()]

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        Returns 201 whenever the order is committed, whether or not the
        notification email went out; ``email_sent`` tells which.
        """
        create_serializer = CreateOrderSerializer(data=request.data)
        create_serializer.is_valid(raise_exception=True)

        data = create_serializer.validated_data
        try:
            dto = CreateOrderDTO(
                customer_name=data["customer_name"],
                customer_email=data.get("customer_email"),
                customer_phone=data.get("customer_phone"),
                customer_address=data.get("customer_address"),
                notes=data.get("notes"),
                items=[
                    CreateOrderItemDTO(
                        product_id=item["product_id"],
                        quantity=item["quantity"],
                    )
                    for item in data["items"]
                ],
            )
        except PydanticValidationError as exc:
            return Response(
                {"detail": [error["msg"] for error in exc.errors()]},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            result = self._service.create_order(dto)
        except ProductNotFound as exc:
            return Response(
                {"detail": str(exc), "missing_product_ids": exc.missing_ids},
                status=status.HTTP_404_NOT_FOUND,
            )
        except ProductUnavailable as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except OrderLimitExceeded as exc:
            return Response(
                {"detail": str(exc), "field": exc.field},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except OrderPersistenceError:
            return Response(
                {"detail": "Failed to create order."},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        body = {
            "message": (
                "Order created successfully and notification sent."
                if result.email_sent
                else "Order created successfully, but the notification email failed."
            ),
            "order": OrderSerializer(result.order).data,
            "items": OrderItemSerializer(result.items, many=True).data,
            "email_sent": result.email_sent,
        }
        if not result.email_sent:
            body["email_error"] = EMAIL_FAILED_MESSAGE
        return Response(body, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def get_queryset(self):
        return self._service.list_orders()

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Filtering (status, customer email, date range, total range) is
        handled by ``OrderFilter`` via ``filter_backends``.  Ordering is
        handled by ``OrderingFilter``.  Results are paginated.
        """
        queryset = self.filter_queryset(self.get_queryset())

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request)
        serializer = OrderListSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(int(pk))
        except (OrderNotFound, TypeError, ValueError):
            return Response(
                {"detail": ORDER_NOT_FOUND},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(OrderDetailSerializer(order).data)

    # ------------------------------------------------------------------
    # Status Update
    # ------------------------------------------------------------------

    @action(detail=True, methods=["patch"], url_path="status")
    def update_status(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/status/

        Body: ``{"status": "<new status>"}``.  The transition must be
        allowed by the order state machine.
        """
        serializer = StatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = self._service.update_status(
                order_id=int(pk),
                new_status=serializer.validated_data["status"],
            )
        except (OrderNotFound, TypeError, ValueError):
            return Response(
                {"detail": ORDER_NOT_FOUND},
                status=status.HTTP_404_NOT_FOUND,
            )
        except InvalidOrderStatus as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        return Response(OrderDetailSerializer(order).data)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/orders/{pk}/"""
        try:
            self._service.delete_order(int(pk))
        except (OrderNotFound, TypeError, ValueError):
            return Response(
                {"detail": ORDER_NOT_FOUND},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    @action(detail=False, methods=["get"])
    def stats(self, request: Request) -> Response:
        """GET /api/v1/orders/stats/"""
        return Response(OrderStatsSerializer(self._service.stats()).data)
