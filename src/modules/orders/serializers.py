"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from modules.orders.constants import MAX_PRODUCT_ID, OrderStatus
from modules.orders.models import Order, OrderItem

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderItemSerializer(serializers.Serializer):
    """Validates a single item in an order creation request.

    Unknown keys such as ``price`` or ``product_name`` are dropped: the
    catalog is the only source of prices and names.
    """

    product_id = serializers.IntegerField(min_value=1, max_value=MAX_PRODUCT_ID)
    quantity = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0.01")
    )


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order creation request payload."""

    customer_name = serializers.CharField(max_length=255)
    customer_email = serializers.EmailField(
        max_length=255, required=False, allow_blank=True, allow_null=True
    )
    customer_phone = serializers.CharField(
        max_length=50, required=False, allow_blank=True, allow_null=True
    )
    customer_address = serializers.CharField(
        required=False, allow_blank=True, allow_null=True
    )
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    items = CreateOrderItemSerializer(many=True, allow_empty=False)


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for order items with the product snapshot."""

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "order_id",
            "product_id",
            "product_name",
            "unit",
            "price",
            "quantity",
            "total_price",
            "created_at",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for the order row itself (no nested relations)."""

    class Meta:
        model = Order
        fields = [
            "id",
            "customer_name",
            "customer_email",
            "customer_phone",
            "customer_address",
            "total_amount",
            "total_items",
            "status",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OrderDetailSerializer(OrderSerializer):
    """Order with its nested items."""

    items = OrderItemSerializer(many=True, read_only=True)

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + ["items"]
        read_only_fields = fields


class OrderListSerializer(OrderSerializer):
    """List row: order fields plus the number of lines."""

    item_count = serializers.IntegerField(read_only=True)

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + ["item_count"]
        read_only_fields = fields


class OrderStatsSerializer(serializers.Serializer):
    total_orders = serializers.IntegerField()
    pending_orders = serializers.IntegerField()
    confirmed_orders = serializers.IntegerField()
    delivered_orders = serializers.IntegerField()
    total_revenue = serializers.DecimalField(
        max_digits=14, decimal_places=2, allow_null=True
    )
    average_order_value = serializers.DecimalField(
        max_digits=14, decimal_places=2, allow_null=True
    )
