"""Product DRF serializers for API output.

The serializer operates at the Interface layer (API Views).
Stock-derived fields are computed from the model and are read-only.
"""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for the Product resource with stock indicators."""

    stock_display = serializers.CharField(read_only=True)
    available_stock = serializers.DecimalField(
        max_digits=10, decimal_places=2, read_only=True
    )
    stock_status = serializers.CharField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "price",
            "unit",
            "is_available",
            "stock",
            "used",
            "need_to_order",
            "description",
            "image_url",
            "category",
            "type",
            "stock_display",
            "available_stock",
            "stock_status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class LowStockProductSerializer(ProductSerializer):
    shortage = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta(ProductSerializer.Meta):
        fields = ProductSerializer.Meta.fields + ["shortage"]
        read_only_fields = fields


class UpdateStockSerializer(serializers.Serializer):
    """Validates ``PATCH /products/{id}/stock/`` payloads."""

    stock = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False
    )
    used = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False
    )
    need_to_order = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False
    )


class StockReportRowSerializer(serializers.Serializer):
    category = serializers.CharField(allow_null=True)
    total_products = serializers.IntegerField()
    total_stock = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_used = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_need_to_order = serializers.DecimalField(max_digits=12, decimal_places=2)
    low_stock_count = serializers.IntegerField()
