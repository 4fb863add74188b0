"""Unit tests for Product stock indicators."""

from __future__ import annotations

from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from modules.products.models import Product, StockStatus

pytestmark = pytest.mark.unit


def _product(**kwargs):
    data = {"name": "Tomatoes", "price": Decimal("2.50"), "unit": "kg"}
    data.update(kwargs)
    return Product(**data)


class TestStockIndicators:
    def test_available_stock(self):
        assert _product(stock=Decimal("10"), used=Decimal("4")).available_stock == Decimal("6")

    def test_available_stock_never_negative(self):
        assert _product(stock=Decimal("3"), used=Decimal("5")).available_stock == Decimal("0")

    @pytest.mark.parametrize(
        "stock, need_to_order, expected",
        [
            ("5", "5", StockStatus.LOW),
            ("4", "5", StockStatus.LOW),
            ("7.5", "5", StockStatus.MEDIUM),
            ("6", "5", StockStatus.MEDIUM),
            ("7.51", "5", StockStatus.HIGH),
            ("100", "0.5", StockStatus.HIGH),
        ],
    )
    def test_stock_status(self, stock, need_to_order, expected):
        product = _product(stock=Decimal(stock), need_to_order=Decimal(need_to_order))
        assert product.stock_status == expected

    def test_stock_display(self):
        assert _product(stock=Decimal("100.00")).stock_display == "100kg"
        assert _product(stock=Decimal("2.50"), unit="piece").stock_display == "2.5piece"

    def test_shortage(self):
        product = _product(stock=Decimal("2"), need_to_order=Decimal("5"))
        assert product.shortage == Decimal("3")


class TestValidation:
    def test_price_must_be_positive(self):
        with pytest.raises(ValidationError):
            _product(price=Decimal("0")).full_clean()

    def test_counters_cannot_be_negative(self):
        with pytest.raises(ValidationError):
            _product(stock=Decimal("-1")).full_clean()

    def test_defaults(self):
        product = Product.objects.create(name="Onions", price=Decimal("1.50"))
        assert product.unit == "kg"
        assert product.is_available is True
        assert product.stock == Decimal("0")
        assert str(product) == "Onions (kg)"
