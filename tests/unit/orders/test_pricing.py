"""Unit tests for server-side order pricing."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.orders.dtos import CreateOrderItemDTO
from modules.orders.exceptions import OrderLimitExceeded
from modules.orders.pricing import check_limits, line_total, merge_lines, price_order
from modules.products.models import Product

pytestmark = pytest.mark.unit


class TestLineTotal:
    def test_multiplies_price_by_quantity(self):
        assert line_total(Decimal("2.50"), Decimal("3")) == Decimal("7.50")

    def test_rounds_half_up_to_cents(self):
        # 1.25 * 0.5 = 0.625
        assert line_total(Decimal("1.25"), Decimal("0.5")) == Decimal("0.63")

    def test_no_float_drift(self):
        assert line_total(Decimal("0.10"), Decimal("3")) == Decimal("0.30")


class TestMergeLines:
    def test_sums_duplicate_products(self):
        items = [
            CreateOrderItemDTO(product_id=2, quantity=Decimal("1")),
            CreateOrderItemDTO(product_id=1, quantity=Decimal("2")),
            CreateOrderItemDTO(product_id=2, quantity=Decimal("1.5")),
        ]
        merged = merge_lines(items)
        assert merged == {2: Decimal("2.5"), 1: Decimal("2")}

    def test_keeps_first_appearance_order(self):
        items = [
            CreateOrderItemDTO(product_id=5, quantity=Decimal("1")),
            CreateOrderItemDTO(product_id=3, quantity=Decimal("1")),
            CreateOrderItemDTO(product_id=5, quantity=Decimal("1")),
        ]
        assert list(merge_lines(items)) == [5, 3]


class TestPriceOrder:
    def test_totals_from_catalog_prices(self):
        products = {
            1: Product(id=1, name="Tomatoes", price=Decimal("2.50"), unit="kg"),
            2: Product(id=2, name="Carrots", price=Decimal("1.80"), unit="kg"),
        }
        priced = price_order({1: Decimal("3"), 2: Decimal("2")}, products)

        assert [line.total_price for line in priced.lines] == [
            Decimal("7.50"),
            Decimal("3.60"),
        ]
        assert priced.total_amount == Decimal("11.10")
        assert priced.total_items == Decimal("5")

    def test_total_items_counts_units_not_lines(self):
        products = {1: Product(id=1, name="Spinach", price=Decimal("2.00"), unit="kg")}
        priced = price_order({1: Decimal("4.5")}, products)
        assert len(priced.lines) == 1
        assert priced.total_items == Decimal("4.5")

    def test_unit_price_is_product_price(self):
        product = Product(id=7, name="Broccoli", price=Decimal("2.80"), unit="kg")
        priced = price_order({7: Decimal("1")}, {7: product})
        assert priced.lines[0].unit_price == Decimal("2.80")
        assert priced.lines[0].product is product


class TestCheckLimits:
    def _priced(self, quantity, price="1.00", used="0"):
        product = Product(
            id=1, name="Lettuce", price=Decimal(price), unit="piece", used=Decimal(used)
        )
        return price_order({1: Decimal(quantity)}, {1: product})

    def test_largest_storable_values_pass(self):
        check_limits(self._priced("99999999.99"))

    def test_line_total_overflow(self):
        with pytest.raises(OrderLimitExceeded) as exc_info:
            check_limits(self._priced("99999999.99", price="2.50"))
        assert exc_info.value.field == "total_price"

    def test_merged_quantity_overflow(self):
        with pytest.raises(OrderLimitExceeded) as exc_info:
            check_limits(self._priced("120000000", price="0.50"))
        assert exc_info.value.field == "quantity"

    def test_used_counter_overflow(self):
        with pytest.raises(OrderLimitExceeded) as exc_info:
            check_limits(self._priced("2", used="99999999.00"))
        assert exc_info.value.field == "used"

    def test_order_total_overflow(self):
        products = {
            1: Product(id=1, name="Tomatoes", price=Decimal("2.50"), unit="kg"),
            2: Product(id=2, name="Lettuce", price=Decimal("1.00"), unit="piece"),
        }
        priced = price_order({1: Decimal("30000000"), 2: Decimal("30000000")}, products)

        with pytest.raises(OrderLimitExceeded) as exc_info:
            check_limits(priced)
        assert exc_info.value.field == "total_amount"
        assert exc_info.value.limit == Decimal("99999999.99")
