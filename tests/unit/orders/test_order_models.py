"""Unit tests for Order, OrderItem and EmailFailure models."""

from __future__ import annotations

from decimal import Decimal

import pytest
from django.db import IntegrityError, transaction
from django.db.models.deletion import ProtectedError

from modules.orders.constants import TERMINAL_STATES, OrderStatus
from modules.orders.models import EmailFailure, Order, OrderItem

pytestmark = pytest.mark.unit


@pytest.fixture()
def order():
    return Order.objects.create(customer_name="Jane")


class TestOrderDefaults:
    def test_new_order_is_pending(self, order):
        assert order.status == OrderStatus.PENDING
        assert order.total_amount == Decimal("0.00")
        assert order.customer_email == ""

    def test_newest_first(self):
        first = Order.objects.create(customer_name="First")
        second = Order.objects.create(customer_name="Second")
        assert list(Order.objects.all()) == [second, first]

    def test_str(self, order):
        assert str(order) == f"Order #{order.pk} (pending)"


class TestOrderStateMachine:
    @pytest.mark.parametrize(
        "current, target",
        [
            (OrderStatus.PENDING, OrderStatus.CONFIRMED),
            (OrderStatus.PENDING, OrderStatus.CANCELLED),
            (OrderStatus.CONFIRMED, OrderStatus.PREPARING),
            (OrderStatus.CONFIRMED, OrderStatus.CANCELLED),
            (OrderStatus.PREPARING, OrderStatus.READY),
            (OrderStatus.PREPARING, OrderStatus.CANCELLED),
            (OrderStatus.READY, OrderStatus.DELIVERED),
        ],
    )
    def test_allowed_transitions(self, current, target):
        assert Order(status=current).can_transition_to(target)

    @pytest.mark.parametrize(
        "current, target",
        [
            (OrderStatus.PENDING, OrderStatus.DELIVERED),
            (OrderStatus.PENDING, OrderStatus.PENDING),
            (OrderStatus.READY, OrderStatus.CANCELLED),
            (OrderStatus.DELIVERED, OrderStatus.PENDING),
            (OrderStatus.CANCELLED, OrderStatus.CONFIRMED),
        ],
    )
    def test_forbidden_transitions(self, current, target):
        assert not Order(status=current).can_transition_to(target)

    @pytest.mark.parametrize("terminal", sorted(TERMINAL_STATES))
    def test_terminal_states(self, terminal):
        order = Order(status=terminal)
        assert order.is_terminal
        assert not any(order.can_transition_to(s) for s in OrderStatus.values)


class TestOrderItem:
    def test_total_price_computed_on_save(self, order, tomatoes):
        item = OrderItem.objects.create(
            order=order,
            product=tomatoes,
            product_name=tomatoes.name,
            unit=tomatoes.unit,
            price=Decimal("2.50"),
            quantity=Decimal("3"),
        )
        assert item.total_price == Decimal("7.50")

    def test_total_price_ignores_assigned_value(self, order, tomatoes):
        item = OrderItem(
            order=order,
            product=tomatoes,
            product_name=tomatoes.name,
            unit=tomatoes.unit,
            price=Decimal("1.25"),
            quantity=Decimal("0.5"),
        )
        item.total_price = Decimal("999.99")
        item.save()
        item.refresh_from_db()
        assert item.total_price == Decimal("0.63")

    def test_quantity_must_be_positive(self, order, tomatoes):
        with pytest.raises(IntegrityError), transaction.atomic():
            OrderItem.objects.create(
                order=order,
                product=tomatoes,
                product_name=tomatoes.name,
                unit=tomatoes.unit,
                price=tomatoes.price,
                quantity=Decimal("0"),
            )

    def test_items_cascade_with_order(self, order, tomatoes):
        OrderItem.objects.create(
            order=order,
            product=tomatoes,
            product_name=tomatoes.name,
            unit=tomatoes.unit,
            price=tomatoes.price,
            quantity=Decimal("1"),
        )
        EmailFailure.objects.create(order=order, email="", error_message="down")
        order.delete()
        assert OrderItem.objects.count() == 0
        assert EmailFailure.objects.count() == 0

    def test_ordered_product_cannot_be_deleted(self, order, tomatoes):
        OrderItem.objects.create(
            order=order,
            product=tomatoes,
            product_name=tomatoes.name,
            unit=tomatoes.unit,
            price=tomatoes.price,
            quantity=Decimal("1"),
        )
        with pytest.raises(ProtectedError):
            tomatoes.delete()
