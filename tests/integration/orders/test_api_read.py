"""Integration tests for order listing, detail and statistics."""

from __future__ import annotations

from decimal import Decimal

import pytest
from freezegun import freeze_time

from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"


def _order(product, quantity="1", status=OrderStatus.PENDING, **fields):
    quantity = Decimal(quantity)
    order = Order.objects.create(
        customer_name=fields.pop("customer_name", "Jane"),
        status=status,
        total_amount=product.price * quantity,
        total_items=quantity,
        **fields,
    )
    OrderItem.objects.create(
        order=order,
        product=product,
        product_name=product.name,
        unit=product.unit,
        price=product.price,
        quantity=quantity,
    )
    return order


class TestAuthentication:
    @pytest.mark.parametrize("path", [URL, f"{URL}1/", f"{URL}stats/"])
    def test_reads_require_auth(self, api_client, path):
        assert api_client.get(path).status_code in (401, 403)


class TestListOrders:
    def test_paginated_with_item_count(self, auth_client, tomatoes, carrots):
        order = _order(tomatoes)
        OrderItem.objects.create(
            order=order,
            product=carrots,
            product_name=carrots.name,
            unit=carrots.unit,
            price=carrots.price,
            quantity=Decimal("2"),
        )

        response = auth_client.get(URL)

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        assert data["results"][0]["id"] == order.id
        assert data["results"][0]["item_count"] == 2

    def test_newest_first(self, auth_client, tomatoes):
        with freeze_time("2026-01-01"):
            older = _order(tomatoes)
        with freeze_time("2026-02-01"):
            newer = _order(tomatoes)

        results = auth_client.get(URL).json()["results"]
        assert [r["id"] for r in results] == [newer.id, older.id]

    def test_filter_by_status(self, auth_client, tomatoes):
        _order(tomatoes)
        confirmed = _order(tomatoes, status=OrderStatus.CONFIRMED)

        results = auth_client.get(URL, {"status": "confirmed"}).json()["results"]
        assert [r["id"] for r in results] == [confirmed.id]

    def test_filter_by_invalid_status(self, auth_client):
        assert auth_client.get(URL, {"status": "shipped"}).status_code == 400

    def test_filter_by_customer_email(self, auth_client, tomatoes):
        _order(tomatoes, customer_email="bob@example.com")
        jane = _order(tomatoes, customer_email="jane@example.com")

        results = auth_client.get(URL, {"customer_email": "JANE@example.com"}).json()[
            "results"
        ]
        assert [r["id"] for r in results] == [jane.id]

    def test_filter_by_total_range(self, auth_client, tomatoes):
        _order(tomatoes, quantity="1")
        big = _order(tomatoes, quantity="10")

        results = auth_client.get(URL, {"min_total": "20"}).json()["results"]
        assert [r["id"] for r in results] == [big.id]

    def test_filter_by_date_range(self, auth_client, tomatoes):
        with freeze_time("2026-01-10 12:00:00"):
            january = _order(tomatoes)
        with freeze_time("2026-03-10 12:00:00"):
            _order(tomatoes)

        results = auth_client.get(
            URL, {"start_date": "2026-01-01", "end_date": "2026-01-31"}
        ).json()["results"]
        assert [r["id"] for r in results] == [january.id]

    def test_ordering_by_total(self, auth_client, tomatoes):
        small = _order(tomatoes, quantity="1")
        big = _order(tomatoes, quantity="4")

        results = auth_client.get(URL, {"ordering": "total_amount"}).json()["results"]
        assert [r["id"] for r in results] == [small.id, big.id]


class TestRetrieveOrder:
    def test_detail_includes_items(self, auth_client, tomatoes):
        order = _order(tomatoes, quantity="3")

        response = auth_client.get(f"{URL}{order.id}/")

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == order.id
        assert body["total_amount"] == "7.50"
        assert len(body["items"]) == 1
        assert body["items"][0]["product_name"] == "Tomatoes"
        assert body["items"][0]["unit"] == "kg"

    def test_snapshot_survives_price_change(self, auth_client, tomatoes):
        order = _order(tomatoes, quantity="2")
        tomatoes.price = Decimal("9.99")
        tomatoes.name = "Heirloom Tomatoes"
        tomatoes.save()

        item = auth_client.get(f"{URL}{order.id}/").json()["items"][0]
        assert item["price"] == "2.50"
        assert item["product_name"] == "Tomatoes"
        assert item["total_price"] == "5.00"

    @pytest.mark.parametrize("pk", ["999", "abc"])
    def test_missing_order(self, auth_client, pk):
        response = auth_client.get(f"{URL}{pk}/")
        assert response.status_code == 404
        assert response.json() == {"detail": "Order not found."}


class TestOrderStats:
    def test_empty_stats(self, auth_client):
        body = auth_client.get(f"{URL}stats/").json()
        assert body["total_orders"] == 0
        assert body["total_revenue"] is None
        assert body["average_order_value"] is None

    def test_counts_and_revenue(self, auth_client, tomatoes):
        _order(tomatoes, quantity="1")
        _order(tomatoes, quantity="2", status=OrderStatus.CONFIRMED)
        _order(tomatoes, quantity="3", status=OrderStatus.DELIVERED)
        _order(tomatoes, quantity="6", status=OrderStatus.CANCELLED)

        body = auth_client.get(f"{URL}stats/").json()

        assert body["total_orders"] == 4
        assert body["pending_orders"] == 1
        assert body["confirmed_orders"] == 1
        assert body["delivered_orders"] == 1
        assert body["total_revenue"] == "30.00"
        assert body["average_order_value"] == "7.50"
