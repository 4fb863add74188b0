from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from modules.products.models import Product, ProductType


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def auth_client():
    """APIClient with a force-authenticated Django user."""
    client = APIClient()
    user = get_user_model().objects.create_user(
        username="staffuser", password="testpass123"
    )
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def tomatoes():
    return Product.objects.create(
        name="Tomatoes",
        price=Decimal("2.50"),
        unit="kg",
        stock=Decimal("100"),
        category="Vegetables",
        type=ProductType.KITCHEN,
    )


@pytest.fixture()
def carrots():
    return Product.objects.create(
        name="Carrots",
        price=Decimal("1.80"),
        unit="kg",
        stock=Decimal("80"),
        category="Vegetables",
        type=ProductType.KITCHEN,
    )


@pytest.fixture()
def lettuce():
    return Product.objects.create(
        name="Lettuce",
        price=Decimal("1.00"),
        unit="piece",
        stock=Decimal("50"),
        category="Leafy Greens",
    )


@pytest.fixture()
def unavailable_product():
    return Product.objects.create(
        name="Asparagus",
        price=Decimal("6.00"),
        unit="kg",
        stock=Decimal("0"),
        category="Vegetables",
        is_available=False,
    )
