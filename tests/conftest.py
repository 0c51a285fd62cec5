from __future__ import annotations

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from modules.accounts.dtos import ActorDTO
from modules.accounts.models import UserRole
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO, ShippingAddressDTO
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.constants import Fabric, Occasion, Pattern
from modules.products.models import Category, Product
from modules.products.repositories.django_repository import ProductDjangoRepository

User = get_user_model()

SHIPPING_ADDRESS = {
    "name": "Ananya Iyer",
    "phone": "9876543210",
    "address": "12 MG Road",
    "city": "Bengaluru",
    "state": "Karnataka",
    "pincode": "560001",
}


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


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


@pytest.fixture()
def customer():
    return User.objects.create_user(
        "ananya@example.com", password="testpass123", name="Ananya Iyer"
    )


@pytest.fixture()
def other_customer():
    return User.objects.create_user(
        "priya@example.com", password="testpass123", name="Priya Sharma"
    )


@pytest.fixture()
def vendor():
    return User.objects.create_user(
        "weaver@example.com",
        password="testpass123",
        name="Meera",
        business_name="Meera Handlooms",
        role=UserRole.VENDOR,
    )


@pytest.fixture()
def other_vendor():
    return User.objects.create_user(
        "loom@example.com",
        password="testpass123",
        name="Ravi",
        role=UserRole.VENDOR,
    )


@pytest.fixture()
def admin_user():
    return User.objects.create_superuser(
        "admin@example.com", password="testpass123", name="Store Admin"
    )


def _client_for(user) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def customer_client(customer):
    return _client_for(customer)


@pytest.fixture()
def other_customer_client(other_customer):
    return _client_for(other_customer)


@pytest.fixture()
def vendor_client(vendor):
    return _client_for(vendor)


@pytest.fixture()
def other_vendor_client(other_vendor):
    return _client_for(other_vendor)


@pytest.fixture()
def admin_client(admin_user):
    return _client_for(admin_user)


@pytest.fixture()
def customer_actor(customer):
    return ActorDTO.from_user(customer)


@pytest.fixture()
def vendor_actor(vendor):
    return ActorDTO.from_user(vendor)


@pytest.fixture()
def admin_actor(admin_user):
    return ActorDTO.from_user(admin_user)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@pytest.fixture()
def silk_category():
    return Category.objects.create(name="Silk Sarees", description="Pure silk")


@pytest.fixture()
def make_product(vendor):
    """Factory for products; defaults to an active silk saree with 10 in stock."""

    def _make(**overrides) -> Product:
        categories = overrides.pop("categories", [])
        data = {
            "vendor": vendor,
            "title": "Kanjivaram Temple Border",
            "description": "Handwoven silk with zari border",
            "price": Decimal("1000.00"),
            "stock": 10,
            "fabric": Fabric.SILK,
            "color": "Maroon",
            "pattern": Pattern.WOVEN,
            "occasion": Occasion.WEDDING,
            "images": ["https://cdn.example.com/kanjivaram.jpg"],
        }
        data.update(overrides)
        product = Product.objects.create(**data)
        if categories:
            product.categories.set(categories)
        return product

    return _make


@pytest.fixture()
def product(make_product):
    return make_product()


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


@pytest.fixture()
def shipping_address():
    return dict(SHIPPING_ADDRESS)


@pytest.fixture()
def order_service():
    return OrderService(
        order_repository=OrderDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


@pytest.fixture()
def place_order(order_service, customer):
    """Checks out ``(product, quantity)`` pairs for ``user`` (default: customer)."""

    def _place(*lines, user=None):
        buyer = user or customer
        dto = CreateOrderDTO(
            user_id=buyer.id,
            items=[
                CreateOrderItemDTO(product_id=p.id, quantity=qty) for p, qty in lines
            ],
            shipping_address=ShippingAddressDTO(**SHIPPING_ADDRESS),
        )
        return order_service.create_order(dto)

    return _place


@pytest.fixture()
def delivered_order(place_order, order_service, admin_actor):
    """Checks out ``(product, quantity)`` pairs and walks the order to delivered."""

    def _deliver(*lines, user=None):
        order = place_order(*lines, user=user)
        for status in ["confirmed", "packed", "shipped", "delivered"]:
            order = order_service.apply_status_transition(order.id, status, admin_actor)
        return order

    return _deliver
