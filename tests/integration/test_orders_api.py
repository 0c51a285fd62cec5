"""Integration tests for the storefront order endpoints.

Covers:
- POST /api/v1/orders/ (checkout) success and validation errors.
- GET /api/v1/orders/ role scoping, status filter and pagination.
- GET /api/v1/orders/{id}/ visibility.
- PUT /api/v1/orders/{id}/ per-role rules.
- Authentication enforcement.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.models import Order

pytestmark = pytest.mark.integration

ORDERS_URL = "/api/v1/orders/"


def _detail_url(order) -> str:
    return f"{ORDERS_URL}{order.id}/"


def _checkout_payload(shipping_address, *lines):
    return {
        "items": [
            {"product_id": str(product.id), "quantity": qty} for product, qty in lines
        ],
        "shipping_address": shipping_address,
    }


class TestCheckoutEndpoint:
    def test_creates_order(self, customer_client, product, shipping_address):
        response = customer_client.post(
            ORDERS_URL, _checkout_payload(shipping_address, (product, 2)), format="json"
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["payment_method"] == "COD"
        assert Decimal(data["total_amount"]) == Decimal("2000.00")
        assert data["shipping_address"] == shipping_address
        assert data["items"][0]["title"] == product.title
        assert data["user_email"] == "ananya@example.com"
        assert data["status_history"][0]["new_status"] == "pending"
        product.refresh_from_db()
        assert product.stock == 8

    def test_same_product_twice(self, customer_client, make_product, shipping_address):
        saree = make_product(stock=5)
        response = customer_client.post(
            ORDERS_URL,
            _checkout_payload(shipping_address, (saree, 2), (saree, 2)),
            format="json",
        )

        assert response.status_code == 201
        assert len(response.json()["items"]) == 2
        saree.refresh_from_db()
        assert saree.stock == 1

    def test_missing_items(self, customer_client, shipping_address):
        response = customer_client.post(
            ORDERS_URL, {"shipping_address": shipping_address}, format="json"
        )
        assert response.status_code == 400
        assert "Order items are required" in response.json()["error"]

    def test_empty_items(self, customer_client, shipping_address):
        response = customer_client.post(
            ORDERS_URL, {"items": [], "shipping_address": shipping_address}, format="json"
        )
        assert response.status_code == 400
        assert "Order items are required" in response.json()["error"]

    def test_missing_shipping_address(self, customer_client, product):
        response = customer_client.post(
            ORDERS_URL,
            {"items": [{"product_id": str(product.id), "quantity": 1}]},
            format="json",
        )
        assert response.status_code == 400
        assert "Shipping address is required" in response.json()["error"]

    def test_insufficient_stock(self, customer_client, make_product, shipping_address):
        scarce = make_product(title="Last One", stock=1)
        response = customer_client.post(
            ORDERS_URL, _checkout_payload(shipping_address, (scarce, 3)), format="json"
        )
        assert response.status_code == 400
        assert response.json() == {
            "error": "Insufficient stock for Last One. Available: 1, Required: 3"
        }

    def test_inactive_product(self, customer_client, make_product, shipping_address):
        hidden = make_product(is_active=False)
        response = customer_client.post(
            ORDERS_URL, _checkout_payload(shipping_address, (hidden, 1)), format="json"
        )
        assert response.status_code == 404
        assert "not found or inactive" in response.json()["error"]

    def test_requires_authentication(self, api_client, product, shipping_address):
        response = api_client.post(
            ORDERS_URL, _checkout_payload(shipping_address, (product, 1)), format="json"
        )
        assert response.status_code == 401
        assert Order.objects.count() == 0


class TestOrderList:
    def test_customer_sees_only_own_orders(
        self, customer_client, place_order, product, other_customer
    ):
        mine = place_order((product, 1))
        place_order((product, 1), user=other_customer)

        response = customer_client.get(ORDERS_URL)

        assert response.status_code == 200
        data = response.json()
        assert [o["id"] for o in data["results"]] == [str(mine.id)]
        assert data["pagination"]["total"] == 1
        assert "status_history" not in data["results"][0]

    def test_vendor_sees_orders_with_their_items(
        self, other_vendor_client, place_order, make_product, other_vendor
    ):
        theirs = make_product(title="Loom Saree", vendor=other_vendor)
        place_order((make_product(title="Not Theirs"), 1))
        expected = place_order((theirs, 1))

        response = other_vendor_client.get(ORDERS_URL)

        assert [o["id"] for o in response.json()["results"]] == [str(expected.id)]

    def test_admin_sees_everything_and_can_filter_by_vendor(
        self, admin_client, place_order, make_product, other_vendor
    ):
        theirs = make_product(title="Loom Saree", vendor=other_vendor)
        place_order((make_product(title="Other"), 1))
        expected = place_order((theirs, 1))

        assert admin_client.get(ORDERS_URL).json()["pagination"]["total"] == 2
        response = admin_client.get(ORDERS_URL, {"vendor": str(other_vendor.id)})
        assert [o["id"] for o in response.json()["results"]] == [str(expected.id)]

    def test_vendor_param_is_ignored_for_customers(
        self, customer_client, place_order, product, other_vendor
    ):
        place_order((product, 1))
        response = customer_client.get(ORDERS_URL, {"vendor": str(other_vendor.id)})
        assert response.json()["pagination"]["total"] == 1

    def test_status_filter(
        self, customer_client, place_order, product, order_service, admin_actor
    ):
        place_order((product, 1))
        confirmed = place_order((product, 1))
        order_service.apply_status_transition(confirmed.id, "confirmed", admin_actor)

        response = customer_client.get(ORDERS_URL, {"status": "confirmed"})

        assert [o["id"] for o in response.json()["results"]] == [str(confirmed.id)]

    def test_pagination(self, customer_client, place_order, product, settings):
        settings.ORDER_PAGE_SIZE = 2
        for _ in range(3):
            place_order((product, 1))

        response = customer_client.get(ORDERS_URL, {"page": 2})

        data = response.json()
        assert len(data["results"]) == 1
        assert data["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}

    def test_requires_authentication(self, api_client):
        assert api_client.get(ORDERS_URL).status_code == 401


class TestOrderDetail:
    def test_owner_can_read(self, customer_client, place_order, product):
        order = place_order((product, 1))
        response = customer_client.get(_detail_url(order))
        assert response.status_code == 200
        assert response.json()["order_number"] == order.order_number

    def test_other_customer_gets_404(self, other_customer_client, place_order, product):
        order = place_order((product, 1))
        response = other_customer_client.get(_detail_url(order))
        assert response.status_code == 404
        assert response.json() == {"error": "Order not found"}

    def test_vendor_of_an_item_can_read(self, vendor_client, place_order, product):
        order = place_order((product, 1))
        assert vendor_client.get(_detail_url(order)).status_code == 200

    def test_unknown_id(self, customer_client):
        response = customer_client.get(f"{ORDERS_URL}not-a-uuid/")
        assert response.status_code == 404


class TestOrderUpdate:
    def test_customer_cancels_pending_order(self, customer_client, place_order, product):
        order = place_order((product, 3))

        response = customer_client.put(
            _detail_url(order), {"status": "cancelled"}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert response.json()["cancel_reason"] == "Cancelled by customer"
        product.refresh_from_db()
        assert product.stock == 10

    def test_customer_cannot_confirm(self, customer_client, place_order, product):
        order = place_order((product, 1))
        response = customer_client.put(
            _detail_url(order), {"status": "confirmed"}, format="json"
        )
        assert response.status_code == 403
        assert response.json() == {"error": "Customers can only cancel orders"}

    def test_customer_cannot_cancel_confirmed_order(
        self, customer_client, place_order, product, order_service, admin_actor
    ):
        order = place_order((product, 1))
        order_service.apply_status_transition(order.id, "confirmed", admin_actor)

        response = customer_client.put(
            _detail_url(order), {"status": "cancelled"}, format="json"
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Can only cancel pending orders"}

    def test_customer_cannot_touch_other_orders(
        self, other_customer_client, place_order, product
    ):
        order = place_order((product, 1))
        response = other_customer_client.put(
            _detail_url(order), {"status": "cancelled"}, format="json"
        )
        assert response.status_code == 403
        assert Order.objects.get(id=order.id).status == OrderStatus.PENDING

    def test_vendor_ships_with_tracking_number(
        self, vendor_client, place_order, product, order_service, admin_actor
    ):
        order = place_order((product, 1))
        for status in ["confirmed", "packed"]:
            order_service.apply_status_transition(order.id, status, admin_actor)

        response = vendor_client.put(
            _detail_url(order),
            {"status": "shipped", "tracking_number": "BLUEDART-42"},
            format="json",
        )

        assert response.status_code == 200
        assert response.json()["status"] == "shipped"
        assert response.json()["tracking_number"] == "BLUEDART-42"

    def test_vendor_disallowed_field(self, vendor_client, place_order, product):
        order = place_order((product, 1))
        response = vendor_client.put(
            _detail_url(order), {"cancel_reason": "no"}, format="json"
        )
        assert response.status_code == 403
        assert response.json() == {"error": "Invalid update fields for vendor"}

    def test_vendor_without_items_is_unauthorized(
        self, other_vendor_client, place_order, product
    ):
        order = place_order((product, 1))
        response = other_vendor_client.put(
            _detail_url(order), {"status": "confirmed"}, format="json"
        )
        assert response.status_code == 403
        assert response.json() == {"error": "Unauthorized"}

    def test_invalid_status(self, admin_client, place_order, product):
        order = place_order((product, 1))
        response = admin_client.put(_detail_url(order), {"status": "lost"}, format="json")
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid status: lost"}

    def test_invalid_transition(self, vendor_client, place_order, product):
        order = place_order((product, 1))
        response = vendor_client.put(
            _detail_url(order), {"status": "delivered"}, format="json"
        )
        assert response.status_code == 400
        assert response.json() == {
            "error": "Cannot change order status from pending to delivered"
        }

    def test_unknown_order(self, admin_client):
        response = admin_client.put(
            f"{ORDERS_URL}00000000-0000-0000-0000-000000000000/",
            {"status": "confirmed"},
            format="json",
        )
        assert response.status_code == 404

    def test_array_body_is_rejected(self, admin_client, place_order, product):
        order = place_order((product, 1))
        response = admin_client.put(
            _detail_url(order), [{"status": "confirmed"}], format="json"
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body"}
        assert Order.objects.get(id=order.id).status == OrderStatus.PENDING

    def test_patch_is_not_allowed(self, customer_client, place_order, product):
        order = place_order((product, 1))
        response = customer_client.patch(
            _detail_url(order), {"status": "cancelled"}, format="json"
        )
        assert response.status_code == 405
