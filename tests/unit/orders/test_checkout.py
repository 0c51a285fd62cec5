"""Unit tests for checkout (OrderService.create_order).

Covers:
- Totals, line-item snapshots and stock reservation.
- Effective (sale) pricing.
- Missing, inactive and under-stocked products abort the whole checkout.
- Order number allocation and collision retries.
- The initial history row and the OrderCreated event.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest
from django.db import IntegrityError

from modules.orders.constants import OrderStatus, PaymentMethod, PaymentStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO, ShippingAddressDTO
from modules.orders.events import OrderCreated
from modules.orders.exceptions import DuplicateOrderNumber
from modules.orders.models import Order, OrderStatusHistory
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.exceptions import InsufficientStock, ProductNotFoundError
from modules.products.repositories.django_repository import ProductDjangoRepository

pytestmark = pytest.mark.unit


class TestCreateOrder:
    def test_total_is_sum_of_line_subtotals(self, place_order, make_product):
        saree = make_product(stock=5, price=Decimal("100.00"))
        dupatta = make_product(title="Chiffon Dupatta", price=Decimal("250.00"))

        order = place_order((saree, 2), (dupatta, 1))

        assert order.total_amount == Decimal("450.00")
        assert sum(item.subtotal for item in order.items.all()) == order.total_amount

    def test_reserves_stock(self, place_order, make_product):
        saree = make_product(stock=5)
        place_order((saree, 2))
        saree.refresh_from_db()
        assert saree.stock == 3

    def test_new_order_is_pending_cod(self, place_order, product):
        order = place_order((product, 1))
        assert order.status == OrderStatus.PENDING
        assert order.payment_method == PaymentMethod.COD
        assert order.payment_status == PaymentStatus.PENDING

    def test_line_item_is_a_snapshot_of_the_product(self, place_order, product, vendor):
        order = place_order((product, 2))
        item = order.items.get()
        assert item.product_id == product.id
        assert item.vendor_id == vendor.id
        assert item.title == product.title
        assert item.image == product.images[0]
        assert item.unit_price == product.price
        assert item.subtotal == product.price * 2

    def test_snapshot_survives_price_changes(self, place_order, product):
        order = place_order((product, 1))
        product.price = Decimal("5000.00")
        product.save()
        order.refresh_from_db()
        assert order.items.get().unit_price == Decimal("1000.00")
        assert order.total_amount == Decimal("1000.00")

    def test_sale_price_is_charged_when_set(self, place_order, make_product):
        saree = make_product(price=Decimal("1000.00"), sale_price=Decimal("799.00"))
        order = place_order((saree, 2))
        assert order.total_amount == Decimal("1598.00")

    def test_shipping_address_is_copied(self, place_order, product, shipping_address):
        order = place_order((product, 1))
        assert order.shipping_address_snapshot == shipping_address

    def test_records_initial_history_row(self, place_order, product, customer):
        order = place_order((product, 1))
        history = OrderStatusHistory.objects.get(order=order)
        assert history.old_status is None
        assert history.new_status == OrderStatus.PENDING
        assert history.user_id == customer.id

    def test_order_number_uses_count_plus_one(self, place_order, product):
        place_order((product, 1))
        second = place_order((product, 1))
        assert second.order_number.startswith("ORD")
        assert second.order_number.endswith("0002")

    def test_publishes_order_created(self, customer, product, shipping_address):
        bus = MagicMock()
        service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
            event_bus=bus,
        )
        order = service.create_order(
            CreateOrderDTO(
                user_id=customer.id,
                items=[CreateOrderItemDTO(product_id=product.id, quantity=1)],
                shipping_address=ShippingAddressDTO(**shipping_address),
            )
        )
        event = bus.publish.call_args.args[0]
        assert isinstance(event, OrderCreated)
        assert event.aggregate_id == order.id
        assert event.order_number == order.order_number


class TestCreateOrderFailures:
    def test_missing_product(self, place_order, product):
        ghost = MagicMock(id=uuid4())
        with pytest.raises(ProductNotFoundError, match="not found or inactive"):
            place_order((ghost, 1))
        assert Order.objects.count() == 0

    def test_inactive_product(self, place_order, make_product):
        hidden = make_product(is_active=False)
        with pytest.raises(ProductNotFoundError):
            place_order((hidden, 1))

    def test_insufficient_stock_message(self, place_order, make_product):
        saree = make_product(title="Banarasi Zari", stock=1)
        with pytest.raises(
            InsufficientStock,
            match="Insufficient stock for Banarasi Zari. Available: 1, Required: 2",
        ):
            place_order((saree, 2))

    def test_failure_on_later_item_rolls_back_earlier_reservations(
        self, place_order, make_product
    ):
        first = make_product(title="First", stock=5)
        second = make_product(title="Second", stock=1)

        with pytest.raises(InsufficientStock):
            place_order((first, 2), (second, 3))

        first.refresh_from_db()
        second.refresh_from_db()
        assert first.stock == 5
        assert second.stock == 1
        assert Order.objects.count() == 0

    def test_repeated_product_lines_share_the_stock(self, place_order, make_product):
        saree = make_product(stock=5, price=Decimal("100.00"))

        order = place_order((saree, 2), (saree, 2))

        assert order.items.count() == 2
        assert order.total_amount == Decimal("400.00")
        saree.refresh_from_db()
        assert saree.stock == 1

    def test_repeated_lines_cannot_oversell(self, place_order, make_product):
        saree = make_product(title="Paithani", stock=5)

        with pytest.raises(
            InsufficientStock,
            match="Insufficient stock for Paithani. Available: 2, Required: 3",
        ):
            place_order((saree, 3), (saree, 3))

        saree.refresh_from_db()
        assert saree.stock == 5
        assert Order.objects.count() == 0

    def test_exact_stock_can_be_bought(self, place_order, make_product):
        saree = make_product(stock=2)
        place_order((saree, 2))
        saree.refresh_from_db()
        assert saree.stock == 0


class TestOrderNumberRetries:
    def test_collision_moves_to_next_sequence(self, order_service, place_order, product):
        taken = Order.generate_order_number(1)
        with patch.object(
            Order, "generate_order_number", side_effect=[taken, "ORD-FRESH"]
        ):
            with patch.object(
                OrderDjangoRepository,
                "order_number_exists",
                side_effect=lambda number: number == taken,
            ):
                order = place_order((product, 1))
        assert order.order_number == "ORD-FRESH"

    def test_gives_up_after_five_attempts(self, place_order, product):
        with patch.object(
            OrderDjangoRepository, "create", side_effect=IntegrityError("duplicate")
        ):
            with pytest.raises(DuplicateOrderNumber):
                place_order((product, 1))
        product.refresh_from_db()
        assert product.stock == 10
