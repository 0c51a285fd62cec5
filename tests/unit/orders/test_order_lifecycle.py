"""Unit tests for status transitions and their inventory side effects.

Covers:
- Cancellation releases stock; missing products are skipped.
- Re-activation (cancelled -> confirmed) re-reserves stock all-or-nothing.
- Same-status updates change nothing and notify nobody.
- Delivery stamps ``delivered_at`` and settles payment.
- History rows, field edits and admin deletion.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from modules.orders.constants import OrderStatus, PaymentStatus
from modules.orders.dtos import UpdateOrderDTO
from modules.orders.events import OrderCancelled, OrderDeleted, OrderStatusChanged
from modules.orders.exceptions import (
    InvalidStatusError,
    InvalidTransitionError,
    OrderNotCancellable,
    OrderNotFound,
    OrderPermissionDenied,
)
from modules.orders.models import Order, OrderStatusHistory
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.exceptions import InsufficientStock, ProductNotFoundError
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository

pytestmark = pytest.mark.unit


def _stock(product) -> int:
    product.refresh_from_db()
    return product.stock


def _walk(service, order, actor, *statuses):
    for status in statuses:
        order = service.apply_status_transition(order.id, status, actor)
    return order


@pytest.fixture()
def saree(make_product):
    return make_product(stock=5)


@pytest.fixture()
def order(place_order, saree):
    return place_order((saree, 2))


class TestCancellation:
    def test_customer_cancel_returns_stock(
        self, order_service, order, saree, customer_actor
    ):
        assert _stock(saree) == 3
        cancelled = order_service.apply_status_transition(
            order.id, OrderStatus.CANCELLED, customer_actor
        )
        assert cancelled.status == OrderStatus.CANCELLED
        assert _stock(saree) == 5

    def test_customer_cancel_gets_default_reason(
        self, order_service, order, customer_actor
    ):
        cancelled = order_service.apply_status_transition(
            order.id, OrderStatus.CANCELLED, customer_actor
        )
        assert cancelled.cancel_reason == "Cancelled by customer"

    def test_customer_reason_is_kept(self, order_service, order, customer_actor):
        dto = UpdateOrderDTO(
            sent_fields=frozenset({"status", "cancel_reason"}),
            status="cancelled",
            cancel_reason="Ordered the wrong colour",
        )
        cancelled = order_service.update_order(order.id, dto, customer_actor)
        assert cancelled.cancel_reason == "Ordered the wrong colour"
        history = cancelled.status_history.last()
        assert history.notes == "Ordered the wrong colour"

    def test_admin_can_cancel_a_packed_order(
        self, order_service, order, saree, admin_actor
    ):
        _walk(order_service, order, admin_actor, "confirmed", "packed", "cancelled")
        assert _stock(saree) == 5

    def test_admin_can_cancel_a_shipped_order(
        self, order_service, order, saree, admin_actor
    ):
        _walk(order_service, order, admin_actor, "confirmed", "packed", "shipped")
        cancelled = order_service.apply_status_transition(
            order.id, OrderStatus.CANCELLED, admin_actor
        )
        assert cancelled.status == OrderStatus.CANCELLED
        assert _stock(saree) == 5

    def test_vendor_cannot_cancel_a_confirmed_order(
        self, order_service, order, saree, admin_actor, vendor_actor
    ):
        _walk(order_service, order, admin_actor, "confirmed")
        with pytest.raises(InvalidTransitionError, match="from confirmed to cancelled"):
            order_service.apply_status_transition(
                order.id, OrderStatus.CANCELLED, vendor_actor
            )
        assert _stock(saree) == 3

    def test_customer_cannot_cancel_confirmed_order(
        self, order_service, order, saree, admin_actor, customer_actor
    ):
        _walk(order_service, order, admin_actor, "confirmed")
        with pytest.raises(OrderNotCancellable):
            order_service.apply_status_transition(
                order.id, OrderStatus.CANCELLED, customer_actor
            )
        assert Order.objects.get(id=order.id).status == OrderStatus.CONFIRMED
        assert _stock(saree) == 3

    def test_customer_cannot_confirm(self, order_service, order, customer_actor):
        with pytest.raises(OrderPermissionDenied):
            order_service.apply_status_transition(
                order.id, OrderStatus.CONFIRMED, customer_actor
            )
        assert Order.objects.get(id=order.id).status == OrderStatus.PENDING

    def test_deleted_product_is_skipped(
        self, order_service, place_order, saree, make_product, admin_actor
    ):
        gone = make_product(title="Discontinued")
        order = place_order((saree, 1), (gone, 1))
        Product.objects.filter(id=gone.id).delete()

        cancelled = order_service.apply_status_transition(
            order.id, OrderStatus.CANCELLED, admin_actor
        )

        assert cancelled.status == OrderStatus.CANCELLED
        assert _stock(saree) == 5


class TestReactivation:
    def test_cancel_then_confirm_is_net_zero_on_stock(
        self, order_service, order, saree, admin_actor
    ):
        before = _stock(saree)
        _walk(order_service, order, admin_actor, "cancelled", "confirmed")
        assert _stock(saree) == before

    def test_insufficient_stock_leaves_order_cancelled(
        self, order_service, order, saree, admin_actor
    ):
        order_service.apply_status_transition(order.id, "cancelled", admin_actor)
        Product.objects.filter(id=saree.id).update(stock=1)

        with pytest.raises(InsufficientStock, match="Available: 1, Required: 2"):
            order_service.apply_status_transition(order.id, "confirmed", admin_actor)

        assert Order.objects.get(id=order.id).status == OrderStatus.CANCELLED
        assert _stock(saree) == 1

    def test_no_partial_decrement_across_items(
        self, order_service, place_order, make_product, admin_actor
    ):
        plenty = make_product(title="Plenty", stock=10)
        scarce = make_product(title="Scarce", stock=10)
        order = place_order((plenty, 2), (scarce, 2))
        order_service.apply_status_transition(order.id, "cancelled", admin_actor)
        Product.objects.filter(id=scarce.id).update(stock=0)

        with pytest.raises(InsufficientStock):
            order_service.apply_status_transition(order.id, "confirmed", admin_actor)

        assert _stock(plenty) == 10
        assert _stock(scarce) == 0

    def test_missing_product_fails_reactivation(
        self, order_service, order, saree, admin_actor
    ):
        order_service.apply_status_transition(order.id, "cancelled", admin_actor)
        Product.objects.filter(id=saree.id).delete()

        with pytest.raises(ProductNotFoundError):
            order_service.apply_status_transition(order.id, "confirmed", admin_actor)
        assert Order.objects.get(id=order.id).status == OrderStatus.CANCELLED

    def test_vendor_cannot_reactivate(
        self, order_service, order, admin_actor, vendor_actor
    ):
        order_service.apply_status_transition(order.id, "cancelled", admin_actor)
        with pytest.raises(OrderPermissionDenied):
            order_service.apply_status_transition(order.id, "confirmed", vendor_actor)


class TestSameStatusUpdate:
    def test_no_stock_change_history_or_event(self, customer, order, saree, admin_actor):
        bus = MagicMock()
        service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
            event_bus=bus,
        )
        history_before = OrderStatusHistory.objects.filter(order_id=order.id).count()

        service.apply_status_transition(order.id, OrderStatus.PENDING, admin_actor)

        assert _stock(saree) == 3
        assert OrderStatusHistory.objects.filter(order_id=order.id).count() == history_before
        bus.publish.assert_not_called()

    def test_repeat_cancel_by_admin_does_not_release_twice(
        self, order_service, order, saree, admin_actor
    ):
        _walk(order_service, order, admin_actor, "cancelled", "cancelled")
        assert _stock(saree) == 5


class TestForwardPath:
    def test_delivery_settles_payment(self, order_service, order, admin_actor):
        delivered = _walk(
            order_service, order, admin_actor, "confirmed", "packed", "shipped", "delivered"
        )
        assert delivered.status == OrderStatus.DELIVERED
        assert delivered.delivered_at is not None
        assert delivered.payment_status == PaymentStatus.PAID

    def test_history_records_each_step(self, order_service, order, admin_actor, admin_user):
        _walk(order_service, order, admin_actor, "confirmed", "packed")
        rows = list(OrderStatusHistory.objects.filter(order_id=order.id))
        assert [(r.old_status, r.new_status) for r in rows] == [
            (None, "pending"),
            ("pending", "confirmed"),
            ("confirmed", "packed"),
        ]
        assert rows[-1].user_id == admin_user.id

    def test_legacy_approved_is_accepted(self, order_service, order, admin_actor):
        confirmed = order_service.apply_status_transition(order.id, "approved", admin_actor)
        assert confirmed.status == OrderStatus.CONFIRMED

    def test_admin_may_skip_steps(self, order_service, order, saree, admin_actor):
        shipped = order_service.apply_status_transition(order.id, "shipped", admin_actor)
        assert shipped.status == OrderStatus.SHIPPED
        assert _stock(saree) == 3

    def test_vendor_cannot_skip_steps(self, order_service, order, vendor_actor):
        with pytest.raises(InvalidTransitionError, match="from pending to shipped"):
            order_service.apply_status_transition(order.id, "shipped", vendor_actor)
        assert Order.objects.get(id=order.id).status == OrderStatus.PENDING

    def test_admin_moving_cancelled_order_forward_reserves_stock(
        self, order_service, order, saree, admin_actor
    ):
        _walk(order_service, order, admin_actor, "cancelled", "shipped")
        assert _stock(saree) == 3

    def test_unknown_status_is_rejected_before_lookup(self, order_service, admin_actor):
        with pytest.raises(InvalidStatusError, match="Invalid status: refunded"):
            order_service.apply_status_transition(
                "00000000-0000-0000-0000-000000000000", "refunded", admin_actor
            )

    def test_unknown_order(self, order_service, admin_actor):
        with pytest.raises(OrderNotFound):
            order_service.apply_status_transition(
                "00000000-0000-0000-0000-000000000000", "confirmed", admin_actor
            )


class TestEvents:
    def test_cancel_publishes_status_change_then_cancelled(
        self, order, admin_actor
    ):
        bus = MagicMock()
        service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
            event_bus=bus,
        )
        service.apply_status_transition(order.id, "cancelled", admin_actor)

        events = [c.args[0] for c in bus.publish.call_args_list]
        assert [type(e) for e in events] == [OrderStatusChanged, OrderCancelled]
        assert events[0].old_status == "pending"
        assert events[0].new_status == "cancelled"
        assert events[0].user_id == order.user_id


class TestFieldEdits:
    def test_vendor_sets_tracking_without_status(
        self, order_service, order, vendor_actor
    ):
        dto = UpdateOrderDTO.from_payload({"tracking_number": "DTDC123456"})
        updated = order_service.update_order(order.id, dto, vendor_actor)
        assert updated.tracking_number == "DTDC123456"
        assert updated.status == OrderStatus.PENDING

    def test_vendor_cancel_reason_is_forbidden(self, order_service, order, vendor_actor):
        dto = UpdateOrderDTO.from_payload({"cancel_reason": ""})
        with pytest.raises(OrderPermissionDenied):
            order_service.update_order(order.id, dto, vendor_actor)


class TestDeleteOrder:
    @pytest.mark.parametrize(
        "path,restored",
        [
            ([], False),
            (["confirmed"], True),
            (["confirmed", "packed"], False),
            (["confirmed", "packed", "shipped"], True),
            (["confirmed", "packed", "shipped", "delivered"], False),
        ],
    )
    def test_stock_is_returned_only_for_confirmed_or_shipped(
        self, order_service, order, saree, admin_actor, path, restored
    ):
        _walk(order_service, order, admin_actor, *path)

        order_service.delete_order(order.id)

        assert not Order.objects.filter(id=order.id).exists()
        assert _stock(saree) == (5 if restored else 3)

    def test_publishes_deleted_event(self, order, admin_actor):
        bus = MagicMock()
        service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
            event_bus=bus,
        )
        service.delete_order(order.id)
        event = bus.publish.call_args.args[0]
        assert isinstance(event, OrderDeleted)
        assert event.stock_released is False

    def test_unknown_order(self, order_service):
        with pytest.raises(OrderNotFound):
            order_service.delete_order("00000000-0000-0000-0000-000000000000")
