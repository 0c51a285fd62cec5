"""Order service layer (use cases).

Orchestrates checkout, the status state machine and its inventory side
effects, admin deletion, and the role-scoped order queries.  Every write
is one ``transaction.atomic`` unit: rows are locked up front (products in
primary-key order) and all checks run before the first mutation, so a
failure never leaves stock partially adjusted.

Business rules enforced:
- Checkout validates every product (exists, active, enough stock) and
  prices lines at the effective price; stock is decremented conditionally.
- Status changes follow the role policies in ``modules.orders.permissions``;
  customers and vendors are also bound by ``VALID_TRANSITIONS``, admins are not.
- Cancelling returns every line item to stock; moving a cancelled order to
  any other status re-reserves it all-or-nothing.
- A same-status update touches neither stock nor notifications nor history.
- Deleting a confirmed or shipped order returns its items to stock first.
"""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from typing import TYPE_CHECKING, Dict, Optional
from uuid import UUID

import structlog
from django.db import IntegrityError, transaction
from django.utils import timezone

from modules.orders.constants import (
    DEFAULT_CUSTOMER_CANCEL_REASON,
    ORDER_NUMBER_MAX_RETRIES,
    STOCK_RESTORING_DELETE_STATUSES,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    normalize_status,
)
from modules.orders.dtos import UpdateOrderDTO
from modules.orders.events import (
    OrderCancelled,
    OrderCreated,
    OrderDeleted,
    OrderStatusChanged,
)
from modules.orders.exceptions import (
    DuplicateOrderNumber,
    InvalidStatusError,
    InvalidTransitionError,
    OrderNotFound,
)
from modules.orders.models import Order
from modules.orders.permissions import authorize_update, in_scope
from modules.products.exceptions import InsufficientStock, ProductNotFoundError
from shared.infrastructure.bus import event_bus as default_event_bus

if TYPE_CHECKING:
    from django.db import models

    from modules.accounts.dtos import ActorDTO
    from modules.orders.dtos import CreateOrderDTO, OrderListFiltersDTO
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories (and optionally the event bus) via constructor
    injection.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        event_bus: Optional[IEventBus] = None,
    ) -> None:
        self._order_repo = order_repository
        self._product_repo = product_repository
        self._bus = event_bus or default_event_bus

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Create a ``pending`` COD order and reserve its stock.

        Raises:
            ProductNotFoundError: a product is missing or inactive.
            InsufficientStock: a product has fewer units than requested.
            DuplicateOrderNumber: no free order number after the retries.
        """
        log = logger.bind(user_id=str(dto.user_id), item_count=len(dto.items))
        log.info("order.creation_started")

        products = self._product_repo.lock_many(item.product_id for item in dto.items)
        # Units left per product as earlier lines of this order reserve them.
        available: Dict[UUID, int] = {pid: p.stock for pid, p in products.items()}

        line_items = []
        total = Decimal("0.00")
        for item in dto.items:
            product = products.get(item.product_id)
            if product is None or not product.is_active:
                raise ProductNotFoundError(
                    f"Product {item.product_id} not found or inactive"
                )
            if available[product.id] < item.quantity:
                raise InsufficientStock(product.title, available[product.id], item.quantity)

            unit_price = product.effective_price
            total += unit_price * item.quantity

            if not self._product_repo.decrement_stock(product.id, item.quantity):
                raise InsufficientStock(product.title, available[product.id], item.quantity)
            available[product.id] -= item.quantity
            log.info(
                "order.stock_reserved",
                product_id=str(product.id),
                quantity=item.quantity,
                remaining=available[product.id],
            )

            line_items.append(
                {
                    "product_id": product.id,
                    "vendor_id": product.vendor_id,
                    "title": product.title,
                    "image": product.primary_image,
                    "quantity": item.quantity,
                    "unit_price": unit_price,
                }
            )

        address = dto.shipping_address
        order = self._create_with_order_number(
            {
                "user_id": dto.user_id,
                "items": line_items,
                "total_amount": total,
                "status": OrderStatus.PENDING,
                "payment_method": PaymentMethod.COD,
                "payment_status": PaymentStatus.PENDING,
                "shipping_name": address.name,
                "shipping_phone": address.phone,
                "shipping_address": address.address,
                "shipping_city": address.city,
                "shipping_state": address.state,
                "shipping_pincode": address.pincode,
                "notes": dto.notes,
            },
            log,
        )

        self._order_repo.add_history(
            order_id=order.id,
            new_status=OrderStatus.PENDING,
            user_id=dto.user_id,
            notes="Order created",
        )

        log.info(
            "order.created",
            order_id=str(order.id),
            order_number=order.order_number,
            total_amount=str(total),
        )
        self._bus.publish(
            OrderCreated(
                aggregate_id=order.id,
                user_id=dto.user_id,
                order_number=order.order_number,
                total_amount=total,
            )
        )
        return self._order_repo.get_by_id(str(order.id)) or order

    def _create_with_order_number(self, data: dict, log) -> Order:
        sequence = self._order_repo.count() + 1
        for attempt in range(ORDER_NUMBER_MAX_RETRIES):
            candidate = Order.generate_order_number(sequence + attempt)
            if self._order_repo.order_number_exists(candidate):
                log.warning("order.number_collision", order_number=candidate)
                continue
            try:
                return self._order_repo.create({**data, "order_number": candidate})
            except IntegrityError:
                log.warning(
                    "order.number_collision",
                    order_number=candidate,
                    attempt=attempt + 1,
                )
        raise DuplicateOrderNumber(
            f"Failed to generate unique order_number after "
            f"{ORDER_NUMBER_MAX_RETRIES} attempts"
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def apply_status_transition(
        self,
        order_id: UUID | str,
        new_status: str,
        actor: ActorDTO,
        notes: str = "",
    ) -> Order:
        """Move an order to ``new_status`` on behalf of ``actor``.

        ``notes`` is recorded on the history row only.
        """
        dto = UpdateOrderDTO(sent_fields=frozenset({"status"}), status=new_status)
        return self.update_order(order_id, dto, actor, history_notes=notes)

    @transaction.atomic
    def update_order(
        self,
        order_id: UUID | str,
        dto: UpdateOrderDTO,
        actor: ActorDTO,
        history_notes: str = "",
    ) -> Order:
        """Apply a status change and/or field edits.

        Checks run in this order, all before any mutation: status
        vocabulary, order existence (row locked), role policy, transition
        table.

        Raises:
            InvalidStatusError: unknown status value.
            OrderNotFound: the order does not exist.
            OrderPermissionDenied: the role may not make this change.
            OrderNotCancellable: a customer cancelling a non-pending order.
            InvalidTransitionError: the state machine forbids the move.
            ProductNotFoundError / InsufficientStock: re-activation cannot
                re-reserve stock.
        """
        requested: Optional[str] = None
        if dto.status is not None:
            requested = normalize_status(dto.status)
            if requested is None:
                raise InvalidStatusError(f"Invalid status: {dto.status}")

        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound()

        policy = authorize_update(order, actor, dto.sent_fields, requested)

        previous = order.status
        log = logger.bind(
            order_id=str(order.id),
            actor_id=str(actor.user_id),
            role=str(actor.role),
            current_status=previous,
            new_status=requested,
        )

        changed = requested is not None and requested != previous
        if (
            changed
            and policy.follows_state_machine
            and not order.can_transition_to(requested)
        ):
            log.warning("order.invalid_transition")
            raise InvalidTransitionError(previous, requested)

        if changed and requested == OrderStatus.CANCELLED:
            self._release_stock(order, log)
        elif changed and previous == OrderStatus.CANCELLED:
            self._reserve_stock_again(order, log)

        if dto.tracking_number is not None:
            order.tracking_number = dto.tracking_number
        if dto.notes is not None:
            order.notes = dto.notes
        if dto.cancel_reason is not None:
            order.cancel_reason = dto.cancel_reason

        if changed:
            order.status = requested
            if requested == OrderStatus.CANCELLED and actor.is_customer:
                order.cancel_reason = order.cancel_reason or DEFAULT_CUSTOMER_CANCEL_REASON
            if requested == OrderStatus.DELIVERED:
                order.delivered_at = timezone.now()
                order.payment_status = PaymentStatus.PAID

        self._order_repo.save(order)

        if changed:
            if not history_notes and requested == OrderStatus.CANCELLED:
                history_notes = order.cancel_reason
            self._order_repo.add_history(
                order_id=order.id,
                new_status=requested,
                old_status=previous,
                user_id=actor.user_id,
                notes=history_notes,
            )
            log.info("order.status_updated")
            self._publish_status_change(order, previous, requested)
        else:
            log.info("order.updated", fields=sorted(dto.sent_fields - {"status"}))

        return self._order_repo.get_by_id(str(order.id)) or order

    def _release_stock(self, order: Order, log) -> None:
        """Return every line item to stock; missing products are skipped."""
        for item in sorted(order.items.all(), key=lambda i: str(i.product_id)):
            if self._product_repo.increment_stock(item.product_id, item.quantity):
                log.info(
                    "product.stock_released",
                    product_id=str(item.product_id),
                    quantity=item.quantity,
                )
            else:
                log.warning(
                    "order.stock_release_skipped",
                    product_id=str(item.product_id),
                    quantity=item.quantity,
                    reason="product_missing",
                )

    def _reserve_stock_again(self, order: Order, log) -> None:
        """Re-reserve stock for a cancelled order, all or nothing."""
        items = list(order.items.all())
        required: Dict[UUID, int] = defaultdict(int)
        for item in items:
            required[item.product_id] += item.quantity

        products = self._product_repo.lock_many(required.keys())

        for item in items:
            product = products.get(item.product_id)
            if product is None:
                log.warning("order.reactivation_failed", product_id=str(item.product_id))
                raise ProductNotFoundError(f"Product {item.title} not found")
            if product.stock < required[item.product_id]:
                log.warning(
                    "order.reactivation_failed",
                    product_id=str(item.product_id),
                    available=product.stock,
                    required=required[item.product_id],
                )
                raise InsufficientStock(
                    item.title, product.stock, required[item.product_id]
                )

        for product_id in sorted(required, key=str):
            product = products[product_id]
            if not self._product_repo.decrement_stock(product_id, required[product_id]):
                raise InsufficientStock(product.title, product.stock, required[product_id])
            log.info(
                "order.stock_reserved",
                product_id=str(product_id),
                quantity=required[product_id],
            )

    def _publish_status_change(self, order: Order, previous: str, new: str) -> None:
        self._bus.publish(
            OrderStatusChanged(
                aggregate_id=order.id,
                user_id=order.user_id,
                order_number=order.order_number,
                old_status=previous,
                new_status=new,
            )
        )
        if new == OrderStatus.CANCELLED:
            self._bus.publish(
                OrderCancelled(
                    aggregate_id=order.id,
                    user_id=order.user_id,
                    order_number=order.order_number,
                    reason=order.cancel_reason,
                )
            )

    # ------------------------------------------------------------------
    # Deletion (admin)
    # ------------------------------------------------------------------

    @transaction.atomic
    def delete_order(self, order_id: UUID | str) -> None:
        """Hard-delete an order, returning stock first when it was committed.

        No notification is sent.

        Raises:
            OrderNotFound: the order does not exist.
        """
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound()

        log = logger.bind(order_id=str(order.id), status=order.status)
        release = order.status in STOCK_RESTORING_DELETE_STATUSES
        if release:
            self._release_stock(order, log)

        order_number = order.order_number
        self._order_repo.delete(str(order.id))
        log.info("order.deleted", stock_released=release)

        self._bus.publish(
            OrderDeleted(
                aggregate_id=order.id,
                order_number=order_number,
                stock_released=release,
            )
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: UUID | str, actor: ActorDTO) -> Order:
        """Retrieve one order visible to ``actor``.

        Raises:
            OrderNotFound: missing, or outside the actor's scope.
        """
        order = self._order_repo.get_by_id(str(order_id))
        if not order or not in_scope(order, actor):
            raise OrderNotFound()
        return order

    def list_orders(
        self, actor: ActorDTO, filters: OrderListFiltersDTO
    ) -> "models.QuerySet[Order]":
        """Orders visible to ``actor``, newest first.

        Customers see their own orders, vendors the orders containing their
        items, admins everything (optionally narrowed to one vendor).
        """
        status = None
        if filters.status:
            status = normalize_status(filters.status) or filters.status

        if actor.is_customer:
            return self._order_repo.list_for_user(actor.user_id, status)
        if actor.is_vendor:
            return self._order_repo.list_for_vendor(actor.user_id, status)
        if filters.vendor_id is not None:
            return self._order_repo.list_for_vendor(filters.vendor_id, status)
        return self._order_repo.list_all(status)
