"""Django ORM implementation of the Order repository.

Reads prefetch items and history so serializing an order costs a fixed
number of queries.  ``get_for_update`` takes the row lock the lifecycle
engine relies on; callers must already be inside ``transaction.atomic``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.db.models import Sum

from modules.orders.models import Order, OrderItem, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


def _with_relations(queryset: "models.QuerySet[Order]") -> "models.QuerySet[Order]":
    return queryset.select_related("user").prefetch_related("items", "status_history")


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    def create(self, data: Dict[str, Any]) -> Order:
        items = data.pop("items")
        # Savepoint, so an order-number collision can be retried by the caller.
        with transaction.atomic():
            order = Order.objects.create(**data)
            OrderItem.objects.bulk_create(
                [
                    OrderItem(
                        order=order,
                        product_id=item["product_id"],
                        vendor_id=item["vendor_id"],
                        title=item["title"],
                        image=item.get("image", ""),
                        quantity=item["quantity"],
                        unit_price=item["unit_price"],
                        subtotal=item["unit_price"] * item["quantity"],
                    )
                    for item in items
                ]
            )
        logger.info("order.persisted", order_id=str(order.id), item_count=len(items))
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Order with eager-loaded relations, ``None`` for unknown or invalid ids."""
        try:
            return _with_relations(Order.objects.filter(id=id)).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        try:
            return (
                Order.objects.select_for_update()
                .prefetch_related("items")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list_for_user(self, user_id: UUID, status: Optional[str] = None) -> "models.QuerySet[Order]":
        return self._list(Order.objects.filter(user_id=user_id), status)

    def list_for_vendor(self, vendor_id: UUID, status: Optional[str] = None) -> "models.QuerySet[Order]":
        order_ids = OrderItem.objects.filter(vendor_id=vendor_id).values("order_id")
        return self._list(Order.objects.filter(id__in=order_ids), status)

    def list_all(self, status: Optional[str] = None) -> "models.QuerySet[Order]":
        return self._list(Order.objects.all(), status)

    def _list(self, queryset: "models.QuerySet[Order]", status: Optional[str]) -> "models.QuerySet[Order]":
        if status:
            queryset = queryset.filter(status=status)
        return _with_relations(queryset).order_by("-created_at", "-id")

    # ------------------------------------------------------------------
    # Save / Delete
    # ------------------------------------------------------------------

    def save(self, entity: Order) -> Order:
        entity.save()
        logger.info("order.saved", order_id=str(entity.id), status=entity.status)
        return entity

    def delete(self, id: str) -> bool:
        """Hard-delete an order; items and history cascade."""
        try:
            deleted, _ = Order.objects.filter(id=id).delete()
        except (ValueError, ValidationError):
            return False
        if deleted:
            logger.info("order.deleted", order_id=str(id))
        return bool(deleted)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def add_history(
        self,
        order_id: UUID,
        new_status: str,
        old_status: Optional[str] = None,
        user_id: Optional[UUID] = None,
        notes: str = "",
    ) -> OrderStatusHistory:
        history = OrderStatusHistory.objects.create(
            order_id=order_id,
            old_status=old_status,
            new_status=new_status,
            user_id=user_id,
            notes=notes,
        )
        logger.info(
            "order.history_added",
            order_id=str(order_id),
            old_status=old_status,
            new_status=new_status,
        )
        return history

    # ------------------------------------------------------------------
    # Counters
    # ------------------------------------------------------------------

    def count(self) -> int:
        return Order.objects.count()

    def order_number_exists(self, order_number: str) -> bool:
        return Order.objects.filter(order_number=order_number).exists()

    def count_by_status(self, status: str) -> int:
        return Order.objects.filter(status=status).count()

    def revenue_for_status(self, status: str) -> Decimal:
        total = Order.objects.filter(status=status).aggregate(total=Sum("total_amount"))
        return total["total"] or Decimal("0.00")
