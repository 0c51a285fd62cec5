"""Order, OrderItem and OrderStatusHistory models.

Rules kept at this layer:
- ``order_number`` is unique: ``ORD`` + epoch milliseconds + a zero-padded
  sequence (the order count + 1).  The service retries on collision.
- Line items are frozen snapshots of the product at checkout (title,
  image, unit price, vendor).  ``subtotal`` is ``unit_price * quantity``.
- ``product_id`` on a line item survives deletion of the product (no FK
  constraint), so a missing product is an observable state.
- The shipping address is a snapshot copied onto the order.
"""

from __future__ import annotations

import time
from decimal import Decimal
from typing import Any

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import (
    ORDER_NUMBER_PREFIX,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)


class Order(BaseModel):
    """Order aggregate root.

    ``id`` (UUIDv7) is used for every API look-up; ``order_number`` is the
    human-facing identifier printed on invoices and notifications.
    """

    order_number = models.CharField(max_length=32, unique=True, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
    )
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    payment_method = models.CharField(
        max_length=10,
        choices=PaymentMethod.choices,
        default=PaymentMethod.COD,
    )
    payment_status = models.CharField(
        max_length=10,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )

    # Shipping address snapshot
    shipping_name = models.CharField(max_length=255)
    shipping_phone = models.CharField(max_length=20)
    shipping_address = models.TextField()
    shipping_city = models.CharField(max_length=120)
    shipping_state = models.CharField(max_length=120)
    shipping_pincode = models.CharField(max_length=10)

    tracking_number = models.CharField(max_length=100, blank=True, default="")
    notes = models.TextField(blank=True, default="")
    cancel_reason = models.TextField(blank=True, default="")
    delivered_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
            models.Index(fields=["user", "-created_at"], name="orders_user_created_idx"),
        ]

    # ------------------------------------------------------------------
    # State machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    def has_vendor(self, vendor_id: Any) -> bool:
        """Whether at least one line item belongs to ``vendor_id``."""
        return any(str(item.vendor_id) == str(vendor_id) for item in self.items.all())

    @property
    def shipping_address_snapshot(self) -> dict:
        return {
            "name": self.shipping_name,
            "phone": self.shipping_phone,
            "address": self.shipping_address,
            "city": self.shipping_city,
            "state": self.shipping_state,
            "pincode": self.shipping_pincode,
        }

    # ------------------------------------------------------------------
    # Order number
    # ------------------------------------------------------------------

    @staticmethod
    def generate_order_number(sequence: int) -> str:
        """``ORD`` + epoch milliseconds + the sequence padded to four digits."""
        millis = int(time.time() * 1000)
        return f"{ORDER_NUMBER_PREFIX}{millis}{sequence:04d}"

    def __str__(self) -> str:
        return f"{self.order_number} ({self.status})"


class OrderItem(BaseModel):
    """Line item snapshot.

    ``unit_price`` is the product's effective price at checkout and never
    follows later price changes.
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="+",
    )
    vendor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="+",
    )
    title = models.CharField(max_length=255)
    image = models.CharField(max_length=500, blank=True, default="")
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, editable=False)

    class Meta:
        db_table = "order_items"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["vendor"], name="order_items_vendor_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    def clean(self) -> None:
        super().clean()
        if self.quantity is not None and self.quantity < 1:
            raise ValidationError({"quantity": "Quantity must be at least 1."})

    def save(self, *args: Any, **kwargs: Any) -> None:
        self.subtotal = self.unit_price * self.quantity
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.title} x{self.quantity} (Rs {self.subtotal})"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail for order status transitions.

    ``user`` is the actor; ``None`` means the change was made by the system.
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    old_status = models.CharField(  # noqa: DJ01
        max_length=20,
        choices=OrderStatus.choices,
        null=True,
        blank=True,
    )
    new_status = models.CharField(max_length=20, choices=OrderStatus.choices)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_status_history"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["order", "created_at"], name="osh_order_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.order_id}: {self.old_status} -> {self.new_status}"
