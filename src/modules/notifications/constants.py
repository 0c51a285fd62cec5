"""Notification types and the order-status message templates."""

from __future__ import annotations

from typing import NamedTuple

from django.db import models

from modules.orders.constants import OrderStatus


class NotificationType(models.TextChoices):
    ORDER_STATUS = "order_status", "Order status"
    ORDER_CANCELLED = "order_cancelled", "Order cancelled"
    ORDER_CONFIRMED = "order_confirmed", "Order confirmed"
    ORDER_SHIPPED = "order_shipped", "Order shipped"
    ORDER_DELIVERED = "order_delivered", "Order delivered"


class NotificationTemplate(NamedTuple):
    type: str
    title: str
    message: str

    def render(self, order_number: str) -> tuple[str, str, str]:
        return self.type, self.title, self.message.format(n=order_number)


# ``pending`` has no template: entering it produces no notification.
ORDER_STATUS_TEMPLATES: dict[str, NotificationTemplate] = {
    OrderStatus.CONFIRMED: NotificationTemplate(
        NotificationType.ORDER_CONFIRMED,
        "Order Confirmed",
        "Your order #{n} has been confirmed and is being processed.",
    ),
    OrderStatus.CANCELLED: NotificationTemplate(
        NotificationType.ORDER_CANCELLED,
        "Order Cancelled",
        "Your order #{n} has been cancelled. The items have been returned to stock.",
    ),
    OrderStatus.PACKED: NotificationTemplate(
        NotificationType.ORDER_STATUS,
        "Order Packed",
        "Your order #{n} has been packed and is ready for shipping.",
    ),
    OrderStatus.SHIPPED: NotificationTemplate(
        NotificationType.ORDER_SHIPPED,
        "Order Shipped",
        "Your order #{n} has been shipped and is on its way to you.",
    ),
    OrderStatus.DELIVERED: NotificationTemplate(
        NotificationType.ORDER_DELIVERED,
        "Order Delivered",
        "Your order #{n} has been delivered. Thank you for shopping with us!",
    ),
}
