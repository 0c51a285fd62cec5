"""Order domain constants.

Status vocabulary and the transition table of the order state machine,
payment enums, and the notification-free statuses used by deletion.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    PACKED = "packed", "Packed"
    SHIPPED = "shipped", "Shipped"
    DELIVERED = "delivered", "Delivered"
    CANCELLED = "cancelled", "Cancelled"


class PaymentMethod(models.TextChoices):
    COD = "COD", "Cash on delivery"


class PaymentStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PAID = "paid", "Paid"
    FAILED = "failed", "Failed"


# Older clients still send ``approved``; it means ``confirmed``.
STATUS_ALIASES: dict[str, str] = {
    "approved": OrderStatus.CONFIRMED,
}

# Moves customers and vendors may make.  Admins are not bound by this table.
VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PACKED},
    OrderStatus.PACKED: {OrderStatus.SHIPPED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: {OrderStatus.CONFIRMED},
}

TERMINAL_STATES: set[str] = {OrderStatus.DELIVERED}

# Deleting an order in one of these statuses returns its items to stock.
STOCK_RESTORING_DELETE_STATUSES: set[str] = {
    OrderStatus.CONFIRMED,
    OrderStatus.SHIPPED,
}

DEFAULT_CUSTOMER_CANCEL_REASON = "Cancelled by customer"

ORDER_NUMBER_PREFIX = "ORD"
ORDER_NUMBER_MAX_RETRIES = 5


def normalize_status(value: object) -> str | None:
    """Map a client-supplied status to an ``OrderStatus`` value.

    Returns ``None`` for anything outside the vocabulary.
    """
    if not isinstance(value, str):
        return None
    candidate = value.strip().lower()
    candidate = STATUS_ALIASES.get(candidate, candidate)
    if candidate in OrderStatus.values:
        return candidate
    return None
