"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from shared.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class OrderCreated(DomainEvent):
    """Raised when checkout persists a new order."""

    user_id: UUID
    order_number: str
    total_amount: Decimal


@dataclass(frozen=True, kw_only=True)
class OrderStatusChanged(DomainEvent):
    """Raised once per real status transition (never for a same-status update)."""

    user_id: UUID
    order_number: str
    old_status: str
    new_status: str


@dataclass(frozen=True, kw_only=True)
class OrderCancelled(DomainEvent):
    """Raised alongside ``OrderStatusChanged`` when the new status is cancelled."""

    user_id: UUID
    order_number: str
    reason: str = ""


@dataclass(frozen=True, kw_only=True)
class OrderDeleted(DomainEvent):
    """Raised when an admin hard-deletes an order."""

    order_number: str
    stock_released: bool
