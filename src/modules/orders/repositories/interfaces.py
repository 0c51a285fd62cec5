"""Order repository interface.

The order aggregate is an ``Order`` with its ``OrderItem`` children and
``OrderStatusHistory`` rows.  Services depend only on this contract.
"""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db import models

    from modules.orders.models import Order, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Insert an order and its line items.

        ``data`` carries the order columns plus ``items``: a list of dicts
        with ``product_id``, ``vendor_id``, ``title``, ``image``,
        ``quantity`` and ``unit_price``.  Raises ``IntegrityError`` when the
        order number is already taken.
        """

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Order with a row-level lock, items prefetched."""

    @abstractmethod
    def add_history(
        self,
        order_id: UUID,
        new_status: str,
        old_status: Optional[str] = None,
        user_id: Optional[UUID] = None,
        notes: str = "",
    ) -> OrderStatusHistory:
        """Append a status change to the order's audit trail."""

    @abstractmethod
    def count(self) -> int:
        """Total number of orders, used for the order-number sequence."""

    @abstractmethod
    def order_number_exists(self, order_number: str) -> bool: ...

    @abstractmethod
    def list_for_user(self, user_id: UUID, status: Optional[str] = None) -> "models.QuerySet[Order]":
        """Orders owned by ``user_id``, newest first."""

    @abstractmethod
    def list_for_vendor(self, vendor_id: UUID, status: Optional[str] = None) -> "models.QuerySet[Order]":
        """Orders with at least one line item sold by ``vendor_id``."""

    @abstractmethod
    def list_all(self, status: Optional[str] = None) -> "models.QuerySet[Order]":
        """Every order, newest first."""

    @abstractmethod
    def count_by_status(self, status: str) -> int: ...

    @abstractmethod
    def revenue_for_status(self, status: str) -> Decimal: ...
