"""Dashboard figures for the admin back office."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import Decimal

import structlog
from django.conf import settings

from modules.accounts.repositories.interfaces import IUserRepository
from modules.orders.constants import OrderStatus
from modules.orders.repositories.interfaces import IOrderRepository
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StoreStats:
    total_users: int
    total_products: int
    total_orders: int
    total_revenue: Decimal
    pending_orders: int
    low_stock_products: int

    def as_dict(self) -> dict:
        return asdict(self)


class StatsService:
    """Aggregates counts across accounts, catalog and orders.

    Revenue only counts delivered orders, since payment is collected on
    delivery.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        product_repository: IProductRepository,
        order_repository: IOrderRepository,
        low_stock_threshold: int | None = None,
    ) -> None:
        self.user_repository = user_repository
        self.product_repository = product_repository
        self.order_repository = order_repository
        self.low_stock_threshold = (
            settings.LOW_STOCK_THRESHOLD
            if low_stock_threshold is None
            else low_stock_threshold
        )

    def get_stats(self) -> StoreStats:
        stats = StoreStats(
            total_users=self.user_repository.count_non_admin(),
            total_products=self.product_repository.count(),
            total_orders=self.order_repository.count(),
            total_revenue=self.order_repository.revenue_for_status(
                OrderStatus.DELIVERED
            ),
            pending_orders=self.order_repository.count_by_status(OrderStatus.PENDING),
            low_stock_products=self.product_repository.count_low_stock(
                self.low_stock_threshold
            ),
        )
        logger.info(
            "backoffice.stats_computed",
            total_orders=stats.total_orders,
            pending_orders=stats.pending_orders,
        )
        return stats
