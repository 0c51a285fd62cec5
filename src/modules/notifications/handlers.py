"""Turns order status changes into user notifications.

Runs inside the order transaction but in its own savepoint: a failed
insert is rolled back on its own and logged, and the status change still
commits.
"""

from __future__ import annotations

import structlog
from django.db import DatabaseError, transaction

from modules.notifications.repositories.django_repository import (
    NotificationDjangoRepository,
)
from modules.notifications.services import NotificationService
from modules.orders.events import OrderStatusChanged
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderStatusNotificationHandler(IEventHandler[OrderStatusChanged]):
    def __init__(self, service: NotificationService | None = None) -> None:
        self._service = service or NotificationService(NotificationDjangoRepository())

    def handle(self, event: OrderStatusChanged) -> None:
        try:
            with transaction.atomic():
                self._service.notify_order_status(
                    user_id=event.user_id,
                    order_id=event.aggregate_id,
                    order_number=event.order_number,
                    status=event.new_status,
                )
        except DatabaseError:
            logger.exception(
                "notification.dispatch_failed",
                order_id=str(event.aggregate_id),
                user_id=str(event.user_id),
                status=event.new_status,
            )


order_status_notification_handler = OrderStatusNotificationHandler()
