"""Notification use cases: order-status notices and the user's feed."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

import structlog
from django.conf import settings

from modules.notifications.constants import ORDER_STATUS_TEMPLATES
from modules.notifications.exceptions import NotificationNotFound

if TYPE_CHECKING:
    from modules.notifications.models import Notification
    from modules.notifications.repositories.interfaces import INotificationRepository

logger = structlog.get_logger(__name__)


class NotificationService:
    def __init__(self, repository: INotificationRepository) -> None:
        self._repo = repository

    @property
    def cap(self) -> int:
        return getattr(settings, "NOTIFICATIONS_PER_USER", 50)

    def notify_order_status(
        self,
        user_id: UUID,
        order_id: UUID,
        order_number: str,
        status: str,
    ) -> Optional[Notification]:
        """Append the notice for ``status``; ``None`` when it has no template."""
        template = ORDER_STATUS_TEMPLATES.get(status)
        if template is None:
            return None

        type_, title, message = template.render(order_number)
        notification = self._repo.append(
            user_id,
            {
                "type": type_,
                "title": title,
                "message": message,
                "order_id": order_id,
                "order_number": order_number,
            },
            self.cap,
        )
        logger.info(
            "notification.created",
            user_id=str(user_id),
            order_id=str(order_id),
            type=type_,
        )
        return notification

    def list_notifications(self, user_id: UUID) -> List[Notification]:
        return self._repo.list_for_user(user_id)

    def mark_read(self, user_id: UUID, notification_id: str) -> Notification:
        notification = self._repo.mark_read(user_id, notification_id)
        if notification is None:
            raise NotificationNotFound()
        return notification

    def mark_all_read(self, user_id: UUID) -> List[Notification]:
        changed = self._repo.mark_all_read(user_id)
        logger.info("notification.all_marked_read", user_id=str(user_id), count=changed)
        return self._repo.list_for_user(user_id)
