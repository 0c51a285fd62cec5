"""Django ORM implementation of the notification repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from modules.notifications.models import Notification
from modules.notifications.repositories.interfaces import INotificationRepository

logger = structlog.get_logger(__name__)


class NotificationDjangoRepository(INotificationRepository):
    @transaction.atomic
    def append(self, user_id: UUID, data: Dict[str, Any], cap: int) -> Notification:
        notification = Notification.objects.create(user_id=user_id, **data)

        keep = (
            Notification.objects.filter(user_id=user_id)
            .order_by("-created_at", "-id")
            .values_list("id", flat=True)[:cap]
        )
        evicted, _ = (
            Notification.objects.filter(user_id=user_id)
            .exclude(id__in=list(keep))
            .delete()
        )
        if evicted:
            logger.info("notification.evicted", user_id=str(user_id), count=evicted)
        return notification

    def list_for_user(self, user_id: UUID) -> List[Notification]:
        return list(
            Notification.objects.filter(user_id=user_id).order_by("-created_at", "-id")
        )

    def get_for_user(self, user_id: UUID, notification_id: str) -> Optional[Notification]:
        try:
            return Notification.objects.filter(user_id=user_id, id=notification_id).first()
        except (ValueError, ValidationError):
            return None

    def mark_read(self, user_id: UUID, notification_id: str) -> Optional[Notification]:
        notification = self.get_for_user(user_id, notification_id)
        if notification is None:
            return None
        if not notification.read:
            notification.read = True
            notification.save(update_fields=["read"])
        return notification

    def mark_all_read(self, user_id: UUID) -> int:
        return Notification.objects.filter(user_id=user_id, read=False).update(
            read=True, updated_at=timezone.now()
        )
