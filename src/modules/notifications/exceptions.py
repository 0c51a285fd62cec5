from __future__ import annotations

from modules.core.exceptions import NotFoundError, ValidationError


class NotificationNotFound(NotFoundError):
    default_message = "Notification not found"


class InvalidNotificationUpdate(ValidationError):
    default_message = "Either notification_id or mark_all_as_read is required"
