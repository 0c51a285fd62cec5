"""Per-user notification feed.

A user keeps at most ``NOTIFICATIONS_PER_USER`` rows; appending past the
cap evicts the oldest.  ``order_id`` is a plain UUID so a notification
outlives the order it describes.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from modules.core.models import BaseModel
from modules.notifications.constants import NotificationType


class Notification(BaseModel):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    type = models.CharField(max_length=30, choices=NotificationType.choices)
    title = models.CharField(max_length=120)
    message = models.TextField()
    order_id = models.UUIDField(null=True, blank=True)
    order_number = models.CharField(max_length=32, blank=True, default="")
    read = models.BooleanField(default=False)

    class Meta:
        db_table = "notifications"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["user", "-created_at"], name="notif_user_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.title} -> {self.user_id}"
