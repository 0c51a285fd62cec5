"""Notification repository interface (the notification sink)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

if TYPE_CHECKING:
    from modules.notifications.models import Notification


class INotificationRepository(ABC):
    @abstractmethod
    def append(self, user_id: UUID, data: Dict[str, Any], cap: int) -> Notification:
        """Add a notification, then evict the user's oldest rows beyond ``cap``.

        ``data`` holds ``type``, ``title``, ``message``, ``order_id`` and
        ``order_number``.
        """

    @abstractmethod
    def list_for_user(self, user_id: UUID) -> List[Notification]:
        """Newest first."""

    @abstractmethod
    def get_for_user(self, user_id: UUID, notification_id: str) -> Optional[Notification]: ...

    @abstractmethod
    def mark_read(self, user_id: UUID, notification_id: str) -> Optional[Notification]:
        """``None`` when the notification is not the user's."""

    @abstractmethod
    def mark_all_read(self, user_id: UUID) -> int:
        """Returns the number of rows that changed."""
