"""Notification feed of the authenticated user."""

from __future__ import annotations

from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.notifications.exceptions import InvalidNotificationUpdate
from modules.notifications.repositories.django_repository import (
    NotificationDjangoRepository,
)
from modules.notifications.serializers import (
    NotificationSerializer,
    NotificationUpdateSerializer,
)
from modules.notifications.services import NotificationService


class NotificationView(APIView):
    permission_classes = [IsAuthenticated]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = NotificationService(NotificationDjangoRepository())

    def get(self, request: Request) -> Response:
        """GET /api/v1/notifications/ (newest first)"""
        notifications = self._service.list_notifications(request.user.id)
        return Response(
            {"notifications": NotificationSerializer(notifications, many=True).data}
        )

    def patch(self, request: Request) -> Response:
        """PATCH /api/v1/notifications/

        ``{"mark_all_as_read": true}`` or ``{"notification_id": "<id>"}``.
        """
        serializer = NotificationUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if data.get("mark_all_as_read"):
            notifications = self._service.mark_all_read(request.user.id)
            return Response(
                {"notifications": NotificationSerializer(notifications, many=True).data}
            )
        if data.get("notification_id"):
            notification = self._service.mark_read(
                request.user.id, data["notification_id"]
            )
            return Response({"notification": NotificationSerializer(notification).data})
        raise InvalidNotificationUpdate()
