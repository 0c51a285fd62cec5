from __future__ import annotations

from rest_framework import serializers

from modules.notifications.models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = [
            "id",
            "type",
            "title",
            "message",
            "order_id",
            "order_number",
            "read",
            "created_at",
        ]
        read_only_fields = fields


class NotificationUpdateSerializer(serializers.Serializer):
    notification_id = serializers.CharField(required=False, allow_blank=True)
    mark_all_as_read = serializers.BooleanField(required=False, default=False)
