"""Notification URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.notifications.views import NotificationView

urlpatterns = [
    path("notifications/", NotificationView.as_view(), name="notifications"),
]
