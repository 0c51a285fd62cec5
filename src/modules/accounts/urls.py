"""Account URL configuration."""

from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from modules.accounts.views import AdminUserViewSet, ProfileView

router = DefaultRouter(trailing_slash=True)
router.register("admin/users", AdminUserViewSet, basename="admin-user")

urlpatterns = [
    path("user/profile/", ProfileView.as_view(), name="user-profile"),
    *router.urls,
]
