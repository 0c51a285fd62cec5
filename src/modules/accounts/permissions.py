"""DRF permission classes keyed on ``User.role``."""

from __future__ import annotations

from rest_framework.permissions import SAFE_METHODS, BasePermission

from modules.accounts.models import UserRole


def _role_of(request) -> str | None:
    user = request.user
    if not user or not user.is_authenticated:
        return None
    return getattr(user, "role", None)


class IsAdmin(BasePermission):
    message = "Admin access required"

    def has_permission(self, request, view) -> bool:
        return _role_of(request) == UserRole.ADMIN


class IsAdminOrReadOnly(BasePermission):
    """Anyone may read; only admins may write."""

    message = "Admin access required"

    def has_permission(self, request, view) -> bool:
        if request.method in SAFE_METHODS:
            return True
        return _role_of(request) == UserRole.ADMIN
