"""Storefront user with a role.

Every account is a ``customer``, a ``vendor`` (sells products and sees the
orders that contain them) or an ``admin`` (runs the back office).  Email is
the login identifier; ``username`` is not used.
"""

from __future__ import annotations

from typing import Any

import structlog
import uuid6
from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models

logger = structlog.get_logger(__name__)


class UserRole(models.TextChoices):
    CUSTOMER = "customer", "Customer"
    VENDOR = "vendor", "Vendor"
    ADMIN = "admin", "Admin"


class UserManager(BaseUserManager):
    use_in_migrations = True

    def _create_user(self, email: str, password: str | None, **extra: Any) -> "User":
        if not email:
            raise ValueError("Email is required.")
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(
        self, email: str, password: str | None = None, **extra: Any
    ) -> "User":
        extra.setdefault("role", UserRole.CUSTOMER)
        extra.setdefault("is_staff", False)
        extra.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra)

    def create_superuser(self, email: str, password: str, **extra: Any) -> "User":
        extra.setdefault("role", UserRole.ADMIN)
        extra.setdefault("is_staff", True)
        extra.setdefault("is_superuser", True)
        return self._create_user(email, password, **extra)


class User(AbstractUser):
    """Account owning orders, products (vendors) and notifications."""

    id = models.UUIDField(primary_key=True, default=uuid6.uuid7, editable=False)
    username = None
    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=254, unique=True)
    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.CUSTOMER,
    )
    business_name = models.CharField(max_length=255, blank=True, default="")
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    objects = UserManager()

    class Meta:
        db_table = "users"
        ordering = ["-date_joined"]
        indexes = [
            models.Index(fields=["role"], name="users_role_idx"),
        ]

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_vendor(self) -> bool:
        return self.role == UserRole.VENDOR

    @property
    def is_customer(self) -> bool:
        return self.role == UserRole.CUSTOMER

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)
        if is_new:
            logger.info("user.created", user_id=str(self.id), role=self.role)

    def __str__(self) -> str:
        return f"{self.name} <{self.email}> ({self.role})"
