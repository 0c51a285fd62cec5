"""Django ORM implementation of the user repository."""

from __future__ import annotations

from typing import Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models

from modules.accounts.models import User, UserRole
from modules.accounts.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)


class UserDjangoRepository(IUserRepository):
    def get_by_id(self, id: str) -> Optional[User]:
        try:
            return User.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def save(self, entity: User) -> User:
        entity.save()
        logger.info("user.saved", user_id=str(entity.id))
        return entity

    def delete(self, id: str) -> bool:
        deleted, _ = User.objects.filter(id=id).delete()
        if deleted:
            logger.info("user.deleted", user_id=str(id))
        return bool(deleted)

    def count_non_admin(self) -> int:
        return User.objects.exclude(role=UserRole.ADMIN).count()

    def list_all(self) -> "models.QuerySet[User]":
        return User.objects.order_by("-date_joined", "-id")
