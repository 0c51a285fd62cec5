from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from modules.accounts.exceptions import InvalidRole, NothingToUpdate, UserNotFound
from modules.accounts.models import UserRole

if TYPE_CHECKING:
    from django.db import models

    from modules.accounts.dtos import AdminUpdateUserDTO, UpdateProfileDTO
    from modules.accounts.models import User
    from modules.accounts.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)


class ProfileService:
    """Read and edit the signed-in user's own profile."""

    def __init__(self, repository: IUserRepository) -> None:
        self._repository = repository

    def get_profile(self, user_id: UUID) -> User:
        user = self._repository.get_by_id(str(user_id))
        if not user:
            raise UserNotFound()
        return user

    def update_profile(self, user_id: UUID, dto: UpdateProfileDTO) -> User:
        user = self.get_profile(user_id)
        user.name = dto.name
        self._repository.save(user)
        logger.info("user.profile_updated", user_id=str(user_id))
        return user


class UserAdminService:
    """Back-office account management: listing and role/status changes."""

    def __init__(self, repository: IUserRepository) -> None:
        self._repository = repository

    def list_users(self) -> "models.QuerySet[User]":
        return self._repository.list_all()

    def get_user(self, user_id: str) -> User:
        user = self._repository.get_by_id(user_id)
        if not user:
            raise UserNotFound()
        return user

    def update_user(self, user_id: str, dto: AdminUpdateUserDTO) -> User:
        user = self.get_user(user_id)
        changes = dto.changes
        if not changes:
            raise NothingToUpdate()
        if "role" in changes and changes["role"] not in UserRole.values:
            raise InvalidRole()

        for field, value in changes.items():
            setattr(user, field, value)
        self._repository.save(user)
        logger.info(
            "user.admin_updated",
            user_id=str(user.id),
            fields=sorted(changes),
            role=user.role,
            is_active=user.is_active,
        )
        return user
