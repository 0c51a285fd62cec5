from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db import models

    from modules.accounts.models import User


class IUserRepository(IRepository["User"]):
    @abstractmethod
    def count_non_admin(self) -> int:
        """Number of customer and vendor accounts."""

    @abstractmethod
    def list_all(self) -> "models.QuerySet[User]":
        """Every account, newest first."""
