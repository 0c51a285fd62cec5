"""Review repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db import models

    from modules.reviews.models import Review


class IReviewRepository(IRepository["Review"]):
    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Review:
        """Insert a review.  Raises ``IntegrityError`` for a duplicate."""

    @abstractmethod
    def exists_for(self, product_id: UUID, user_id: UUID, order_id: UUID) -> bool: ...

    @abstractmethod
    def list_all(self, approved: Optional[bool] = None) -> "models.QuerySet[Review]":
        """Every review, optionally narrowed by approval, newest first."""

    @abstractmethod
    def approved_summary(self, product_id: UUID) -> Tuple[int, int]:
        """``(count, sum of ratings)`` over the product's approved reviews."""
