"""Django ORM implementation of the review repository."""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Count, Sum

from modules.reviews.models import Review
from modules.reviews.repositories.interfaces import IReviewRepository

logger = structlog.get_logger(__name__)


def _with_relations(queryset: "models.QuerySet[Review]") -> "models.QuerySet[Review]":
    return queryset.select_related("user", "product").order_by("-created_at", "-id")


class ReviewDjangoRepository(IReviewRepository):
    def get_by_id(self, id: str) -> Optional[Review]:
        try:
            return _with_relations(Review.objects.filter(id=id)).first()
        except (ValueError, ValidationError):
            return None

    def create(self, data: Dict[str, Any]) -> Review:
        review = Review.objects.create(**data)
        logger.info(
            "review.saved",
            review_id=str(review.id),
            product_id=str(review.product_id),
        )
        return review

    def save(self, entity: Review) -> Review:
        entity.save()
        logger.info("review.saved", review_id=str(entity.id), product_id=str(entity.product_id))
        return entity

    def delete(self, id: str) -> bool:
        try:
            deleted, _ = Review.objects.filter(id=id).delete()
        except (ValueError, ValidationError):
            return False
        if deleted:
            logger.info("review.deleted", review_id=str(id))
        return bool(deleted)

    def exists_for(self, product_id: UUID, user_id: UUID, order_id: UUID) -> bool:
        return Review.objects.filter(
            product_id=product_id, user_id=user_id, order_id=order_id
        ).exists()

    def list_all(self, approved: Optional[bool] = None) -> "models.QuerySet[Review]":
        queryset = Review.objects.all()
        if approved is not None:
            queryset = queryset.filter(is_approved=approved)
        return _with_relations(queryset)

    def approved_summary(self, product_id: UUID) -> Tuple[int, int]:
        summary = Review.objects.filter(
            product_id=product_id, is_approved=True
        ).aggregate(count=Count("id"), total=Sum("rating"))
        return summary["count"], summary["total"] or 0
