"""Review use cases: submitting, moderating and removing reviews.

A review may only be written against a delivered order of the reviewer
that contains the product.  Every write recomputes the product's
``rating`` (mean of approved ratings, one decimal, halves rounded up) and
``reviews_count`` (approved reviews) inside the same transaction.
New reviews wait for an admin unless ``REVIEWS_AUTO_APPROVE`` is set.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Optional
from uuid import UUID

import structlog
from django.conf import settings
from django.db import IntegrityError, transaction

from modules.orders.constants import OrderStatus
from modules.reviews.constants import ReviewAction
from modules.reviews.exceptions import (
    DuplicateReview,
    InvalidReviewAction,
    ProductNotInOrder,
    ReviewableOrderNotFound,
    ReviewNotFound,
)

if TYPE_CHECKING:
    from django.db import models

    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository
    from modules.reviews.dtos import CreateReviewDTO
    from modules.reviews.models import Review
    from modules.reviews.repositories.interfaces import IReviewRepository

logger = structlog.get_logger(__name__)

ONE_DECIMAL = Decimal("0.1")


def average_rating(count: int, total: int) -> Decimal:
    """Mean rating rounded to one decimal; ``0.0`` without reviews."""
    if not count:
        return Decimal("0.0")
    return (Decimal(total) / Decimal(count)).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)


class ReviewService:
    def __init__(
        self,
        review_repository: IReviewRepository,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._reviews = review_repository
        self._orders = order_repository
        self._products = product_repository

    @property
    def auto_approve(self) -> bool:
        return getattr(settings, "REVIEWS_AUTO_APPROVE", False)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_reviews(self, approved: Optional[bool] = None) -> "models.QuerySet[Review]":
        return self._reviews.list_all(approved)

    def get_review(self, review_id: str) -> Review:
        review = self._reviews.get_by_id(review_id)
        if review is None:
            raise ReviewNotFound()
        return review

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_review(self, dto: CreateReviewDTO) -> Review:
        order = self._orders.get_by_id(str(dto.order_id))
        if (
            order is None
            or order.user_id != dto.user_id
            or order.status != OrderStatus.DELIVERED
        ):
            raise ReviewableOrderNotFound()
        if not any(item.product_id == dto.product_id for item in order.items.all()):
            raise ProductNotInOrder()
        if self._reviews.exists_for(dto.product_id, dto.user_id, dto.order_id):
            raise DuplicateReview()

        try:
            with transaction.atomic():
                review = self._reviews.create(
                    {
                        "product_id": dto.product_id,
                        "user_id": dto.user_id,
                        "order_id": dto.order_id,
                        "rating": dto.rating,
                        "comment": dto.comment,
                        "is_approved": self.auto_approve,
                    }
                )
        except IntegrityError as exc:
            raise DuplicateReview() from exc

        self._refresh_product_rating(dto.product_id)
        logger.info(
            "review.created",
            review_id=str(review.id),
            product_id=str(dto.product_id),
            order_id=str(dto.order_id),
            rating=dto.rating,
            approved=review.is_approved,
        )
        return self.get_review(str(review.id))

    @transaction.atomic
    def moderate(self, review_id: str, action: str) -> Review:
        if action not in ReviewAction.values:
            raise InvalidReviewAction()
        review = self.get_review(review_id)
        review.is_approved = action == ReviewAction.APPROVE
        self._reviews.save(review)
        self._refresh_product_rating(review.product_id)
        logger.info("review.moderated", review_id=str(review.id), action=action)
        return review

    @transaction.atomic
    def delete_review(self, review_id: str) -> None:
        review = self.get_review(review_id)
        self._reviews.delete(str(review.id))
        self._refresh_product_rating(review.product_id)

    def _refresh_product_rating(self, product_id: UUID) -> None:
        count, total = self._reviews.approved_summary(product_id)
        rating = average_rating(count, total)
        self._products.set_rating(product_id, rating, count)
        logger.info(
            "product.rating_updated",
            product_id=str(product_id),
            rating=str(rating),
            reviews_count=count,
        )
