"""Product reviews.

A customer reviews a product they received: the review points at a
delivered order of theirs that contains the product, and there is at most
one review per (product, user, order).  A review outlives the order it
cites.  Only approved reviews count towards ``Product.rating`` and
``Product.reviews_count``.
"""

from __future__ import annotations

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.reviews.constants import MAX_COMMENT_LENGTH, MAX_RATING, MIN_RATING


class Review(BaseModel):
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.CASCADE,
        related_name="reviews",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="reviews",
    )
    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="+",
    )
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(MIN_RATING), MaxValueValidator(MAX_RATING)]
    )
    comment = models.TextField(max_length=MAX_COMMENT_LENGTH)
    is_approved = models.BooleanField(default=False)
    helpful_count = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "reviews"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["product", "is_approved"], name="reviews_product_idx"),
            models.Index(fields=["-created_at"], name="reviews_created_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["product", "user", "order"],
                name="reviews_one_per_order_line",
            ),
            models.CheckConstraint(
                condition=models.Q(rating__gte=MIN_RATING, rating__lte=MAX_RATING),
                name="reviews_rating_range",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.rating}/5 on {self.product_id} by {self.user_id}"
