from __future__ import annotations

from modules.core.exceptions import DuplicateError, NotFoundError, ValidationError


class ReviewNotFound(NotFoundError):
    default_message = "Review not found"


class ReviewableOrderNotFound(NotFoundError):
    """The order is missing, not the reviewer's, or not delivered yet."""

    default_message = "Order not found or not delivered"


class ProductNotInOrder(ValidationError):
    default_message = "Product not found in this order"


class DuplicateReview(DuplicateError):
    default_message = "Review already exists for this product and order"


class InvalidReviewAction(ValidationError):
    default_message = "Invalid action"
