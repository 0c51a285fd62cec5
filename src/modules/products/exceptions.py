"""Product and category exceptions."""

from __future__ import annotations

from modules.core.exceptions import (
    DuplicateError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)


class ProductNotFoundError(NotFoundError):
    """The product does not exist, or is inactive where a sellable one is needed."""

    default_message = "Product not found"


class InsufficientStock(InsufficientStockError):
    def __init__(self, title: str, available: int, required: int) -> None:
        super().__init__(
            f"Insufficient stock for {title}. "
            f"Available: {available}, Required: {required}"
        )
        self.title = title
        self.available = available
        self.required = required


class InvalidProduct(ValidationError):
    default_message = "Invalid product data"


class CategoryNotFound(NotFoundError):
    default_message = "Category not found"


class CategoryAlreadyExists(DuplicateError):
    default_message = "Category with this name already exists"
