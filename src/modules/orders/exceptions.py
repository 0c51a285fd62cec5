"""Order domain exceptions.

Each subclasses the shared taxonomy in ``modules.core.exceptions`` and so
carries its HTTP status; views let them propagate to the exception handler.
"""

from __future__ import annotations

from modules.core.exceptions import (
    DuplicateError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)


class OrderNotFound(NotFoundError):
    default_message = "Order not found"


class InvalidStatusError(ValidationError):
    """The requested status is not part of the order vocabulary."""

    default_message = "Invalid status"


class InvalidTransitionError(ValidationError):
    """The state machine does not allow moving between the two statuses."""

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(f"Cannot change order status from {current} to {requested}")
        self.current = current
        self.requested = requested


class OrderNotCancellable(ValidationError):
    """A customer tried to cancel an order that is no longer pending."""

    default_message = "Order cannot be cancelled at this stage"


class OrderPermissionDenied(ForbiddenError):
    default_message = "You do not have permission to modify this order"


class DuplicateOrderNumber(DuplicateError):
    default_message = "Could not allocate a unique order number"
