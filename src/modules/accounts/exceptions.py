from __future__ import annotations

from modules.core.exceptions import NotFoundError, ValidationError


class UserNotFound(NotFoundError):
    default_message = "User not found"


class InvalidRole(ValidationError):
    default_message = "Invalid role"


class NothingToUpdate(ValidationError):
    default_message = "No changes supplied"
