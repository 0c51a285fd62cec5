"""Error taxonomy shared by every module, plus the DRF exception handler.

Services raise subclasses of ``DomainError``; each class carries the HTTP
status it maps to.  ``api_exception_handler`` is registered as DRF's
``EXCEPTION_HANDLER`` and renders every failure as ``{"error": "<message>"}``.
Unexpected exceptions are logged with their traceback and answered with a
generic 500 so internals never leak to the client.
"""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = structlog.get_logger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"


class DomainError(Exception):
    """Base class for business-rule failures (500 unless overridden)."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = GENERIC_ERROR_MESSAGE

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else self.default_message


InternalError = DomainError


class ValidationError(DomainError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request."


class NotFoundError(DomainError):
    """A referenced resource does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found."


class ForbiddenError(DomainError):
    """The acting user lacks permission for the requested mutation."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden."


class InsufficientStockError(DomainError):
    """Requested quantity exceeds the stock available right now."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Insufficient stock."


class DuplicateError(DomainError):
    """A uniqueness rule would be violated."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Resource already exists."


def format_pydantic_error(exc: PydanticValidationError) -> str:
    """Collapse pydantic's error list into one human-readable sentence."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(loc) for loc in error.get("loc", ()))
        message = error.get("msg", "Invalid value")
        message = message.removeprefix("Value error, ")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request."


def _flatten_detail(detail: Any) -> str:
    if isinstance(detail, dict):
        if "detail" in detail:
            return _flatten_detail(detail["detail"])
        return "; ".join(
            f"{field}: {_flatten_detail(value)}" for field, value in detail.items()
        )
    if isinstance(detail, (list, tuple)):
        return " ".join(_flatten_detail(item) for item in detail)
    return str(detail)


def api_exception_handler(exc: Exception, context: dict) -> Response:
    """Translate any exception raised by a view into ``{"error": str}``."""
    view = context.get("view")
    view_name = type(view).__name__ if view is not None else None

    if isinstance(exc, DomainError):
        if exc.status_code >= 500:
            logger.exception("api.domain_error", view=view_name)
            return Response({"error": GENERIC_ERROR_MESSAGE}, status=exc.status_code)
        logger.info(
            "api.request_rejected",
            view=view_name,
            error=type(exc).__name__,
            status_code=exc.status_code,
        )
        return Response({"error": exc.message}, status=exc.status_code)

    if isinstance(exc, PydanticValidationError):
        return Response(
            {"error": format_pydantic_error(exc)},
            status=status.HTTP_400_BAD_REQUEST,
        )

    response = drf_exception_handler(exc, context)
    if response is None:
        logger.exception("api.unhandled_error", view=view_name)
        return Response(
            {"error": GENERIC_ERROR_MESSAGE},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    response.data = {"error": _flatten_detail(response.data)}
    return response
