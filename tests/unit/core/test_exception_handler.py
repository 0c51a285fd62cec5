"""Unit tests for the project exception handler."""

from __future__ import annotations

import pytest
from pydantic import BaseModel, ValidationError as PydanticValidationError
from rest_framework import exceptions as drf_exceptions

from modules.core.exceptions import (
    DomainError,
    ForbiddenError,
    NotFoundError,
    api_exception_handler,
)
from modules.orders.exceptions import InvalidTransitionError
from modules.products.exceptions import InsufficientStock

pytestmark = pytest.mark.unit


class _Payload(BaseModel):
    quantity: int


def _handle(exc):
    return api_exception_handler(exc, {"view": None})


class TestApiExceptionHandler:
    @pytest.mark.parametrize(
        "exc,status_code,message",
        [
            (NotFoundError("Order not found"), 404, "Order not found"),
            (ForbiddenError("Unauthorized"), 403, "Unauthorized"),
            (
                InvalidTransitionError("shipped", "pending"),
                400,
                "Cannot change order status from shipped to pending",
            ),
            (
                InsufficientStock("Linen Classic", 1, 2),
                400,
                "Insufficient stock for Linen Classic. Available: 1, Required: 2",
            ),
        ],
    )
    def test_domain_errors_keep_status_and_message(self, exc, status_code, message):
        response = _handle(exc)
        assert response.status_code == status_code
        assert response.data == {"error": message}

    def test_internal_errors_are_generic(self):
        response = _handle(DomainError("connection string leaked"))
        assert response.status_code == 500
        assert response.data == {"error": "Internal server error"}

    def test_unexpected_exceptions_are_generic(self):
        response = _handle(KeyError("secret"))
        assert response.status_code == 500
        assert response.data == {"error": "Internal server error"}

    def test_pydantic_errors_are_400(self):
        with pytest.raises(PydanticValidationError) as excinfo:
            _Payload(quantity="many")
        response = _handle(excinfo.value)
        assert response.status_code == 400
        assert response.data["error"].startswith("quantity:")

    def test_drf_errors_are_flattened(self):
        response = _handle(
            drf_exceptions.ValidationError({"items": ["Order items are required"]})
        )
        assert response.status_code == 400
        assert response.data == {"error": "items: Order items are required"}

    def test_drf_auth_error(self):
        response = _handle(drf_exceptions.NotAuthenticated())
        assert response.status_code == 401
        assert "error" in response.data
