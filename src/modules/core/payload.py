"""Request body access shared by the API views."""

from __future__ import annotations

from typing import Any, Dict

from rest_framework.request import Request

from modules.core.exceptions import ValidationError


def request_payload(request: Request) -> Dict[str, Any]:
    """``request.data`` as a plain dict.

    Raises ``ValidationError`` when the body is not a JSON object (an
    array or a bare scalar).
    """
    data = request.data
    if hasattr(data, "dict"):
        return data.dict()
    if not isinstance(data, dict):
        raise ValidationError("Invalid request body")
    return dict(data)
