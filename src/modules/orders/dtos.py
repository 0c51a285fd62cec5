"""Order DTOs for the service layer.

Immutable pydantic models passed from the API layer to ``OrderService``.

- ``ShippingAddressDTO``: delivery address snapshot (all fields required).
- ``CreateOrderItemDTO`` / ``CreateOrderDTO``: checkout input.
- ``UpdateOrderDTO``: a status change and/or order field edits.
- ``OrderListFiltersDTO``: list filters and paging.
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------


class ShippingAddressDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    phone: str
    address: str
    city: str
    state: str
    pincode: str

    @field_validator("*")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Shipping address is incomplete")
        return v


class CreateOrderItemDTO(BaseModel):
    """A product and how many units of it.

    The unit price is resolved by the service from the live product.
    """

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class CreateOrderDTO(BaseModel):
    """Validates:

    - ``items`` contains at least one item.  A product may appear on more
      than one line; each line is reserved separately.
    - ``shipping_address`` is complete.
    """

    model_config = ConfigDict(frozen=True)

    user_id: UUID
    items: List[CreateOrderItemDTO]
    shipping_address: ShippingAddressDTO
    notes: str = ""

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: List[CreateOrderItemDTO]
    ) -> List[CreateOrderItemDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v


# ---------------------------------------------------------------------------
# Updates
# ---------------------------------------------------------------------------


class UpdateOrderDTO(BaseModel):
    """An order update request.

    ``sent_fields`` lists the keys the client actually sent; the role policy
    checks it, so a vendor sending ``cancel_reason`` is refused even when
    the value is empty.  ``status`` is kept raw and normalised by the service.
    """

    model_config = ConfigDict(frozen=True)

    sent_fields: frozenset[str] = Field(default_factory=frozenset)
    status: Optional[str] = None
    tracking_number: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = None
    cancel_reason: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict) -> UpdateOrderDTO:
        known = {"status", "tracking_number", "notes", "cancel_reason"}
        values = {k: payload[k] for k in known if payload.get(k) is not None}
        return cls(sent_fields=frozenset(payload.keys()), **values)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class OrderListFiltersDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Optional[str] = None
    vendor_id: Optional[UUID] = None
