"""Product and category DTOs for the service layer.

Immutable pydantic models passed from the API layer to the services.

- ``CreateProductDTO``: full product payload (admin create / PUT).
- ``UpdateProductDTO``: partial payload, only supplied fields change.
- ``CreateCategoryDTO`` / ``UpdateCategoryDTO``: category payloads.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from modules.products.constants import DEFAULT_SIZE, Fabric, Occasion, Pattern

# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    """Validates a complete product.

    - ``price`` is non-negative; ``sale_price``, when given, is below it.
    - ``stock`` is non-negative.
    - ``fabric``, ``pattern`` and ``occasion`` come from closed vocabularies.
    """

    model_config = ConfigDict(frozen=True)

    vendor_id: UUID
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    sale_price: Optional[Decimal] = Field(
        default=None, ge=0, max_digits=10, decimal_places=2
    )
    stock: int = Field(default=0, ge=0)
    categories: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    fabric: Fabric
    color: str = Field(min_length=1, max_length=60)
    size: str = DEFAULT_SIZE
    pattern: Pattern
    occasion: Occasion
    is_active: bool = True

    @field_validator("title", "description", "color")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @model_validator(mode="after")
    def sale_price_below_price(self):
        if self.sale_price is not None and self.sale_price >= self.price:
            raise ValueError("Sale price must be less than regular price")
        return self


class UpdateProductDTO(BaseModel):
    """Partial update; ``None`` means "leave unchanged".

    ``clear_sale_price`` removes a sale price, since ``sale_price=None``
    already means "not supplied".
    """

    model_config = ConfigDict(frozen=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    sale_price: Optional[Decimal] = Field(
        default=None, ge=0, max_digits=10, decimal_places=2
    )
    clear_sale_price: bool = False
    stock: Optional[int] = Field(default=None, ge=0)
    categories: Optional[List[str]] = None
    images: Optional[List[str]] = None
    fabric: Optional[Fabric] = None
    color: Optional[str] = None
    size: Optional[str] = None
    pattern: Optional[Pattern] = None
    occasion: Optional[Occasion] = None
    is_active: Optional[bool] = None

    def changes(self) -> dict:
        """Supplied fields only, excluding the ``clear_sale_price`` flag."""
        return self.model_dump(
            exclude_none=True, exclude={"clear_sale_price", "categories"}
        )


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


class CreateCategoryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    image: str = ""
    is_active: bool = True

    @field_validator("name", "description")
    @classmethod
    def required_text(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Name and description are required")
        return v


class UpdateCategoryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Name must not be blank")
        return v
