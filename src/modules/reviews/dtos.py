"""Review DTOs for the service layer."""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from modules.reviews.constants import MAX_COMMENT_LENGTH, MAX_RATING, MIN_RATING


class CreateReviewDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: UUID
    product_id: UUID
    order_id: UUID
    rating: int
    comment: str

    @field_validator("rating")
    @classmethod
    def rating_in_range(cls, v: int) -> int:
        if not MIN_RATING <= v <= MAX_RATING:
            raise ValueError("Rating must be between 1 and 5")
        return v

    @field_validator("comment")
    @classmethod
    def comment_is_present(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Comment is required")
        if len(v) > MAX_COMMENT_LENGTH:
            raise ValueError("Comment cannot exceed 1000 characters")
        return v
