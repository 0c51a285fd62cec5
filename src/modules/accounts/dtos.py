"""Account DTOs: the acting identity and account edits."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from modules.accounts.models import UserRole

if TYPE_CHECKING:
    from modules.accounts.models import User


class ActorDTO(BaseModel):
    """Who is performing an operation.

    Services never look at ``request.user`` directly; views build an
    ``ActorDTO`` from the authenticated user and pass it down.
    """

    model_config = ConfigDict(frozen=True)

    user_id: UUID
    role: UserRole

    @classmethod
    def from_user(cls, user: User) -> ActorDTO:
        return cls(user_id=user.id, role=user.role)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_vendor(self) -> bool:
        return self.role == UserRole.VENDOR

    @property
    def is_customer(self) -> bool:
        return self.role == UserRole.CUSTOMER


class UpdateProfileDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v


class AdminUpdateUserDTO(BaseModel):
    """Back-office edit of another account.

    Only the fields that were sent are set; ``role`` is checked against
    ``UserRole`` by the service.
    """

    model_config = ConfigDict(frozen=True)

    role: Optional[str] = None
    is_active: Optional[bool] = None
    name: Optional[str] = None
    business_name: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @classmethod
    def from_payload(cls, payload: dict) -> AdminUpdateUserDTO:
        known = {"role", "is_active", "name", "business_name"}
        return cls(**{k: payload[k] for k in known if payload.get(k) is not None})

    @property
    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)
