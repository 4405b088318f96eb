"""Chat-scoped user schemas for request/response validation."""

from typing import Optional

from pydantic import Field, field_validator

from .base import BaseSchema, PlatformId


class UserBase(BaseSchema):
    """Fields shared by every user payload."""

    username: Optional[str] = Field(None, description="Optional public username")
    name: str = Field(..., description="Full display name")

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: Optional[str]) -> Optional[str]:
        """Store a blank username as missing."""
        if v is None:
            return None
        v = v.strip()
        return v or None


class UserUpsert(UserBase):
    """Schema for creating or refreshing a user in a chat."""


class UserUpsertItem(UserUpsert):
    """One entry of a bulk upsert."""

    id: PlatformId = Field(..., description="Platform user ID")


class UsersBulkUpsert(BaseSchema):
    """Schema for upserting several users of one chat at once."""

    users: list[UserUpsertItem] = Field(..., min_length=1)


class UserResponse(BaseSchema):
    """Schema for user response data."""

    id: int
    chat_id: int
    username: Optional[str]
    name: str


__all__ = [
    "UserBase",
    "UserUpsert",
    "UserUpsertItem",
    "UsersBulkUpsert",
    "UserResponse",
]
