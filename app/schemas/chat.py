"""Chat schemas for request/response serialization."""

from __future__ import annotations

from pydantic import Field

from app.domains.chat.status import CleaningState

from .base import BaseSchema, PlatformId
from .user import UserResponse


class ChatUpsert(BaseSchema):
    """Schema for creating or renaming a chat."""

    name: str = Field(..., description="Chat title, may be empty")


class ChatResponse(BaseSchema):
    """Schema for chat response."""

    id: int
    name: str


class ChatWithUsers(ChatResponse):
    """Schema for a chat with its tracked users."""

    users: list[UserResponse] = []


class ChatListResponse(BaseSchema):
    """Schema for chat list response."""

    chats: list[ChatResponse]
    total: int
    page: int
    size: int
    has_next: bool
    has_prev: bool
    total_pages: int


class ChatMigrateRequest(BaseSchema):
    """Schema for moving a chat to a new platform id."""

    new_id: PlatformId = Field(..., description="Identifier the chat migrated to")


class ChatClearRequest(BaseSchema):
    """Schema for queueing several chats for cleaning."""

    chats: list[PlatformId] = Field(..., min_length=1, description="Chat IDs to clean")


class CleaningStatusResponse(BaseSchema):
    """Cleaning state of a single chat."""

    state: CleaningState
    error: str | None = None


__all__ = [
    "ChatUpsert",
    "ChatResponse",
    "ChatWithUsers",
    "ChatListResponse",
    "ChatMigrateRequest",
    "ChatClearRequest",
    "CleaningStatusResponse",
]
