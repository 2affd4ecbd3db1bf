"""Pydantic schemas for Chat API."""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ChatResponse(BaseModel):
    """Schema for Chat response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    queue_id: UUID
    title: str
    description: str | None
    intention: str | None
    member_count: int
    status: str
    created_at: datetime
    updated_at: datetime


class ChatListResponse(BaseModel):
    """Schema for list of Chats response."""

    data: list[ChatResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class ChatDetailResponse(BaseModel):
    """Schema for single Chat response."""

    data: ChatResponse


class ChatMemberResponse(BaseModel):
    """Schema for a chat member with display fields."""

    user_id: UUID
    role: str
    joined_at: datetime
    display_name: str | None = None
    avatar_url: str | None = None


class ChatMemberListResponse(BaseModel):
    """Schema for list of chat members."""

    data: list[ChatMemberResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class MessageCreate(BaseModel):
    """Schema for posting a message. System messages cannot be posted by users."""

    body: str = Field(..., min_length=1, max_length=4000)
    type: Literal["message", "prayer_request"] = "message"


class MessageResponse(BaseModel):
    """Schema for Message response."""

    id: int
    chat_id: UUID
    user_id: UUID
    body: str
    type: str
    created_at: datetime


class MessageListResponse(BaseModel):
    """Schema for list of Messages response."""

    data: list[MessageResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class MessageDetailResponse(BaseModel):
    """Schema for single Message response."""

    data: MessageResponse
