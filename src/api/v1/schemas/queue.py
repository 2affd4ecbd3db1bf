"""Pydantic schemas for Queue API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from api.v1.schemas.chat import ChatResponse


class QueueCreate(BaseModel):
    """Schema for proposing a queue."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=2000)
    intention: str | None = Field(None, max_length=200)
    min_participants: int = Field(..., ge=2)
    max_participants: int = Field(..., ge=2)

    @model_validator(mode="after")
    def _check_bounds(self) -> "QueueCreate":
        if self.max_participants < self.min_participants:
            raise ValueError("max_participants must be >= min_participants")
        return self


class QueueResponse(BaseModel):
    """Schema for Queue response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str | None
    intention: str | None
    min_participants: int
    max_participants: int
    current_count: int
    status: str
    creator_id: UUID
    created_at: datetime
    updated_at: datetime


class QueueListResponse(BaseModel):
    """Schema for list of Queues response."""

    data: list[QueueResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class QueueDetailResponse(BaseModel):
    """Schema for single Queue response."""

    data: QueueResponse


class JoinQueueResult(BaseModel):
    """Outcome of a join request."""

    joined: bool
    realized: bool
    queue: QueueResponse
    chat: ChatResponse | None = None


class JoinQueueResponse(BaseModel):
    """Schema for join response."""

    data: JoinQueueResult
