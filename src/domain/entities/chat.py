"""Chat domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from domain.entities.queue import Queue


class ChatStatus(str, Enum):
    """Status of a realized group chat."""

    ACTIVE = "active"
    ARCHIVED = "archived"


class MessageType(str, Enum):
    """Kind of chat message."""

    MESSAGE = "message"
    PRAYER_REQUEST = "prayer_request"
    SYSTEM = "system"


@dataclass
class Chat:
    """Domain entity for a group chat materialized from a queue.

    ``member_count`` is a snapshot taken at realization and never shrinks.
    """

    queue_id: UUID
    title: str
    member_count: int
    id: UUID = field(default_factory=uuid4)
    description: str | None = None
    intention: str | None = None
    status: ChatStatus = ChatStatus.ACTIVE
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def from_queue(cls, queue: Queue) -> "Chat":
        """Build the chat a satisfied queue realizes into."""
        return cls(
            queue_id=queue.id,
            title=queue.title,
            description=queue.description,
            intention=queue.intention,
            member_count=queue.current_count,
        )


@dataclass
class Message:
    """Domain entity for an entry in a chat log.

    ``id`` is assigned by the store and doubles as the insertion sequence.
    """

    chat_id: UUID
    user_id: UUID
    body: str
    type: MessageType = MessageType.MESSAGE
    id: int | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class ChatMember:
    """Read model of a chat participant with display fields."""

    user_id: UUID
    role: str
    joined_at: datetime
    display_name: str | None = None
    avatar_url: str | None = None
