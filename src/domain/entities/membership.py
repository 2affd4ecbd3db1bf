"""Membership domain entities.

A membership is a participant's claim on either a pending queue or the chat
that queue turned into. The live pointer is modelled as a tagged union so that
a membership always targets exactly one thing; ``queue_id`` is kept on every
row as the historical origin.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Union
from uuid import UUID, uuid4


class MembershipRole(str, Enum):
    """Role within a queue or chat."""

    CREATOR = "creator"
    MEMBER = "member"


@dataclass(frozen=True)
class QueueTarget:
    """Membership still pending on a waiting queue."""

    queue_id: UUID


@dataclass(frozen=True)
class ChatTarget:
    """Membership realized into a chat."""

    chat_id: UUID


MembershipTarget = Union[QueueTarget, ChatTarget]


@dataclass
class Membership:
    """Domain entity for a queue or chat membership."""

    queue_id: UUID
    user_id: UUID
    target: MembershipTarget
    role: MembershipRole = MembershipRole.MEMBER
    id: UUID = field(default_factory=uuid4)
    joined_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def for_queue(
        cls,
        queue_id: UUID,
        user_id: UUID,
        role: MembershipRole = MembershipRole.MEMBER,
    ) -> "Membership":
        return cls(
            queue_id=queue_id,
            user_id=user_id,
            target=QueueTarget(queue_id),
            role=role,
        )

    @property
    def chat_id(self) -> UUID | None:
        if isinstance(self.target, ChatTarget):
            return self.target.chat_id
        return None

    @property
    def is_pending(self) -> bool:
        return isinstance(self.target, QueueTarget)

    def repoint(self, chat_id: UUID) -> "Membership":
        """Return this membership moved from its queue onto ``chat_id``."""
        if not self.is_pending:
            raise ValueError(f"Membership {self.id} already belongs to chat {self.chat_id}")
        return replace(self, target=ChatTarget(chat_id))
