"""Queue domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

MIN_PARTICIPANTS_FLOOR = 2


class QueueStatus(str, Enum):
    """Lifecycle state of a matchmaking queue.

    ``waiting`` is the only non-terminal state.
    """

    WAITING = "waiting"
    ACTIVE = "active"
    CANCELLED = "cancelled"


@dataclass
class Queue:
    """Domain entity for a proposed group chat collecting participants."""

    creator_id: UUID
    title: str
    min_participants: int
    max_participants: int
    id: UUID = field(default_factory=uuid4)
    description: str | None = None
    intention: str | None = None
    current_count: int = 1
    status: QueueStatus = QueueStatus.WAITING
    version: int = 1
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_waiting(self) -> bool:
        return self.status == QueueStatus.WAITING

    @property
    def is_full(self) -> bool:
        return self.current_count >= self.max_participants

    @property
    def threshold_reached(self) -> bool:
        return self.current_count >= self.min_participants


def valid_bounds(min_participants: int, max_participants: int) -> bool:
    """Check ``2 <= min <= max``."""
    return MIN_PARTICIPANTS_FLOOR <= min_participants <= max_participants
