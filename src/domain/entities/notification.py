"""Notification event constants and payloads handed to the notifier."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

# Format: {entity_type}.{action}


class NotificationEvents:
    """Event kinds the matchmaker emits."""

    CHAT_FORMED = "chat.formed"
    CHAT_MESSAGE = "chat.message"


@dataclass
class Notification:
    """A single notifier call: one recipient, one event."""

    recipient_id: UUID
    event_kind: str
    payload: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.utcnow)
