"""Notifier that only records events in the structured log."""

from typing import Any
from uuid import UUID

import structlog

logger = structlog.get_logger()


class LogNotifier:
    """Default notifier used when no delivery endpoint is configured."""

    async def notify(self, user_id: UUID, event_kind: str, payload: dict[str, Any]) -> None:
        logger.info(
            "notification_emitted",
            recipient_id=str(user_id),
            event_kind=event_kind,
            payload=payload,
        )

    async def aclose(self) -> None:
        pass
