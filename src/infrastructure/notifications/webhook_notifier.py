"""Notifier that forwards chat events to an HTTP endpoint.

The receiving service owns fan-out to devices (push, email, in-app feed).
Each call posts one JSON document:

    {
        "recipient_id": "user-uuid",
        "event": "chat.formed",
        "payload": {"chat_id": "...", ...}
    }
"""

from typing import Any
from uuid import UUID

import httpx
import structlog

logger = structlog.get_logger()


class WebhookNotifier:
    """POST each notification to a configured webhook URL."""

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout_seconds
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)

    async def notify(self, user_id: UUID, event_kind: str, payload: dict[str, Any]) -> None:
        """Deliver one event.

        Raises:
            httpx.HTTPError: Transport failure or non-2xx response; callers
                treat delivery as best-effort.
        """
        body = {
            "recipient_id": str(user_id),
            "event": event_kind,
            "payload": payload,
        }
        response = await self._client.post(self._url, json=body, timeout=self._timeout)
        response.raise_for_status()
        logger.debug(
            "notification_forwarded",
            recipient_id=str(user_id),
            event_kind=event_kind,
            status_code=response.status_code,
        )

    async def aclose(self) -> None:
        """Close the connection pool, unless the caller supplied the client."""
        if self._owns_client:
            await self._client.aclose()
