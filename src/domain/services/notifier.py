"""Notifier protocol and best-effort delivery."""

import asyncio
from collections.abc import Iterable
from typing import Any, Protocol
from uuid import UUID

import structlog

from domain.entities.notification import Notification

logger = structlog.get_logger()


class INotifier(Protocol):
    """Fan-out channel for chat events (implemented outside the matchmaker)."""

    async def notify(self, user_id: UUID, event_kind: str, payload: dict[str, Any]) -> None:
        """Deliver one event to one user."""
        ...


async def _deliver_one(notifier: INotifier, notification: Notification) -> bool:
    try:
        await notifier.notify(
            notification.recipient_id,
            notification.event_kind,
            notification.payload,
        )
    except Exception:
        logger.exception(
            "notification_delivery_failed",
            recipient_id=str(notification.recipient_id),
            event_kind=notification.event_kind,
        )
        return False
    return True


async def deliver(notifier: INotifier | None, notifications: Iterable[Notification]) -> int:
    """Hand notifications to the notifier concurrently.

    Failures are logged and swallowed so they can never undo or fail the
    operation that produced them. Returns the number delivered.
    """
    if notifier is None:
        return 0
    results = await asyncio.gather(*(_deliver_one(notifier, n) for n in notifications))
    return sum(results)


class NotificationDispatcher:
    """Runs notifier fan-out as background tasks, off the request path.

    Tasks are tracked until they finish so that shutdown (and tests) can
    wait for in-flight deliveries with ``drain``.
    """

    def __init__(self, notifier: INotifier | None) -> None:
        self._notifier = notifier
        self._pending: set[asyncio.Task[int]] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def dispatch(self, notifications: Iterable[Notification]) -> None:
        """Schedule delivery after the state change has committed."""
        batch = list(notifications)
        if self._notifier is None or not batch:
            return
        task = asyncio.create_task(
            deliver(self._notifier, batch),
            name=f"notify:{batch[0].event_kind}",
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for every scheduled delivery to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))
