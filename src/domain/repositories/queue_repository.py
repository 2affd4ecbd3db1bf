"""Queue repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.queue import Queue, QueueStatus


class IQueueRepository(Protocol):
    """Repository interface for Queue entities.

    Per-queue exclusion lives here: ``get(..., for_update=True)`` takes a row
    lock where the backend supports one, and ``save`` only writes when the
    stored version still matches ``expected_version``.
    """

    async def get(self, id: UUID, for_update: bool = False) -> Queue | None:
        """Get a queue by ID, optionally locking its row."""
        ...

    async def list_by_status(self, status: QueueStatus) -> list[Queue]:
        """Get all queues in a given status, newest first."""
        ...

    async def create(self, queue: Queue) -> Queue:
        """Create a new queue."""
        ...

    async def save(self, queue: Queue, expected_version: int) -> Queue:
        """Persist count and status if nobody else wrote since ``expected_version``.

        Raises:
            StoreConflictError: The stored version moved on.
        """
        ...

    async def count_by_status(self, status: QueueStatus) -> int:
        """Count queues in a given status."""
        ...
