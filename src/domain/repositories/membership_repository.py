"""Membership repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.membership import Membership


class IMembershipRepository(Protocol):
    """Repository interface for the membership ledger."""

    async def get(self, queue_id: UUID, user_id: UUID) -> Membership | None:
        """Get the membership a user holds through a queue, pending or realized."""
        ...

    async def get_for_chat(self, chat_id: UUID, user_id: UUID) -> Membership | None:
        """Get a user's membership in a chat."""
        ...

    async def list_for_queue(self, queue_id: UUID) -> list[Membership]:
        """Get pending memberships of a queue."""
        ...

    async def list_for_chat(self, chat_id: UUID) -> list[Membership]:
        """Get all memberships of a chat, oldest first."""
        ...

    async def add(self, membership: Membership) -> Membership:
        """Insert a membership.

        Raises:
            StoreConflictError: A row for the same user and queue already exists.
        """
        ...

    async def remove(self, queue_id: UUID, user_id: UUID) -> bool:
        """Delete a pending membership. Returns False when none existed."""
        ...

    async def remove_all_for_queue(self, queue_id: UUID) -> int:
        """Delete every pending membership of a queue. Returns rows deleted."""
        ...

    async def repoint_to_chat(self, queue_id: UUID, chat_id: UUID) -> int:
        """Move every pending membership of a queue onto a chat. Returns rows moved."""
        ...
