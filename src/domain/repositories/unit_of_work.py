"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.chat_repository import IChatRepository
from domain.repositories.membership_repository import IMembershipRepository
from domain.repositories.profile_repository import IProfileRepository
from domain.repositories.queue_repository import IQueueRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface for managing transactions.

    Store-level conflicts (lost compare-and-swap, unique violations from a
    racing insert, serialization failures) surface as ``StoreConflictError``.
    """

    queues: IQueueRepository
    memberships: IMembershipRepository
    chats: IChatRepository
    profiles: IProfileRepository

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Exit the context manager."""
        ...
