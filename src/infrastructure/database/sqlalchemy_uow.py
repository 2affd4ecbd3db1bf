"""SQLAlchemy Unit of Work implementation."""

from typing import Any, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import StoreConflictError
from infrastructure.database.errors import is_transient_conflict
from infrastructure.database.repositories.sqlalchemy_chat_repo import SQLAlchemyChatRepository
from infrastructure.database.repositories.sqlalchemy_membership_repo import (
    SQLAlchemyMembershipRepository,
)
from infrastructure.database.repositories.sqlalchemy_profile_repo import (
    SQLAlchemyProfileRepository,
)
from infrastructure.database.repositories.sqlalchemy_queue_repo import SQLAlchemyQueueRepository

logger = structlog.get_logger()


class SQLAlchemyUnitOfWork:
    """Unit of Work implementation using SQLAlchemy.

    Driver errors that signal a lost race are re-raised as
    ``StoreConflictError`` after the transaction is rolled back.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None

    def _require_session(self) -> AsyncSession:
        if not self._session:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._session

    @property
    def queues(self) -> SQLAlchemyQueueRepository:
        """Get queue repository."""
        return SQLAlchemyQueueRepository(self._require_session())

    @property
    def memberships(self) -> SQLAlchemyMembershipRepository:
        """Get membership ledger repository."""
        return SQLAlchemyMembershipRepository(self._require_session())

    @property
    def chats(self) -> SQLAlchemyChatRepository:
        """Get chat repository."""
        return SQLAlchemyChatRepository(self._require_session())

    @property
    def profiles(self) -> SQLAlchemyProfileRepository:
        """Get profile mirror repository."""
        return SQLAlchemyProfileRepository(self._require_session())

    async def commit(self) -> None:
        """Commit the current transaction."""
        if self._session:
            await self._session.commit()

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        if self._session:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        """Enter the context manager and create session."""
        self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Any,
    ) -> None:
        """Exit the context manager, rolling back on error, and cleanup."""
        if not self._session:
            return
        try:
            if exc_type:
                await self.rollback()
        finally:
            await self._session.close()
            self._session = None

        if exc_val is not None and is_transient_conflict(exc_val):
            logger.debug("store_conflict_detected", error=str(exc_val))
            raise StoreConflictError("transaction") from exc_val
