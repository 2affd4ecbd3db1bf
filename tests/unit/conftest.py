"""Shared fixtures for unit tests."""

import asyncio
from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from domain.entities.queue import Queue


class FakeUnitOfWork:
    """Fake Unit of Work with repository mocks for unit testing."""

    def __init__(self) -> None:
        self.queues = AsyncMock()
        self.memberships = AsyncMock()
        self.chats = AsyncMock()
        self.profiles = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


class FakeNotifier:
    """Records every notification instead of delivering it."""

    def __init__(self, fail: bool = False, delay: float = 0.0) -> None:
        self.sent: list[tuple[UUID, str, dict[str, Any]]] = []
        self._fail = fail
        self._delay = delay

    async def notify(self, user_id: UUID, event_kind: str, payload: dict[str, Any]) -> None:
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._fail:
            raise RuntimeError("notifier down")
        self.sent.append((user_id, event_kind, payload))


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def user_id() -> UUID:
    """A random user ID."""
    return uuid4()


@pytest.fixture
def creator_id() -> UUID:
    """A random queue creator ID (distinct from user_id)."""
    return uuid4()


@pytest.fixture
def queue(creator_id: UUID) -> Queue:
    """A waiting 3..5 queue holding only its creator."""
    return Queue(
        creator_id=creator_id,
        title="Evening prayer",
        min_participants=3,
        max_participants=5,
    )
