"""Unit tests for ProfileService."""

from uuid import UUID

import pytest

from core.exceptions import StoreConflictError
from domain.entities.profile import Profile
from domain.services.profile_service import ProfileService
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def service(uow: FakeUnitOfWork) -> ProfileService:
    return ProfileService(lambda: uow)


async def _echo(profile: Profile) -> Profile:
    return profile


class TestRemember:
    @pytest.mark.asyncio
    async def test_upserts_display_fields(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.profiles.upsert.side_effect = _echo

        profile = await service.remember(
            user_id, email="anna@example.com", display_name="Anna", avatar_url="https://img/a"
        )

        assert profile.id == user_id
        assert profile.email == "anna@example.com"
        assert profile.display_name == "Anna"
        assert profile.avatar_url == "https://img/a"
        assert uow.committed

    @pytest.mark.asyncio
    async def test_retries_first_insert_race(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ):
        calls = 0

        async def upsert(profile: Profile) -> Profile:
            nonlocal calls
            calls += 1
            if calls == 1:
                raise StoreConflictError("profile", str(profile.id))
            return profile

        uow.profiles.upsert.side_effect = upsert

        profile = await service.remember(user_id)

        assert profile.id == user_id
        assert calls == 2
