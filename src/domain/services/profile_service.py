"""Keeps the local profile mirror in step with the identity provider."""

from collections.abc import Callable
from uuid import UUID

from domain.entities.profile import Profile
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.retry import run_with_retries

MAX_ATTEMPTS = 3
BACKOFF_SECONDS = 0.01


class ProfileService:
    """Service layer for the identity mirror used to render chat members."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def remember(
        self,
        user_id: UUID,
        email: str = "",
        display_name: str | None = None,
        avatar_url: str | None = None,
    ) -> Profile:
        """Record the caller's current display fields."""
        profile = Profile(
            id=user_id,
            email=email,
            display_name=display_name,
            avatar_url=avatar_url,
        )

        async def attempt() -> Profile:
            async with self._uow_factory() as uow:
                saved = await uow.profiles.upsert(profile)
                await uow.commit()
                return saved

        return await run_with_retries("remember_profile", attempt, MAX_ATTEMPTS, BACKOFF_SECONDS)
