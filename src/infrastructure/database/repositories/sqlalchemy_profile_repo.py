"""SQLAlchemy implementation of Profile repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import Profile
from infrastructure.database.models import ProfileModel


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_many(self, ids: list[UUID]) -> dict[UUID, Profile]:
        """Get profiles keyed by user ID."""
        if not ids:
            return {}
        stmt = select(ProfileModel).where(ProfileModel.id.in_(ids))
        result = await self._session.execute(stmt)
        return {model.id: self._to_entity(model) for model in result.scalars()}

    async def upsert(self, profile: Profile) -> Profile:
        """Insert a profile or refresh its display fields."""
        model = await self._session.get(ProfileModel, profile.id)
        if model is None:
            model = ProfileModel(id=profile.id)
            self._session.add(model)
        model.email = profile.email
        model.display_name = profile.display_name
        model.avatar_url = profile.avatar_url
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            id=model.id,
            email=model.email,
            display_name=model.display_name,
            avatar_url=model.avatar_url,
            updated_at=model.updated_at,
        )
