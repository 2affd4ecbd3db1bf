"""Profile repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Read access to the identity provider's profile mirror."""

    async def get_many(self, ids: list[UUID]) -> dict[UUID, Profile]:
        """Get profiles keyed by user ID; unknown IDs are absent."""
        ...

    async def upsert(self, profile: Profile) -> Profile:
        """Insert or refresh a mirrored profile."""
        ...
