"""Authentication provider protocol."""

from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID


@dataclass
class TokenUser:
    """The caller, as described by the identity provider's token claims."""

    id: UUID
    email: str = ""
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None


class IAuthProvider(Protocol):
    """Protocol for authentication providers."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a bearer token issued by the identity provider.

        Returns:
            TokenUser if valid, None if invalid
        """
        ...

    def create_token(self, user: TokenUser) -> str:
        """Issue a token for a user (local development and tests only)."""
        ...
