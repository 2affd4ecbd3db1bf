"""JWT authentication provider implementation.

Tokens are issued by the external identity provider. Two signing modes are
accepted:

- ES256, verified against the provider's JWKS document;
- HS256 with the shared secret from settings (local development and tests).

Expected claims:
    {
        "sub": "user-uuid",
        "email": "user@example.com",
        "name": "Display Name",
        "picture": "https://...",
        "exp": 1234567890
    }
"""

from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import UUID

import httpx
import structlog
from jose import JWTError, jwt
from jose.backends import ECKey

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = structlog.get_logger()


class JWKSCache:
    """kid -> JWK mapping fetched lazily from the identity provider."""

    def __init__(self, url: str) -> None:
        self._url = url
        self._keys: dict[str, dict[str, Any]] | None = None

    def clear(self) -> None:
        self._keys = None

    async def get(self, kid: str) -> dict[str, Any] | None:
        """Look up a key, refetching once when the kid is unknown (key rotation)."""
        keys = await self._load()
        if kid not in keys:
            self.clear()
            keys = await self._load()
        return keys.get(kid)

    async def _load(self) -> dict[str, dict[str, Any]]:
        if self._keys is not None:
            return self._keys
        if not self._url:
            return {}
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(self._url, timeout=10.0)
                response.raise_for_status()
        except httpx.HTTPError:
            logger.exception("jwks_fetch_failed", url=self._url)
            return {}

        self._keys = {
            key["kid"]: key for key in response.json().get("keys", []) if key.get("kid")
        }
        logger.info("jwks_fetched", key_count=len(self._keys))
        return self._keys


class JWTAuthProvider:
    """JWT-based authentication provider."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
        jwks: JWKSCache | None = None,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes
        self._jwks = jwks or JWKSCache(settings.jwks_url)

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """Validate a JWT and extract the caller.

        Returns:
            TokenUser if valid, None if invalid, expired or missing ``sub``
        """
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg") == "ES256":
                payload = await self._decode_es256(token, header)
            else:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )
        except JWTError:
            return None

        if not payload or not payload.get("sub"):
            return None

        try:
            user_id = UUID(payload["sub"])
        except ValueError:
            return None

        return TokenUser(
            id=user_id,
            email=payload.get("email") or "",
            display_name=payload.get("name") or payload.get("preferred_username"),
            avatar_url=payload.get("picture"),
        )

    async def _decode_es256(self, token: str, header: dict[str, Any]) -> Optional[dict[str, Any]]:
        kid = header.get("kid")
        if not kid:
            return None

        key_data = await self._jwks.get(kid)
        if not key_data:
            logger.warning("jwks_key_not_found", kid=kid)
            return None

        return jwt.decode(
            token,
            ECKey(key_data, algorithm="ES256"),
            algorithms=["ES256"],
            options={"verify_aud": False},
        )

    def create_token(self, user: TokenUser) -> str:
        """Create an HS256 token for a user (local development and tests)."""
        payload: dict[str, Any] = {
            "sub": str(user.id),
            "email": user.email,
            "name": user.display_name,
            "picture": user.avatar_url,
            "exp": datetime.utcnow() + timedelta(minutes=self._expire_minutes),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
