"""Authentication dependencies for FastAPI."""

from functools import lru_cache
from typing import Annotated

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.exceptions import AuthenticationError, ErrorCode
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser

# Shows the bearer scheme in the OpenAPI docs; missing headers are reported
# by get_current_user in the standard error envelope.
bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_auth_provider() -> JWTAuthProvider:
    """Get the auth provider (one JWKS cache per process)."""
    return JWTAuthProvider()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> TokenUser:
    """Resolve the caller from the bearer token and tag the request log with it.

    Raises:
        AuthenticationError: No token, or the token did not validate.
    """
    if credentials is None:
        raise AuthenticationError(
            message="Authorization header required",
            error_code=ErrorCode.UNAUTHORIZED,
        )

    user = await auth_provider.validate_token(credentials.credentials)
    if user is None:
        raise AuthenticationError(
            message="Invalid or expired token",
            error_code=ErrorCode.INVALID_TOKEN,
        )

    structlog.contextvars.bind_contextvars(user_id=str(user.id))
    return user


CurrentUser = Annotated[TokenUser, Depends(get_current_user)]
