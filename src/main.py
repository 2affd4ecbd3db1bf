"""Main FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.routes.health import VERSION
from api.routes.health import router as health_router
from api.v1 import router as v1_router
from api.v1.dependencies import get_dispatcher, get_notifier
from core.config import settings
from core.logging import setup_logging
from core.rate_limit import limiter, rate_limit_exceeded_handler
from infrastructure.database.session import engine

logger = structlog.get_logger()

setup_logging()

API_DESCRIPTION = """\
## Group Chat Queues

A member proposes a queue around a shared intention with a minimum and a
maximum number of participants. Others join; the join that reaches the
minimum turns the queue into a persistent group chat holding everyone who
was waiting.

### Queue lifecycle
- **waiting**: collecting participants, up to `max_participants`
- **active**: realized into a chat; no further joins
- **cancelled**: withdrawn by its creator

### Authentication
Every `/api/v1` endpoint needs a bearer token from the identity provider:
```
Authorization: Bearer <your_token>
```
"""

OPENAPI_TAGS = [
    {"name": "health", "description": "Liveness and database probes"},
    {"name": "queues", "description": "Propose, join, leave and cancel queues"},
    {"name": "chats", "description": "Realized group chats and their message log"},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log configuration on startup; on shutdown finish notifications and release pools."""
    logger.info(
        "app_starting",
        environment=settings.app_env,
        notifier="webhook" if settings.notifier_webhook_url else "log",
        jwks_configured=bool(settings.jwks_url),
    )
    if settings.is_production and settings.jwt_secret_key == "CHANGE-ME-IN-PRODUCTION":
        logger.warning("default_jwt_secret_in_production")
    yield
    dispatcher = get_dispatcher()
    if dispatcher.pending:
        logger.info("draining_notifications", pending=dispatcher.pending)
    await dispatcher.drain()
    await get_notifier().aclose()
    await engine.dispose()
    logger.info("app_stopped")


def _install_middleware(app: FastAPI) -> None:
    # Starlette wraps in reverse order: the last one added runs first.
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description=API_DESCRIPTION,
        version=VERSION,
        debug=settings.debug,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        openapi_tags=OPENAPI_TAGS,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    setup_exception_handlers(app)
    _install_middleware(app)

    app.include_router(health_router)
    app.include_router(v1_router, prefix="/api/v1")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )
