"""Health check endpoints."""

import time
from datetime import datetime

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from domain.entities.queue import QueueStatus
from infrastructure.database.repositories.sqlalchemy_queue_repo import SQLAlchemyQueueRepository
from infrastructure.database.session import get_async_session

logger = structlog.get_logger()

router = APIRouter(tags=["health"])

VERSION = "1.0.0"


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    environment: str
    database: str | None = None
    database_latency_ms: float | None = None
    waiting_queues: int | None = None


def _base(status: str) -> dict:
    return {
        "status": status,
        "version": VERSION,
        "timestamp": datetime.utcnow().isoformat(),
        "environment": settings.app_env,
    }


@router.get("/health", response_model=HealthResponse, summary="Liveness probe")
async def health_check() -> HealthResponse:
    """Answer without touching any dependency (for load balancers)."""
    return HealthResponse(**_base("healthy"))


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Database probe",
)
async def detailed_health_check(
    db: AsyncSession = Depends(get_async_session),
) -> HealthResponse:
    """
    Count waiting queues as a round trip through the queue store.

    A failing store reports ``degraded`` with HTTP 200 so dashboards can
    still read the payload.
    """
    started = time.perf_counter()
    try:
        waiting = await SQLAlchemyQueueRepository(db).count_by_status(QueueStatus.WAITING)
    except SQLAlchemyError as e:
        logger.warning("health_database_unreachable", error=str(e))
        return HealthResponse(**_base("degraded"), database=f"unhealthy: {e}")

    return HealthResponse(
        **_base("healthy"),
        database="healthy",
        database_latency_ms=round((time.perf_counter() - started) * 1000, 2),
        waiting_queues=waiting,
    )
