"""Exception handlers for the FastAPI application.

Every error leaves the API as ``{"error_code", "message", "details"}``.
"""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.exceptions import AppException, ErrorCode, StoreConflictError

logger = structlog.get_logger()

BUSY_MESSAGE = "The service is busy, please try again"


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def error_response(
    status_code: int,
    error_code: str,
    message: str,
    details: Any | None = None,
) -> JSONResponse:
    """Render the standard error envelope."""
    return JSONResponse(
        status_code=status_code,
        content={"error_code": error_code, "message": message, "details": details},
    )


async def store_conflict_handler(request: Request, exc: StoreConflictError) -> JSONResponse:
    """Conflicts are retried inside the services; one escaping is a bug."""
    logger.error("store_conflict_escaped", details=exc.details)
    return error_response(
        503,
        ErrorCode.INTERNAL_ERROR.value,
        BUSY_MESSAGE,
        {"request_id": _request_id(request)},
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log("app_exception", error_code=exc.error_code.value, message=exc.message)
    return error_response(exc.status_code, exc.error_code.value, exc.message, exc.details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Routing errors (404 on unknown paths, 405) in the same envelope."""
    return error_response(exc.status_code, "HTTP_ERROR", str(exc.detail))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    logger.info("validation_error", error_count=len(errors))
    return error_response(
        422,
        ErrorCode.VALIDATION_ERROR.value,
        "Request validation failed",
        [
            {
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in errors
        ],
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    message = str(exc) if not settings.is_production else "An unexpected error occurred"
    return error_response(
        500,
        ErrorCode.INTERNAL_ERROR.value,
        message,
        {"request_id": _request_id(request)},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Handlers resolve by the most specific class, so ``StoreConflictError``
    never renders with the internal 409 of its ``AppException`` base.
    """
    app.add_exception_handler(StoreConflictError, store_conflict_handler)  # type: ignore[arg-type]
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
