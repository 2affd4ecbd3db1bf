"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"

    # Not found errors (404)
    QUEUE_NOT_FOUND = "QUEUE_NOT_FOUND"
    CHAT_NOT_FOUND = "CHAT_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_QUEUE_CONFIG = "INVALID_QUEUE_CONFIG"

    # Conflict errors (409)
    QUEUE_FULL = "QUEUE_FULL"
    QUEUE_CLOSED = "QUEUE_CLOSED"
    CHAT_CLOSED = "CHAT_CLOSED"

    # Internal concurrency signals
    STORE_CONFLICT = "STORE_CONFLICT"
    CONCURRENCY_RETRIES_EXHAUSTED = "CONCURRENCY_RETRIES_EXHAUSTED"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class AuthorizationError(AppException):
    """Authorization failed."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            error_code=ErrorCode.FORBIDDEN,
            message=message,
            status_code=403,
        )


class QueueNotFoundError(AppException):
    """Queue not found."""

    def __init__(self, queue_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.QUEUE_NOT_FOUND,
            message=f"Queue not found: {queue_id}",
            status_code=404,
            details={"queue_id": queue_id},
        )


class ChatNotFoundError(AppException):
    """Chat not found."""

    def __init__(self, chat_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.CHAT_NOT_FOUND,
            message=f"Chat not found: {chat_id}",
            status_code=404,
            details={"chat_id": chat_id},
        )


class InvalidQueueConfigError(AppException):
    """Participant bounds are not 2 <= min <= max."""

    def __init__(self, min_participants: int, max_participants: int) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_QUEUE_CONFIG,
            message=(
                "Participant bounds must satisfy 2 <= min <= max "
                f"(got min={min_participants}, max={max_participants})"
            ),
            status_code=400,
            details={
                "min_participants": min_participants,
                "max_participants": max_participants,
            },
        )


class QueueFullError(AppException):
    """Queue has reached its participant ceiling."""

    def __init__(self, queue_id: str, max_participants: int) -> None:
        super().__init__(
            error_code=ErrorCode.QUEUE_FULL,
            message="This queue is full",
            status_code=409,
            details={"queue_id": queue_id, "max_participants": max_participants},
        )


class QueueClosedError(AppException):
    """Queue is no longer waiting (already realized or cancelled)."""

    def __init__(self, queue_id: str, status: str) -> None:
        super().__init__(
            error_code=ErrorCode.QUEUE_CLOSED,
            message=f"Queue is no longer accepting changes (status: {status})",
            status_code=409,
            details={"queue_id": queue_id, "status": status},
        )


class ChatClosedError(AppException):
    """Chat is archived and no longer accepts messages."""

    def __init__(self, chat_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.CHAT_CLOSED,
            message="This chat is archived",
            status_code=409,
            details={"chat_id": chat_id},
        )


class StoreConflictError(AppException):
    """A concurrent writer changed the row first.

    Raised by the persistence layer and retried by the services; it is never
    meant to reach a client.
    """

    def __init__(self, entity: str, entity_id: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.STORE_CONFLICT,
            message=f"Concurrent modification of {entity}",
            status_code=409,
            details={"entity": entity, "entity_id": entity_id},
        )


class ConcurrencyRetriesExhaustedError(AppException):
    """Conflicts persisted past the retry budget."""

    def __init__(self, operation: str, attempts: int) -> None:
        super().__init__(
            error_code=ErrorCode.CONCURRENCY_RETRIES_EXHAUSTED,
            message="The service is busy, please try again",
            status_code=503,
            details={"operation": operation, "attempts": attempts},
        )
