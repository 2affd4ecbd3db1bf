"""Bounded retry of units of work that lost a store-level race."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog

from core.exceptions import ConcurrencyRetriesExhaustedError, StoreConflictError

logger = structlog.get_logger()

T = TypeVar("T")


async def run_with_retries(
    operation: str,
    attempt: Callable[[], Awaitable[T]],
    max_attempts: int,
    backoff_seconds: float,
) -> T:
    """Run ``attempt`` until it completes without a ``StoreConflictError``.

    Each call to ``attempt`` must open its own unit of work so that every retry
    re-reads state and re-checks preconditions. The delay doubles after each
    conflict. Any other exception propagates immediately.

    Raises:
        ConcurrencyRetriesExhaustedError: Every attempt conflicted.
    """
    for attempt_no in range(1, max_attempts + 1):
        try:
            return await attempt()
        except StoreConflictError as exc:
            if attempt_no == max_attempts:
                logger.error(
                    "store_conflict_retries_exhausted",
                    operation=operation,
                    attempts=attempt_no,
                    entity=exc.details.get("entity") if exc.details else None,
                )
                raise ConcurrencyRetriesExhaustedError(operation, attempt_no) from exc

            delay = backoff_seconds * (2 ** (attempt_no - 1))
            logger.info(
                "store_conflict_retry",
                operation=operation,
                attempt=attempt_no,
                delay_seconds=delay,
            )
            await asyncio.sleep(delay)

    raise ConcurrencyRetriesExhaustedError(operation, max_attempts)
