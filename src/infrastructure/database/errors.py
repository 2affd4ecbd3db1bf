"""Classification of driver errors into lost races and real failures."""

from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError

# PostgreSQL SQLSTATEs
UNIQUE_VIOLATION = "23505"
_RETRYABLE_SQLSTATES = frozenset({"40001", "40P01"})


def _sqlstate(exc: DBAPIError) -> str | None:
    orig = exc.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def is_unique_violation(exc: BaseException) -> bool:
    """Whether an insert lost to a concurrent one on a unique key.

    Check and foreign-key violations are bugs, not races, and are excluded.
    """
    if not isinstance(exc, IntegrityError):
        return False
    if _sqlstate(exc) == UNIQUE_VIOLATION:
        return True
    return "UNIQUE constraint failed" in str(exc.orig)


def is_transient_conflict(exc: BaseException) -> bool:
    """Whether a driver error means "another transaction got there first"."""
    if isinstance(exc, IntegrityError):
        return is_unique_violation(exc)
    if not isinstance(exc, DBAPIError):
        return False
    if _sqlstate(exc) in _RETRYABLE_SQLSTATES:
        return True
    return isinstance(exc, OperationalError) and "database is locked" in str(exc.orig)
