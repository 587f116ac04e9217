"""Repository utility functions for common database operations."""

import time
from collections.abc import Awaitable, Callable, Iterable, Sequence
from functools import wraps
from typing import ParamSpec, Protocol, TypeVar

from core.logger import get_logger

logger = get_logger(__name__)

# Threshold for logging slow queries (milliseconds)
SLOW_QUERY_THRESHOLD_MS = 500

P = ParamSpec("P")
R = TypeVar("R")


def log_slow_query(
    operation_name: str,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator to log slow repository operations and errors.

    Logs at WARNING level for queries exceeding SLOW_QUERY_THRESHOLD_MS.
    Logs at ERROR level for exceptions (re-raises after logging).

    Usage:
        @log_slow_query("members.search_by_nickname")
        async def search_by_nickname(self, term: str) -> list[Member]:
            ...
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start_time = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                duration_ms = (time.perf_counter() - start_time) * 1000
                logger.error(
                    "db.query.failed",
                    db_operation=operation_name,
                    db_duration_ms=round(duration_ms, 2),
                    db_error_type=type(e).__name__,
                )
                raise
            duration_ms = (time.perf_counter() - start_time) * 1000
            if duration_ms > SLOW_QUERY_THRESHOLD_MS:
                logger.warning(
                    "db.query.slow",
                    db_operation=operation_name,
                    db_duration_ms=round(duration_ms, 2),
                )
            return result

        return wrapper

    return decorator


class _HasId(Protocol):
    id: int


T = TypeVar("T", bound=_HasId)


def order_by_requested_ids(rows: Iterable[T], ids: Sequence[int]) -> list[T]:
    """Order rows by the first position of their id in `ids`.

    IN (...) queries return rows in no guaranteed order; callers that
    preserve request order use this. Rows whose id is absent go last.
    """
    position: dict[int, int] = {}
    for index, requested in enumerate(ids):
        position.setdefault(requested, index)
    return sorted(rows, key=lambda row: position.get(row.id, len(position)))
