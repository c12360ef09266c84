from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

import structlog
from sqlalchemy import exc as sa_exc

from draw_engine.core.config import get_settings
from draw_engine.core.errors import TransientStoreError

T = TypeVar("T")

logger = structlog.get_logger("draw_engine.db.retry")

settings = get_settings()

_TRANSIENT_MESSAGE_MARKERS = (
    "database is locked",
    "database is busy",
    "database table is locked",
    "connection was closed",
    "connection is closed",
    "connection reset",
    "server closed the connection",
    "terminating connection",
    "could not serialize access",
    "deadlock detected",
)
# serialization_failure, deadlock_detected, admin_shutdown, cannot_connect_now
_TRANSIENT_SQLSTATES = {"40001", "40P01", "57P01", "57P03"}


def _parse_backoff_ms(raw: str) -> tuple[int, ...]:
    values: list[int] = []
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        try:
            values.append(max(0, int(chunk)))
        except ValueError:
            continue
    return tuple(values) or (100, 300, 1000)


STORE_RETRY_ATTEMPTS = max(0, int(settings.store_retry_attempts))
STORE_RETRY_BACKOFF_MS = _parse_backoff_ms(settings.store_retry_backoff_ms)


def is_transient_store_error(exc: BaseException) -> bool:
    if isinstance(exc, sa_exc.TimeoutError):
        return True
    if not isinstance(exc, sa_exc.DBAPIError):
        return False
    if exc.connection_invalidated:
        return True
    sqlstate = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
    if sqlstate in _TRANSIENT_SQLSTATES or str(sqlstate or "").startswith("08"):
        return True
    message = str(exc.orig or exc).lower()
    return any(marker in message for marker in _TRANSIENT_MESSAGE_MARKERS)


async def run_with_store_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    name: str,
    retries: int | None = None,
    backoff_ms: Sequence[int] | None = None,
) -> T:
    """Run one unit of work, retrying it when the store reports a transient failure.

    `operation` must open its own transaction so every attempt starts clean.
    """
    resolved_retries = STORE_RETRY_ATTEMPTS if retries is None else max(0, int(retries))
    delays = tuple(backoff_ms) if backoff_ms is not None else STORE_RETRY_BACKOFF_MS
    attempt = 0
    while True:
        attempt += 1
        try:
            return await operation()
        except Exception as exc:
            if not is_transient_store_error(exc):
                raise
            if attempt > resolved_retries:
                logger.warning(
                    "store_retry_exhausted",
                    operation=name,
                    attempts=attempt,
                    error_type=type(exc).__name__,
                )
                raise TransientStoreError(f"{name} failed after {attempt} attempts: {exc}") from exc
            delay_ms = delays[min(attempt - 1, len(delays) - 1)] if delays else 0
            logger.info(
                "store_retry_scheduled",
                operation=name,
                attempt=attempt,
                delay_ms=delay_ms,
                error_type=type(exc).__name__,
            )
            await asyncio.sleep(delay_ms / 1000)
