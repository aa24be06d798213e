"""Result type for best-effort cache operations.

Cache calls never raise. They return a ``CacheResult`` holding either a value
or the error that occurred, and ``absorb`` is the one place that turns an
error into the caller's fallback (a miss for reads, a no-op for writes).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, TypeVar

from pactbot.observability.metrics import record_cache_error

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheDegradedError(Exception):
    """The cache is unconfigured, unreachable or returned unusable data."""


@dataclass(frozen=True)
class CacheResult(Generic[T]):
    """Outcome of a single cache operation."""

    value: T | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T | None = None) -> "CacheResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: BaseException) -> "CacheResult[T]":
        return cls(error=error)


def absorb(result: CacheResult[T], default: T | None, operation: str, key: str) -> T | None:
    """Return the result's value, or ``default`` if the operation failed.

    Failures are logged and counted, never re-raised.

    Args:
        result: Outcome of the cache operation
        default: Fallback value (None for a miss or a no-op)
        operation: Cache operation name for logs and metrics
        key: Cache key the operation touched
    """
    if result.ok:
        return result.value

    logger.warning(
        "Cache %s failed for %s, continuing without cache: %r",
        operation,
        key,
        result.error,
    )
    record_cache_error(operation)
    return default
