"""Redis cache for contract records.

The cache is an optional accelerator. The client is built once at startup
(or not at all, when no URL is configured) and handed to ``RecordCache``.
Every operation is bounded by a short timeout and reports failures through
``CacheResult`` instead of raising.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar, cast

import redis.asyncio as redis
from pydantic import ValidationError

from pactbot.cache.keys import CacheKeys
from pactbot.cache.result import CacheDegradedError, CacheResult
from pactbot.core.model import ContractRecord

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Default TTL (1 hour)
DEFAULT_TTL = 3600

# Upper bound on a single cache round trip (seconds)
DEFAULT_TIMEOUT = 0.5


def create_redis_client(url: str | None, timeout: float = DEFAULT_TIMEOUT) -> Redis | None:
    """Create a Redis client, or None when no URL is configured.

    The client connects lazily, so an unreachable server only shows up as
    failed operations later on.
    """
    if not url:
        logger.warning("Redis URL not configured, record caching disabled")
        return None
    try:
        return redis.from_url(  # type: ignore[no-untyped-call]
            url,
            decode_responses=False,  # We're storing bytes
            socket_connect_timeout=timeout,
            socket_timeout=timeout,
        )
    except ValueError as e:
        logger.warning("Invalid Redis URL, record caching disabled: %s", e)
        return None


async def close_redis_client(client: Redis | None) -> None:
    """Close Redis connections."""
    if client is not None:
        await client.aclose()


class RecordCache:
    """Cache operations for contract records.

    Stores each record's canonical bytes under ``record:{id}`` with a TTL.
    """

    def __init__(
        self,
        client: Redis | None,
        ttl: int = DEFAULT_TTL,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.client = client
        self.ttl = ttl
        self.timeout = timeout

    def is_available(self) -> bool:
        """Whether a cache client was configured."""
        return self.client is not None

    async def _run(self, operation: Callable[[Redis], Awaitable[T]]) -> CacheResult[T]:
        """Run one bounded cache operation, capturing any failure."""
        if self.client is None:
            return CacheResult.failure(CacheDegradedError("no cache client configured"))
        try:
            value = await asyncio.wait_for(operation(self.client), timeout=self.timeout)
        except Exception as e:
            return CacheResult.failure(e)
        return CacheResult.success(value)

    # -------------------------------------------------------------------------
    # Record caching
    # -------------------------------------------------------------------------

    async def get_record(self, record_id: str) -> CacheResult[ContractRecord]:
        """Get a cached record.

        A missing key is a successful result with no value. An entry that
        does not parse as a record is a failure.
        """

        async def op(client: Redis) -> ContractRecord | None:
            raw = await client.get(CacheKeys.record(record_id))
            if raw is None:
                return None
            try:
                return ContractRecord.model_validate_json(raw)
            except ValidationError as e:
                raise CacheDegradedError(f"corrupt cache entry for record {record_id}") from e

        return await self._run(op)

    async def set_record(self, record_id: str, doc_bytes: bytes) -> CacheResult[bool]:
        """Cache a record's canonical bytes with the configured TTL."""

        async def op(client: Redis) -> bool:
            return bool(await client.set(CacheKeys.record(record_id), doc_bytes, ex=self.ttl))

        return await self._run(op)

    async def delete_record(self, record_id: str) -> CacheResult[int]:
        """Delete a cached record."""

        async def op(client: Redis) -> int:
            return cast(int, await client.delete(CacheKeys.record(record_id)))

        return await self._run(op)

    async def health_check(self) -> bool:
        """Check Redis connectivity."""

        async def op(client: Redis) -> bool:
            return bool(await cast(Awaitable[bool], client.ping()))

        result = await self._run(op)
        return result.ok and bool(result.value)
