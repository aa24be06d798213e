"""Cache layer for PactBot.

Provides an optional Redis cache with the cache-aside pattern:
- Records are cached as canonical bytes under ``record:{id}``
- TTL-based expiration bounds staleness
- Every failure degrades to "as if no cache existed"
"""

from pactbot.cache.keys import CacheKeys
from pactbot.cache.redis import RecordCache, close_redis_client, create_redis_client
from pactbot.cache.result import CacheDegradedError, CacheResult, absorb

__all__ = [
    "CacheKeys",
    "CacheDegradedError",
    "CacheResult",
    "RecordCache",
    "absorb",
    "close_redis_client",
    "create_redis_client",
]
