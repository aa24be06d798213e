"""Cache-aside store for contract records.

Reads prefer the cache and fall back to the database, repopulating the cache
on the way out. Writes go to the database first; the cache is populated or
invalidated afterwards on a best-effort basis. Cache failures never reach the
caller: every cache result passes through ``absorb``.
"""

from __future__ import annotations

import logging

from pactbot.cache.keys import CacheKeys
from pactbot.cache.redis import RecordCache
from pactbot.cache.result import absorb
from pactbot.core.errors import RecordNotFoundError
from pactbot.core.model import ContractAnalysis, ContractRecord
from pactbot.observability.metrics import record_cache_hit, record_cache_miss
from pactbot.persistence.repositories import ContractRepository

logger = logging.getLogger(__name__)


class RecordStore:
    """Owner-scoped access to contract records with an optional cache."""

    def __init__(self, repo: ContractRepository, cache: RecordCache):
        self.repo = repo
        self.cache = cache

    async def fetch(self, record_id: str, owner_id: str) -> ContractRecord:
        """Get a record by id for its owner.

        Raises:
            RecordNotFoundError: No record matches (id, owner).
            StoreUnavailableError: The cache missed and the database failed.
        """
        if not record_id:
            raise RecordNotFoundError(record_id)

        cached = await self._read_cache(record_id)
        if cached is not None and cached.user_id == owner_id:
            record_cache_hit()
            return cached
        if cached is not None:
            # Ownership is always decided by the database
            logger.debug("Cached record %s has a different owner", record_id)
        record_cache_miss()

        doc_bytes = await self.repo.get_bytes(record_id, owner_id)
        if doc_bytes is None:
            raise RecordNotFoundError(record_id)

        await self._populate(record_id, doc_bytes)
        return ContractRecord.model_validate_json(doc_bytes)

    async def delete(self, record_id: str, owner_id: str) -> None:
        """Delete a record from the database, then evict it from the cache.

        Raises:
            RecordNotFoundError: No record matches (id, owner).
        """
        if not record_id or not await self.repo.exists(record_id, owner_id):
            raise RecordNotFoundError(record_id)

        deleted = await self.repo.delete(record_id, owner_id)
        await self.repo.commit()
        if not deleted:
            logger.info("Record %s was already deleted concurrently", record_id)

        await self._evict(record_id)

    async def create(self, owner_id: str, analysis: ContractAnalysis) -> ContractRecord:
        """Store a new analysis for ``owner_id`` and warm the cache with it."""
        record, doc_bytes = await self.repo.create(owner_id, analysis)
        await self.repo.commit()
        logger.info("Created contract record %s", record.id)

        await self._populate(record.id, doc_bytes)
        return record

    async def list_for_owner(self, owner_id: str) -> list[ContractRecord]:
        """All of an owner's records, newest first. Not cached."""
        rows = await self.repo.list_bytes_for_owner(owner_id)
        return [ContractRecord.model_validate_json(doc_bytes) for doc_bytes in rows]

    # -------------------------------------------------------------------------
    # Best-effort cache access
    # -------------------------------------------------------------------------

    async def _read_cache(self, record_id: str) -> ContractRecord | None:
        if not self.cache.is_available():
            return None
        result = await self.cache.get_record(record_id)
        return absorb(result, None, "get", CacheKeys.record(record_id))

    async def _populate(self, record_id: str, doc_bytes: bytes) -> None:
        if not self.cache.is_available():
            return
        result = await self.cache.set_record(record_id, doc_bytes)
        absorb(result, None, "set", CacheKeys.record(record_id))

    async def _evict(self, record_id: str) -> None:
        if not self.cache.is_available():
            return
        result = await self.cache.delete_record(record_id)
        absorb(result, None, "delete", CacheKeys.record(record_id))
