"""Global pytest configuration and fixtures.

Provides in-memory stand-ins for the Redis client and the contract
repository so the record store can be tested without external services.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from pactbot.cache.redis import RecordCache
from pactbot.config import settings
from pactbot.core.canonicalize import canonical_bytes_from_model
from pactbot.core.errors import StoreUnavailableError
from pactbot.core.model import ContractAnalysis, ContractRecord
from pactbot.records.store import RecordStore


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: tests that need Docker for PostgreSQL and Redis"
    )


class FakeRedis:
    """Minimal async Redis client backed by a dict.

    Set ``fail`` to make every call raise a connection error, or ``hang`` to
    make every call block until cancelled.
    """

    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}
        self.ttls: dict[str, int | None] = {}
        self.fail = False
        self.hang = False
        self.calls: list[tuple[str, str]] = []

    async def _check(self) -> None:
        if self.hang:
            await asyncio.Event().wait()
        if self.fail:
            raise RedisConnectionError("Connection refused")

    async def get(self, key: str) -> bytes | None:
        self.calls.append(("get", key))
        await self._check()
        return self.data.get(key)

    async def set(self, key: str, value: bytes, ex: int | None = None) -> bool:
        self.calls.append(("set", key))
        await self._check()
        self.data[key] = value
        self.ttls[key] = ex
        return True

    async def delete(self, *keys: str) -> int:
        await self._check()
        removed = 0
        for key in keys:
            self.calls.append(("delete", key))
            if self.data.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed

    async def ping(self) -> bool:
        await self._check()
        return True

    async def aclose(self) -> None:
        pass


class FakeContractRepository:
    """Dict-backed repository with the same interface as ContractRepository.

    Set ``fail`` to make every call raise StoreUnavailableError.
    """

    def __init__(self) -> None:
        self.rows: dict[str, tuple[str, bytes, datetime]] = {}
        self.fail = False
        self.commits = 0
        self._clock = datetime(2026, 1, 1, tzinfo=UTC)
        self._counter = 0

    def _check(self, operation: str) -> None:
        if self.fail:
            raise StoreUnavailableError(operation)

    def seed(self, record: ContractRecord) -> bytes:
        doc_bytes = canonical_bytes_from_model(record)
        self.rows[record.id] = (record.user_id, doc_bytes, record.created_at)
        return doc_bytes

    async def get_bytes(self, record_id: str, owner_id: str) -> bytes | None:
        self._check("get")
        row = self.rows.get(record_id)
        if row is None or row[0] != owner_id:
            return None
        return row[1]

    async def exists(self, record_id: str, owner_id: str) -> bool:
        return await self.get_bytes(record_id, owner_id) is not None

    async def list_bytes_for_owner(self, owner_id: str) -> list[bytes]:
        self._check("list")
        owned = [row for row in self.rows.values() if row[0] == owner_id]
        owned.sort(key=lambda row: row[2], reverse=True)
        return [row[1] for row in owned]

    async def create(
        self, owner_id: str, analysis: ContractAnalysis
    ) -> tuple[ContractRecord, bytes]:
        self._check("create")
        self._counter += 1
        now = self._clock + timedelta(minutes=self._counter)
        record = ContractRecord(
            **analysis.model_dump(),
            id=f"rec{self._counter:04d}",
            user_id=owner_id,
            created_at=now,
            updated_at=now,
        )
        return record, self.seed(record)

    async def delete(self, record_id: str, owner_id: str) -> bool:
        self._check("delete")
        row = self.rows.get(record_id)
        if row is None or row[0] != owner_id:
            return False
        del self.rows[record_id]
        return True

    async def commit(self) -> None:
        self._check("commit")
        self.commits += 1


def make_analysis(**overrides: Any) -> ContractAnalysis:
    data: dict[str, Any] = {
        "contractText": "This Employment Agreement is entered into by ...",
        "contractType": "Employment",
        "summary": "Standard employment agreement with a broad non-compete.",
        "risks": [
            {"description": "Non-compete lasts 24 months", "severity": "high"},
        ],
        "opportunities": [
            {"description": "Equity vests over 3 years", "impact": "medium"},
        ],
        "negotiationPoints": [
            {"description": "Shorten the non-compete", "priority": "high"},
        ],
        "overallScore": 80,
    }
    data.update(overrides)
    return ContractAnalysis.model_validate(data)


def make_record(
    record_id: str = "abc123", owner_id: str = "u1", **overrides: Any
) -> ContractRecord:
    created = overrides.pop("created_at", datetime(2026, 1, 1, 12, 0, tzinfo=UTC))
    return ContractRecord(
        **make_analysis(**overrides).model_dump(),
        id=record_id,
        user_id=owner_id,
        created_at=created,
        updated_at=created,
    )


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def record_cache(fake_redis: FakeRedis) -> RecordCache:
    return RecordCache(fake_redis, ttl=3600, timeout=0.05)  # type: ignore[arg-type]


@pytest.fixture
def repo() -> FakeContractRepository:
    return FakeContractRepository()


@pytest.fixture
def store(repo: FakeContractRepository, record_cache: RecordCache) -> RecordStore:
    return RecordStore(repo, record_cache)  # type: ignore[arg-type]


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def analysis_factory():
    return make_analysis


@pytest.fixture
def trusted_user_header(monkeypatch) -> str:
    """Trust X-User-ID as if a gateway had set it."""
    monkeypatch.setattr(settings, "user_id_header", "X-User-ID")
    return "X-User-ID"
