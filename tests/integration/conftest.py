"""Integration test fixtures using Docker.

Provides containerized PostgreSQL and Redis for realistic testing.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from pactbot.cache.redis import RecordCache
from pactbot.persistence.repositories import ContractRepository
from pactbot.persistence.tables import Base
from pactbot.records.store import RecordStore


def _docker_host(client: Any) -> str:
    """Resolve the host to connect to published container ports."""
    base_url = client.api.base_url
    if base_url.startswith(("unix://", "npipe://", "http+docker://")):
        return "localhost"
    return urlparse(base_url).hostname or "localhost"


@dataclass
class DockerService:
    """Handle for a running container and its connection info."""

    container: Any
    host: str

    def port(self, container_port: int) -> int:
        """Get the bound host port for a container port."""
        self.container.reload()
        key = f"{container_port}/tcp"
        ports = self.container.attrs["NetworkSettings"]["Ports"].get(key)
        if not ports:
            raise RuntimeError(f"Port {key} not exposed on container {self.container.short_id}")
        return int(ports[0]["HostPort"])


@contextmanager
def run_container(
    client: Any,
    image: str,
    *,
    env: dict[str, str] | None = None,
    ports: Mapping[str, int | None] | None = None,
) -> Iterator[DockerService]:
    """Run a container and remove it afterwards."""
    container = client.containers.run(image, detach=True, environment=env, ports=ports)
    try:
        yield DockerService(container=container, host=_docker_host(client))
    finally:
        container.remove(force=True, v=True)


@pytest.fixture(scope="session")
def docker_client():
    """Create a Docker client or skip if Docker is unavailable."""
    import docker

    try:
        client = docker.from_env()
        client.ping()
    except Exception as exc:
        pytest.skip(f"Docker not available: {exc}")
    yield client
    client.close()


@pytest.fixture(scope="session")
def postgres_container(docker_client) -> Iterator[DockerService]:
    """Start PostgreSQL container for the test session."""
    env = {
        "POSTGRES_USER": "pactbot",
        "POSTGRES_PASSWORD": "pactbot",
        "POSTGRES_DB": "pactbot",
    }
    with run_container(
        docker_client, "postgres:16-alpine", env=env, ports={"5432/tcp": None}
    ) as postgres:
        yield postgres


@pytest.fixture(scope="session")
def redis_container(docker_client) -> Iterator[DockerService]:
    """Start Redis container for the test session."""
    with run_container(docker_client, "redis:7-alpine", ports={"6379/tcp": None}) as redis:
        yield redis


@pytest.fixture(scope="session")
def database_url(postgres_container: DockerService) -> str:
    host = postgres_container.host
    port = postgres_container.port(5432)
    return f"postgresql+asyncpg://pactbot:pactbot@{host}:{port}/pactbot"


@pytest.fixture(scope="session")
def redis_url(redis_container: DockerService) -> str:
    host = redis_container.host
    port = redis_container.port(6379)
    return f"redis://{host}:{port}/0"


@pytest_asyncio.fixture
async def db_engine(database_url: str):
    """Create async database engine with a fresh schema."""
    engine = create_async_engine(database_url, echo=False)
    await _wait_for_engine(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncIterator[AsyncSession]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def redis_client(redis_url: str):
    """Create a Redis client for tests."""
    import redis.asyncio as redis

    client = redis.from_url(redis_url, decode_responses=False)
    await _wait_for_redis(client)
    yield client
    await client.flushdb()
    await client.aclose()


@pytest_asyncio.fixture
async def live_cache(redis_client) -> RecordCache:
    return RecordCache(redis_client, ttl=3600, timeout=0.5)


@pytest_asyncio.fixture
async def live_store(db_session, live_cache) -> RecordStore:
    return RecordStore(ContractRepository(db_session), live_cache)


@pytest_asyncio.fixture
async def test_client(
    session_factory, live_cache, trusted_user_header
) -> AsyncIterator[AsyncClient]:
    """Create a test client with real database and Redis."""
    from pactbot.api.app import create_app
    from pactbot.persistence import db as db_module

    app = create_app()
    app.state.cache = live_cache

    async def get_test_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[db_module.get_session] = get_test_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


async def _wait_for_engine(engine, timeout: float = 30.0) -> None:
    """Wait for the database engine to accept connections."""
    deadline = time.monotonic() + timeout
    while True:
        try:
            async with engine.connect():
                return
        except Exception:
            if time.monotonic() >= deadline:
                raise
            await asyncio.sleep(0.5)


async def _wait_for_redis(client, timeout: float = 30.0) -> None:
    """Wait for Redis to accept connections."""
    deadline = time.monotonic() + timeout
    while True:
        try:
            await client.ping()
            return
        except Exception:
            if time.monotonic() >= deadline:
                raise
            await asyncio.sleep(0.5)
