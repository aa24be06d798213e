"""FastAPI application factory for the PactBot API.

Creates the application with:
- Contract record routes (/api/contracts)
- Health probes and Prometheus metrics
- Lifecycle management for the database and the optional record cache
- Correlation IDs, CORS for the dashboard, and uniform error responses
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.types import ExceptionHandler

from pactbot.api.errors import (
    ApiError,
    api_exception_handler,
    generic_exception_handler,
    record_not_found_handler,
    store_unavailable_handler,
)
from pactbot.api.middleware import CorrelationMiddleware
from pactbot.api.routers import contracts, health
from pactbot.api.routers import metrics as metrics_router
from pactbot.cache.redis import RecordCache, close_redis_client, create_redis_client
from pactbot.config import settings
from pactbot.core.errors import RecordNotFoundError, StoreUnavailableError
from pactbot.observability import configure_logging
from pactbot.observability.metrics import MetricsMiddleware, get_metrics
from pactbot.persistence.db import close_db, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle.

    On startup: configure logging and metrics, create tables, build the
    record cache (disabled when no Redis URL is set).

    On shutdown: close the cache client and database connections.
    """
    configure_logging(
        json_format=settings.env != "dev",
        level=settings.log_level,
    )
    get_metrics()

    logger.info(f"Starting PactBot API ({settings.env})")
    await init_db()

    redis_client = create_redis_client(settings.redis_url, timeout=settings.cache_timeout)
    app.state.cache = RecordCache(
        redis_client,
        ttl=settings.cache_ttl,
        timeout=settings.cache_timeout,
    )
    if redis_client is not None and not await app.state.cache.health_check():
        logger.warning("Redis not reachable at startup, serving from database until it is")

    logger.info("PactBot API startup complete")

    yield

    logger.info("Shutting down PactBot API")
    await close_redis_client(redis_client)
    await close_db()
    logger.info("PactBot API shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="PactBot API",
        description="Contract analysis records for the PactBot dashboard",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.cache = RecordCache(None)

    app.add_middleware(CorrelationMiddleware)
    if settings.enable_metrics:
        app.add_middleware(MetricsMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.client_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=["Content-Type", "Authorization"],
    )

    app.add_exception_handler(ApiError, cast(ExceptionHandler, api_exception_handler))
    app.add_exception_handler(
        RecordNotFoundError, cast(ExceptionHandler, record_not_found_handler)
    )
    app.add_exception_handler(
        StoreUnavailableError, cast(ExceptionHandler, store_unavailable_handler)
    )
    app.add_exception_handler(Exception, cast(ExceptionHandler, generic_exception_handler))

    app.include_router(health.router)
    if settings.enable_metrics:
        app.include_router(metrics_router.router)
    app.include_router(contracts.router)

    @app.get("/", tags=["system"])
    async def root() -> dict[str, str]:
        return {"message": "PactBot API Server"}

    return app


app = create_app()
