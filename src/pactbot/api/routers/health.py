"""Health check endpoints for the PactBot API.

Provides liveness and readiness probes:
- /health       - Full report of database and cache status
- /health/live  - Liveness probe (always OK while the process runs)
- /health/ready - Readiness probe (fails only when the database is down)

The cache is an optional accelerator, so an unhealthy or unconfigured cache
degrades the report but never fails readiness.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from pactbot.api.deps import get_cache
from pactbot.cache.redis import RecordCache
from pactbot.persistence.db import health_check as db_health_check

router = APIRouter(tags=["health"])

CHECK_TIMEOUT = 5.0  # seconds


class HealthStatus(str, Enum):
    """Health check status."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    DISABLED = "disabled"


@dataclass
class ComponentHealth:
    """Health status of a single component."""

    name: str
    status: HealthStatus
    latency_ms: float
    critical: bool
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result: dict[str, Any] = {
            "name": self.name,
            "status": self.status.value,
            "latency_ms": round(self.latency_ms, 2),
            "critical": self.critical,
        }
        if self.message:
            result["message"] = self.message
        return result


async def check_database() -> ComponentHealth:
    """Check database connectivity."""
    start = time.monotonic()
    try:
        healthy = await asyncio.wait_for(db_health_check(), timeout=CHECK_TIMEOUT)
        message = None if healthy else "Database check failed"
    except asyncio.TimeoutError:
        healthy = False
        message = "Database check timed out"
    latency = (time.monotonic() - start) * 1000
    return ComponentHealth(
        name="database",
        status=HealthStatus.HEALTHY if healthy else HealthStatus.UNHEALTHY,
        latency_ms=latency,
        critical=True,
        message=message,
    )


async def check_cache(cache: RecordCache) -> ComponentHealth:
    """Check Redis connectivity."""
    if not cache.is_available():
        return ComponentHealth(
            name="cache",
            status=HealthStatus.DISABLED,
            latency_ms=0.0,
            critical=False,
            message="Cache not configured",
        )
    start = time.monotonic()
    healthy = await cache.health_check()
    latency = (time.monotonic() - start) * 1000
    return ComponentHealth(
        name="cache",
        status=HealthStatus.HEALTHY if healthy else HealthStatus.DEGRADED,
        latency_ms=latency,
        critical=False,
        message=None if healthy else "Cache unreachable, serving from database",
    )


def summarize(components: list[ComponentHealth]) -> tuple[HealthStatus, int]:
    """Overall status and HTTP status code for a set of component checks."""
    if any(c.critical and c.status != HealthStatus.HEALTHY for c in components):
        return HealthStatus.UNHEALTHY, 503
    if any(c.status == HealthStatus.DEGRADED for c in components):
        return HealthStatus.DEGRADED, 200
    return HealthStatus.HEALTHY, 200


async def _report(cache: RecordCache) -> JSONResponse:
    components = list(await asyncio.gather(check_database(), check_cache(cache)))
    overall_status, status_code = summarize(components)
    return JSONResponse(
        content={
            "status": overall_status.value,
            "components": [c.to_dict() for c in components],
        },
        status_code=status_code,
    )


@router.get("/health")
async def full_health(cache: RecordCache = Depends(get_cache)) -> JSONResponse:
    """Full health report for external checks."""
    return await _report(cache)


@router.get("/health/live")
async def live() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


@router.get("/health/ready")
async def ready(cache: RecordCache = Depends(get_cache)) -> JSONResponse:
    """Readiness probe.

    Returns 503 only when the database is unhealthy.
    """
    return await _report(cache)
