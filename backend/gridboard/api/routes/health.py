"""Health check endpoints.

- /health       — legacy, backward-compatible
- /health/live  — liveness probe (always 200)
- /health/ready — readiness probe (checks Redis)
"""

import asyncio
import time

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from redis.asyncio import Redis

from gridboard.api.deps import get_redis
from gridboard.core.metrics import store_health_check_duration_seconds, store_health_status

router = APIRouter()
logger = structlog.stdlib.get_logger("gridboard.health")

_HEALTH_CHECK_TIMEOUT = 3.0


@router.get("/health")
async def health_check():
    return {"status": "healthy", "service": "gridboard"}


@router.get("/health/live")
async def liveness():
    """Liveness probe — process is alive."""
    return {"status": "live"}


async def _check_redis(redis: Redis) -> dict:
    start = time.monotonic()
    try:
        await asyncio.wait_for(redis.ping(), timeout=_HEALTH_CHECK_TIMEOUT)  # type: ignore[misc]
    except Exception as exc:
        store_health_check_duration_seconds.labels(store="redis").observe(time.monotonic() - start)
        store_health_status.labels(store="redis").set(0)
        logger.warning("readiness_check_failed", dependency="redis", error=str(exc))
        return {"status": "error", "detail": str(exc)}
    store_health_check_duration_seconds.labels(store="redis").observe(time.monotonic() - start)
    store_health_status.labels(store="redis").set(1)
    return {"status": "ok"}


@router.get("/health/ready")
async def readiness(redis: Redis = Depends(get_redis)):
    """Readiness probe.

    Storage is fail-open, so an unreachable Redis means dashboards will not
    survive a restart. The probe reports that as not ready.
    """
    result = await _check_redis(redis)
    healthy = result["status"] == "ok"
    return JSONResponse(
        content={"status": "ready" if healthy else "not_ready", "checks": {"redis": result}},
        status_code=200 if healthy else 503,
    )
