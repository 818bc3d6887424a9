"""
Liveness and readiness probes.
"""
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable

from fastapi import APIRouter, Depends

from nurture.container import ServiceContainer
from nurture.dependencies.services import get_container

logger = logging.getLogger("nurture.health")

router = APIRouter(tags=["Health"])

HEALTHY = "healthy"


async def probe(name: str, check: Callable[[], Awaitable[object]]) -> str:
    """Run one dependency check and describe the outcome."""
    try:
        await check()
    except Exception as e:
        logger.warning(f"Readiness probe for {name} failed: {e}")
        return f"unhealthy: {e}"
    return HEALTHY


@router.get("/health", summary="Liveness probe")
async def health_check():
    """Returns 200 while the process is serving requests."""
    return {
        "status": "ok",
        "message": "Nurture backend is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/ready", summary="Readiness probe")
async def readiness_check(container: ServiceContainer = Depends(get_container)):
    """
    Ping MongoDB and Redis.

    Always 200; `status` is `degraded` when any dependency fails.
    """
    checks = {
        "api": HEALTHY,
        "mongodb": await probe("mongodb", lambda: container.db.command("ping")),
        "redis": await probe("redis", container.redis.ping),
    }
    ready = all(state == HEALTHY for state in checks.values())
    return {"status": HEALTHY if ready else "degraded", "checks": checks}
