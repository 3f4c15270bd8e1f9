"""
Health Check Endpoints.

- /health: Liveness check (process running)
- /health/ready: Readiness check (database and Redis reachable)
- /health/detailed: Component-by-component status (for debugging)
"""

import asyncio
import time
from typing import Any

from fastapi import APIRouter, HTTPException
from sqlalchemy import text

from modules.backend.core.logging import get_logger
from modules.backend.core.utils import utc_now

router = APIRouter()
logger = get_logger(__name__)


async def check_database() -> dict[str, Any]:
    """Run SELECT 1 against the configured database."""
    from modules.backend.core.database import get_session_factory

    started = time.perf_counter()
    try:
        async with get_session_factory()() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        return {"status": "unhealthy", "error": str(e)}

    return {"status": "healthy", "latency_ms": int((time.perf_counter() - started) * 1000)}


async def check_redis() -> dict[str, Any]:
    """PING the Redis instance shared by the task broker and event bus."""
    import redis.asyncio as redis

    from modules.backend.core.config import get_redis_url

    started = time.perf_counter()
    try:
        client = redis.from_url(get_redis_url())
        try:
            await client.ping()
        finally:
            await client.aclose()
    except Exception as e:
        logger.warning("Redis health check failed", extra={"error": str(e)})
        return {"status": "unhealthy", "error": str(e)}

    return {"status": "healthy", "latency_ms": int((time.perf_counter() - started) * 1000)}


async def _run_checks(timeout: float | None = None) -> dict[str, dict[str, Any]]:
    db_result: dict[str, Any] = {"status": "error", "error": "check did not run"}
    redis_result: dict[str, Any] = {"status": "error", "error": "check did not run"}

    try:
        async with asyncio.timeout(timeout):
            async with asyncio.TaskGroup() as tg:
                db_task = tg.create_task(check_database())
                redis_task = tg.create_task(check_redis())
            db_result = db_task.result()
            redis_result = redis_task.result()
    except* TimeoutError:
        logger.warning("Health checks timed out", extra={"timeout": timeout})
    except* Exception as eg:
        for exc in eg.exceptions:
            logger.warning("Health check task failed", extra={"error": str(exc)})

    return {"database": db_result, "redis": redis_result}


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Liveness check. No dependency checks."""
    return {"status": "healthy"}


@router.get("/health/ready")
async def readiness_check() -> dict[str, Any]:
    """
    Readiness check.

    Returns 503 if the database or Redis is unhealthy.
    """
    from modules.backend.core.config import get_app_config

    timeout = get_app_config().observability.health_checks.ready_timeout_seconds
    checks = await _run_checks(timeout)

    unhealthy = [name for name, check in checks.items() if check["status"] != "healthy"]
    if unhealthy:
        logger.warning("Readiness check failed", extra={"unhealthy": unhealthy})
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "checks": checks,
                "timestamp": utc_now().isoformat(),
            },
        )

    return {"status": "healthy", "checks": checks, "timestamp": utc_now().isoformat()}


@router.get("/health/detailed")
async def detailed_health_check() -> dict[str, Any]:
    """Dependency checks plus application info, semaphores and socket count."""
    from modules.backend.core.concurrency import get_semaphore_status
    from modules.backend.core.config import get_app_config
    from modules.backend.realtime.manager import get_connection_manager

    checks = await _run_checks()
    app_settings = get_app_config().application

    statuses = [check["status"] for check in checks.values()]
    overall_status = "healthy" if all(s == "healthy" for s in statuses) else "unhealthy"

    return {
        "status": overall_status,
        "application": {
            "name": app_settings.name,
            "env": app_settings.environment,
            "debug": app_settings.debug,
            "version": app_settings.version,
        },
        "checks": checks,
        "pools": {"semaphores": get_semaphore_status()},
        "realtime": {"connected_users": get_connection_manager().connected_user_count()},
        "timestamp": utc_now().isoformat(),
    }
