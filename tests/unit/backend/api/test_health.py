"""
Unit Tests for Health Check Endpoints.

Tests the health check functionality including:
- Liveness check (/health)
- Readiness check (/health/ready)
- Detailed health check (/health/detailed)
- Database and Redis connectivity checks
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import HTTPException

HEALTHY = {"status": "healthy", "latency_ms": 1}


def _session_factory(session):
    factory = MagicMock()
    factory.return_value.__aenter__.return_value = session
    return factory


class TestHealthCheck:
    """Tests for the liveness health check endpoint."""

    async def test_health_returns_healthy(self):
        """Should return healthy status."""
        from modules.backend.api.health import health_check

        assert await health_check() == {"status": "healthy"}


class TestCheckDatabase:
    """Tests for the database health check function."""

    async def test_returns_healthy_on_successful_query(self):
        """Should return healthy with latency when the database answers."""
        from modules.backend.api.health import check_database

        session = AsyncMock()
        with patch(
            "modules.backend.core.database.get_session_factory",
            return_value=_session_factory(session),
        ):
            result = await check_database()

        assert result["status"] == "healthy"
        assert isinstance(result["latency_ms"], int)
        session.execute.assert_awaited_once()

    async def test_returns_unhealthy_on_connection_error(self):
        """Should return unhealthy with the error message."""
        from modules.backend.api.health import check_database

        session = AsyncMock()
        session.execute.side_effect = ConnectionRefusedError("Connection refused")
        with patch(
            "modules.backend.core.database.get_session_factory",
            return_value=_session_factory(session),
        ):
            result = await check_database()

        assert result["status"] == "unhealthy"
        assert "Connection refused" in result["error"]


class TestCheckRedis:
    """Tests for the Redis health check function."""

    async def test_returns_healthy_on_successful_ping(self):
        from modules.backend.api.health import check_redis

        client = AsyncMock()
        with (
            patch("modules.backend.core.config.get_redis_url", return_value="redis://localhost:6379/0"),
            patch("redis.asyncio.from_url", return_value=client),
        ):
            result = await check_redis()

        assert result["status"] == "healthy"
        client.ping.assert_awaited_once()
        client.aclose.assert_awaited_once()

    async def test_returns_unhealthy_on_connection_error(self):
        from modules.backend.api.health import check_redis

        client = AsyncMock()
        client.ping.side_effect = ConnectionError("Redis down")
        with (
            patch("modules.backend.core.config.get_redis_url", return_value="redis://localhost:6379/0"),
            patch("redis.asyncio.from_url", return_value=client),
        ):
            result = await check_redis()

        assert result["status"] == "unhealthy"
        assert "Redis down" in result["error"]
        client.aclose.assert_awaited_once()


class TestReadinessCheck:
    """Tests for the readiness health check endpoint."""

    async def test_returns_healthy_when_all_checks_pass(self):
        from modules.backend.api.health import readiness_check

        checks = {"database": HEALTHY, "redis": HEALTHY}
        with patch("modules.backend.api.health._run_checks", AsyncMock(return_value=checks)):
            result = await readiness_check()

        assert result["status"] == "healthy"
        assert result["checks"] == checks

    @pytest.mark.parametrize("failing", ["database", "redis"])
    async def test_raises_503_when_a_dependency_is_unhealthy(self, failing):
        from modules.backend.api.health import readiness_check

        checks = {"database": HEALTHY, "redis": HEALTHY}
        checks[failing] = {"status": "unhealthy", "error": "down"}
        with patch("modules.backend.api.health._run_checks", AsyncMock(return_value=checks)):
            with pytest.raises(HTTPException) as exc_info:
                await readiness_check()

        assert exc_info.value.status_code == 503
        assert exc_info.value.detail["checks"][failing]["status"] == "unhealthy"


class TestRunChecks:
    """Tests for the concurrent check runner."""

    async def test_runs_both_checks(self):
        from modules.backend.api.health import _run_checks

        with (
            patch("modules.backend.api.health.check_database", AsyncMock(return_value=HEALTHY)),
            patch("modules.backend.api.health.check_redis", AsyncMock(return_value=HEALTHY)),
        ):
            result = await _run_checks(timeout=5)

        assert result == {"database": HEALTHY, "redis": HEALTHY}

    async def test_slow_check_times_out(self):
        from modules.backend.api.health import _run_checks

        async def hang():
            await asyncio.sleep(10)

        with (
            patch("modules.backend.api.health.check_database", hang),
            patch("modules.backend.api.health.check_redis", AsyncMock(return_value=HEALTHY)),
        ):
            result = await _run_checks(timeout=0.05)

        assert result["database"]["status"] == "error"
        assert result["redis"]["status"] == "error"

    async def test_crashing_check_is_reported_not_raised(self):
        from modules.backend.api.health import _run_checks

        with (
            patch(
                "modules.backend.api.health.check_database",
                AsyncMock(side_effect=RuntimeError("pool exhausted")),
            ),
            patch("modules.backend.api.health.check_redis", AsyncMock(return_value=HEALTHY)),
        ):
            result = await _run_checks(timeout=5)

        assert result["database"] == {"status": "error", "error": "check did not run"}


class TestDetailedHealthCheck:
    """Tests for the detailed health check endpoint."""

    async def test_returns_comprehensive_status(self):
        from modules.backend.api.health import detailed_health_check

        checks = {"database": HEALTHY, "redis": HEALTHY}
        with patch("modules.backend.api.health._run_checks", AsyncMock(return_value=checks)):
            result = await detailed_health_check()

        assert result["status"] == "healthy"
        assert result["application"]["name"] == "Bravo Zulu Films"
        assert "semaphores" in result["pools"]
        assert "connected_users" in result["realtime"]
        assert "timestamp" in result

    async def test_returns_unhealthy_when_check_fails(self):
        from modules.backend.api.health import detailed_health_check

        checks = {"database": HEALTHY, "redis": {"status": "unhealthy", "error": "down"}}
        with patch("modules.backend.api.health._run_checks", AsyncMock(return_value=checks)):
            result = await detailed_health_check()

        assert result["status"] == "unhealthy"
