"""
Unit Tests for the API Rate Limiter.

Timestamps are passed explicitly, so windows are exercised without sleeping.
Limits are stubbed with the real schema objects.
"""

from types import SimpleNamespace
from unittest.mock import patch

import pytest

from modules.backend.core.config_schema import ApiRateLimitSchema
from modules.backend.core.rate_limiter import ApiRateLimiter, get_rate_limiter


@pytest.fixture
def limiter():
    limits = ApiRateLimitSchema(requests_per_minute=3, requests_per_hour=5)
    app_config = SimpleNamespace(
        security=SimpleNamespace(rate_limiting=SimpleNamespace(api=limits)),
    )
    with patch("modules.backend.core.rate_limiter.get_app_config", return_value=app_config):
        yield ApiRateLimiter()


class TestMinuteWindow:
    def test_allows_up_to_the_limit(self, limiter):
        results = [limiter.check("u1", "/api/v1/scripts", now=1000.0 + i) for i in range(3)]
        assert all(r.allowed for r in results)

    def test_blocks_the_request_over_the_limit(self, limiter):
        for i in range(3):
            limiter.check("u1", "/api/v1/scripts", now=1000.0 + i)

        result = limiter.check("u1", "/api/v1/scripts", now=1010.0)

        assert result.allowed is False
        # Oldest request at 1000 leaves the window at 1060
        assert result.retry_after_seconds == 51

    def test_window_slides(self, limiter):
        for i in range(3):
            limiter.check("u1", "/api/v1/scripts", now=1000.0 + i)

        assert limiter.check("u1", "/api/v1/scripts", now=1061.0).allowed is True

    def test_rejected_requests_do_not_extend_lockout(self, limiter):
        for i in range(3):
            limiter.check("u1", "/api/v1/scripts", now=1000.0 + i)
        for i in range(10):
            limiter.check("u1", "/api/v1/scripts", now=1010.0 + i)

        assert limiter.check("u1", "/api/v1/scripts", now=1062.0).allowed is True


class TestHourWindow:
    def test_blocks_after_hourly_limit(self, limiter):
        # Spread requests so the minute window never fills
        for i in range(5):
            assert limiter.check("u1", "/api/v1/ai/generate-script", now=1000.0 + i * 61).allowed

        result = limiter.check("u1", "/api/v1/ai/generate-script", now=1000.0 + 5 * 61)

        assert result.allowed is False
        assert result.retry_after_seconds > 60


class TestKeying:
    def test_paths_are_limited_independently(self, limiter):
        for i in range(3):
            limiter.check("u1", "/api/v1/scripts", now=1000.0 + i)

        assert limiter.check("u1", "/api/v1/projects", now=1005.0).allowed is True

    def test_users_are_limited_independently(self, limiter):
        for i in range(3):
            limiter.check("u1", "/api/v1/scripts", now=1000.0 + i)

        assert limiter.check("u2", "/api/v1/scripts", now=1005.0).allowed is True

    def test_reset_forgets_everything(self, limiter):
        for i in range(3):
            limiter.check("u1", "/api/v1/scripts", now=1000.0 + i)

        limiter.reset()

        assert limiter.check("u1", "/api/v1/scripts", now=1005.0).allowed is True


class TestPruning:
    def test_idle_windows_are_swept(self, limiter):
        for i in range(20):
            limiter.check(f"member-{i}", "/api/v1/scripts/{script_id}", now=1000.0)
        assert limiter.tracked_keys() == 20

        limiter.check("member-0", "/api/v1/projects", now=1000.0 + 3601)

        assert limiter.tracked_keys() == 1

    def test_active_windows_survive_a_sweep(self, limiter):
        limiter.check("u1", "/api/v1/scripts", now=1000.0)
        limiter.check("u1", "/api/v1/scripts", now=1000.0 + 1800)

        limiter.check("u2", "/api/v1/scripts", now=1000.0 + 1900)

        assert limiter.tracked_keys() == 2


class TestGetRateLimiter:
    def test_returns_process_wide_instance(self):
        assert get_rate_limiter() is get_rate_limiter()
