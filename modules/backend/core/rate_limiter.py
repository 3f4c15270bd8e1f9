"""
API Rate Limiter.

Sliding-window limits per (user, route). Callers pass the route template
(`/api/v1/scripts/{script_id}`), not the concrete URL, so one member
holds a bounded number of windows. Limits come from security.yaml
rate_limiting.api. Windows live in process memory, so each worker
enforces its own counts, and idle windows are swept once a minute.
"""

import time

from modules.backend.core.config import get_app_config
from modules.backend.core.logging import get_logger

logger = get_logger(__name__)

MINUTE = 60
HOUR = 3600
SWEEP_INTERVAL_SECONDS = 60


class RateLimitResult:
    """Result of a rate limit check."""

    def __init__(self, allowed: bool, retry_after_seconds: int = 0) -> None:
        self.allowed = allowed
        self.retry_after_seconds = retry_after_seconds


class ApiRateLimiter:
    """
    Per-user, per-route rate limiter with a minute and an hour window.

    Timestamps are recorded only for allowed requests, so a client that
    keeps hammering a limited route does not extend its own lockout.
    """

    def __init__(self) -> None:
        self._minute_requests: dict[str, list[float]] = {}
        self._hour_requests: dict[str, list[float]] = {}
        self._last_sweep = 0.0

    def check(self, user_id: str, path: str, now: float | None = None) -> RateLimitResult:
        """
        Check and record a request.

        Args:
            user_id: Authenticated user id
            path: Route template the request matched
            now: Monotonic timestamp override (used by tests)
        """
        limits = get_app_config().security.rate_limiting.api
        now = time.monotonic() if now is None else now
        key = f"{user_id}:{path}"
        if now - self._last_sweep >= SWEEP_INTERVAL_SECONDS:
            self._sweep(now)

        result = self._check_window(
            key, self._minute_requests, now, MINUTE, limits.requests_per_minute,
        )
        if not result.allowed:
            logger.warning(
                "Rate limit exceeded (per-minute)",
                extra={"user_id": user_id, "path": path, "limit": limits.requests_per_minute},
            )
            return result

        result = self._check_window(
            key, self._hour_requests, now, HOUR, limits.requests_per_hour,
        )
        if not result.allowed:
            logger.warning(
                "Rate limit exceeded (per-hour)",
                extra={"user_id": user_id, "path": path, "limit": limits.requests_per_hour},
            )
            return result

        self._minute_requests.setdefault(key, []).append(now)
        self._hour_requests.setdefault(key, []).append(now)
        return RateLimitResult(allowed=True)

    def reset(self) -> None:
        """Forget all recorded requests."""
        self._minute_requests.clear()
        self._hour_requests.clear()

    def tracked_keys(self) -> int:
        return len(self._hour_requests)

    def _sweep(self, now: float) -> None:
        """Drop windows with no request inside them."""
        windows = ((self._minute_requests, MINUTE), (self._hour_requests, HOUR))
        for store, window_seconds in windows:
            cutoff = now - window_seconds
            for key in [k for k, stamps in store.items() if not stamps or stamps[-1] <= cutoff]:
                del store[key]
        self._last_sweep = now

    def _check_window(
        self,
        key: str,
        store: dict[str, list[float]],
        now: float,
        window_seconds: int,
        max_requests: int,
    ) -> RateLimitResult:
        cutoff = now - window_seconds
        recent = [ts for ts in store.get(key, ()) if ts > cutoff]
        if not recent:
            store.pop(key, None)
            return RateLimitResult(allowed=True)
        store[key] = recent

        if len(recent) >= max_requests:
            oldest = recent[0]
            retry_after = int(window_seconds - (now - oldest)) + 1
            return RateLimitResult(allowed=False, retry_after_seconds=retry_after)

        return RateLimitResult(allowed=True)


_rate_limiter: ApiRateLimiter | None = None


def get_rate_limiter() -> ApiRateLimiter:
    """Get or create the process-wide rate limiter."""
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = ApiRateLimiter()
    return _rate_limiter
