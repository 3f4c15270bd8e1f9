"""
Resilience Infrastructure.

Circuit breaker listener, retry callback, and factories that build
both from the breaker/retry blocks in integrations.yaml and events.yaml.

The resilience stack around every provider call is applied outside-in:
    Circuit Breaker (aiobreaker) → Retry (tenacity) → Semaphore → Timeout → Call

Usage:
    breaker = create_circuit_breaker("openai", config.circuit_breaker)

    async for attempt in retrying(config.retry, (httpx.TransportError,)):
        with attempt:
            async with get_semaphore("llm"):
                async with asyncio.timeout(config.timeout_seconds):
                    return await breaker.call(client.post, url, json=payload)
"""

from typing import Any

import aiobreaker
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from modules.backend.core.config_schema import CircuitBreakerSchema, RetrySchema
from modules.backend.core.logging import get_logger

logger = get_logger(__name__)


class ResilienceLogger(aiobreaker.CircuitBreakerListener):
    """Circuit breaker listener that emits structured resilience events.

    Filter them with:
        jq 'select(.resilience_event != null)' logs/system.jsonl
    """

    def __init__(self, dependency: str) -> None:
        self.dependency = dependency

    def state_change(self, cb: aiobreaker.CircuitBreaker, old_state: Any, new_state: Any) -> None:
        event_map = {
            "open": "circuit_breaker_opened",
            "half-open": "circuit_breaker_half_open",
            "closed": "circuit_breaker_closed",
        }
        new_str = str(new_state).lower()
        event = event_map.get(new_str, f"circuit_breaker_{new_str}")
        log_level = "error" if new_str == "open" else "info"

        getattr(logger, log_level)(
            f"Circuit breaker {self.dependency}: {old_state} -> {new_state}",
            extra={
                "resilience_event": event,
                "dependency": self.dependency,
                "failure_count": cb.fail_counter,
            },
        )

    def failure(self, cb: aiobreaker.CircuitBreaker, exception: Exception) -> None:
        logger.warning(
            f"Circuit breaker {self.dependency}: failure recorded",
            extra={
                "resilience_event": "circuit_breaker_failure",
                "dependency": self.dependency,
                "failure_count": cb.fail_counter,
                "error": str(exception),
            },
        )


def log_retry(retry_state: Any) -> None:
    """Tenacity before_sleep callback that emits structured retry events."""
    error = None
    if retry_state.outcome and retry_state.outcome.failed:
        error = str(retry_state.outcome.exception())

    fn_name = getattr(retry_state.fn, "__name__", "provider_call")

    logger.warning(
        f"Retrying {fn_name} (attempt {retry_state.attempt_number})",
        extra={
            "resilience_event": "retry_attempt",
            "dependency": fn_name,
            "attempt": retry_state.attempt_number,
            "error": error,
        },
    )


def create_circuit_breaker(
    dependency: str,
    config: CircuitBreakerSchema,
) -> aiobreaker.CircuitBreaker:
    """Create a circuit breaker with structured logging.

    Args:
        dependency: Name of the external dependency (for logging)
        config: fail_max and timeout_duration from YAML
    """
    from datetime import timedelta

    return aiobreaker.CircuitBreaker(
        fail_max=config.fail_max,
        timeout_duration=timedelta(seconds=config.timeout_duration),
        listeners=[ResilienceLogger(dependency)],
    )


def retrying(
    config: RetrySchema,
    exceptions: tuple[type[BaseException], ...],
) -> AsyncRetrying:
    """Build a tenacity AsyncRetrying from a YAML retry block.

    Only the given exception types are retried. The last error is re-raised.
    """
    return AsyncRetrying(
        stop=stop_after_attempt(config.max_attempts),
        wait=wait_exponential(multiplier=config.backoff_multiplier, max=config.backoff_max),
        retry=retry_if_exception_type(exceptions),
        before_sleep=log_retry,
        reraise=True,
    )
