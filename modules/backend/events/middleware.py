"""
Event Observability Middleware.

Applied to every consumer on the event broker. Binds the envelope's
identifiers to the structlog context and logs processing duration.
"""

import time
from typing import Any

import structlog
from faststream import BaseMiddleware

from modules.backend.core.logging import get_logger

logger = get_logger(__name__)

_BOUND_KEYS = ("event_id", "correlation_id", "event_type", "user_id")


def _envelope_fields(msg: Any) -> dict[str, Any]:
    if isinstance(msg, dict):
        data = msg
    elif hasattr(msg, "model_dump"):
        data = msg.model_dump()
    else:
        return {}
    payload = data.get("payload") or {}
    return {
        "event_id": data.get("event_id", "unknown"),
        "correlation_id": data.get("correlation_id", "unknown"),
        "event_type": data.get("event_type", "unknown"),
        "user_id": payload.get("user_id") if isinstance(payload, dict) else None,
    }


class EventObservabilityMiddleware(BaseMiddleware):
    """Binds envelope context for the duration of one consumed event."""

    async def on_consume(self, msg):
        structlog.contextvars.bind_contextvars(source="events", **_envelope_fields(msg))
        self._started = time.perf_counter()
        return await super().on_consume(msg)

    async def after_consume(self, err):
        duration_ms = round((time.perf_counter() - self._started) * 1000, 1)
        if err:
            logger.error(
                "Event processing failed",
                extra={"duration_ms": duration_ms, "error": str(err)},
            )
        else:
            logger.info("Event processed", extra={"duration_ms": duration_ms})

        structlog.contextvars.unbind_contextvars(*_BOUND_KEYS)
        return await super().after_consume(err)
