"""
Achievement Event Consumer.

Re-evaluates a member's achievements whenever they spend credits.
Processing runs behind circuit breaker → retry → timeout, and events
that still fail are routed to the dead letter queue.

Run with: python cli.py --service event-worker
"""

import asyncio

from faststream.redis import StreamSub
from sqlalchemy.exc import OperationalError

from modules.backend.core.config import get_app_config
from modules.backend.core.database import get_session_factory
from modules.backend.core.logging import get_logger
from modules.backend.core.resilience import create_circuit_breaker, retrying
from modules.backend.events.broker import get_event_broker
from modules.backend.events.schemas import EventEnvelope
from modules.backend.services.achievement import AchievementService

logger = get_logger(__name__)

broker = get_event_broker()

_config = get_app_config().events.consumers["achievements"]

_achievement_breaker = create_circuit_breaker("achievement-consumer", _config.circuit_breaker)

_RETRYABLE = (ConnectionError, TimeoutError, OperationalError)


async def _send_to_dlq(stream: str, event: EventEnvelope, error: Exception) -> None:
    """Publish a failed event to dlq:{original_stream} with error metadata."""
    dlq_config = get_app_config().events.dlq
    if not dlq_config.enabled:
        return

    dlq_stream = f"{dlq_config.stream_prefix}:{stream}"
    dlq_payload = event.model_dump()
    dlq_payload["_dlq_error"] = str(error)
    dlq_payload["_dlq_original_stream"] = stream

    try:
        await broker.publish(dlq_payload, stream=dlq_stream)
        logger.warning(
            "Event sent to DLQ",
            extra={
                "dlq_stream": dlq_stream,
                "event_id": event.event_id,
                "error": str(error),
            },
        )
    except Exception as dlq_err:
        logger.error(
            "Failed to send event to DLQ",
            extra={
                "dlq_stream": dlq_stream,
                "event_id": event.event_id,
                "dlq_error": str(dlq_err),
                "original_error": str(error),
            },
        )


async def evaluate_achievements(user_id: str) -> int:
    """Evaluate one member in a fresh session. Returns the number unlocked."""
    async with get_session_factory()() as session:
        unlocked = await AchievementService(session).evaluate_user(user_id)
        await session.commit()
    return len(unlocked)


async def _evaluate_with_resilience(user_id: str) -> int:
    async def attempt() -> int:
        async for retry_attempt in retrying(_config.retry, _RETRYABLE):
            with retry_attempt:
                async with asyncio.timeout(_config.processing_timeout):
                    return await evaluate_achievements(user_id)
        return 0

    return await _achievement_breaker.call_async(attempt)


async def handle_event(stream: str, event: EventEnvelope) -> None:
    """Process an event with resilience, routing failures to the DLQ."""
    user_id = event.payload.get("user_id")
    if not user_id:
        logger.warning(
            "Event without user_id skipped",
            extra={"event_id": event.event_id, "event_type": event.event_type},
        )
        return

    try:
        unlocked = await _evaluate_with_resilience(user_id)
    except Exception as exc:
        logger.error(
            "Event processing failed after retries",
            extra={
                "event_type": event.event_type,
                "event_id": event.event_id,
                "error": str(exc),
            },
        )
        await _send_to_dlq(stream, event, exc)
        return

    logger.info(
        "Achievements evaluated",
        extra={"user_id": user_id, "unlocked": unlocked, "event_id": event.event_id},
    )


@broker.subscriber(
    stream=StreamSub(_config.stream, group=_config.group, consumer="achievement-consumer-1"),
)
async def handle_credits_spent(data: dict) -> None:
    """Process a credits.credits.spent event."""
    event = EventEnvelope(**data)
    await handle_event(_config.stream, event)
