"""
Event Publishers.

Domain-specific event publishers. Each publisher wraps the broker's
publish() method with the correct stream name and event schema.

Publishers check the events_publish_enabled feature flag before publishing.
When disabled, events are silently skipped. A broker failure is logged
and never fails the caller.

A publisher bound to a session holds its events until that session's
transaction commits, so consumers never see a balance that was rolled
back. Events queued before a rollback are dropped.

Usage:
    from modules.backend.events.publishers import CreditEventPublisher

    publisher = CreditEventPublisher(session=db)
    await publisher.credits_spent(user_id, amount=10, balance=15, reason="generate_script")
    await db.commit()  # published here
"""

import asyncio
from collections.abc import Awaitable, Callable
from functools import partial

from sqlalchemy import event as sa_event
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from modules.backend.core.logging import get_logger
from modules.backend.events.schemas import CreditsGranted, CreditsSpent, EventEnvelope

logger = get_logger(__name__)

PENDING_EVENTS_KEY = "pending_events"

# Strong references to in-flight publish tasks
_in_flight: set[asyncio.Task] = set()


def _publish_pending(session: Session) -> None:
    pending: list[Callable[[], Awaitable[None]]] = session.info.pop(PENDING_EVENTS_KEY, [])
    if not pending:
        return
    loop = asyncio.get_running_loop()
    for publish in pending:
        task = loop.create_task(publish())
        _in_flight.add(task)
        task.add_done_callback(_in_flight.discard)


def _discard_pending(session: Session) -> None:
    dropped = session.info.pop(PENDING_EVENTS_KEY, [])
    if dropped:
        logger.debug("Dropped events from rolled back transaction", extra={"count": len(dropped)})


def publish_after_commit(session: AsyncSession, publish: Callable[[], Awaitable[None]]) -> None:
    """Queue a publish call to run once the session's transaction commits."""
    sync_session = session.sync_session
    if not sa_event.contains(sync_session, "after_commit", _publish_pending):
        sa_event.listen(sync_session, "after_commit", _publish_pending)
        sa_event.listen(sync_session, "after_rollback", _discard_pending)
    sync_session.info.setdefault(PENDING_EVENTS_KEY, []).append(publish)


class CreditEventPublisher:
    """Publishes credit ledger events to Redis Streams."""

    STREAM_SPENT = "credits:credits-spent"
    STREAM_GRANTED = "credits:credits-granted"

    def __init__(
        self,
        correlation_id: str = "internal",
        session: AsyncSession | None = None,
    ) -> None:
        self.correlation_id = correlation_id
        self.session = session

    async def credits_spent(
        self, user_id: str, amount: int, balance: int, reason: str,
    ) -> None:
        """Publish a credits.credits.spent event."""
        await self._emit(
            self.STREAM_SPENT,
            CreditsSpent(
                source="credit-service",
                correlation_id=self.correlation_id,
                payload={
                    "user_id": user_id,
                    "amount": amount,
                    "balance": balance,
                    "reason": reason,
                },
            ),
        )

    async def credits_granted(
        self, user_id: str, amount: int, balance: int, transaction_type: str,
    ) -> None:
        """Publish a credits.credits.granted event."""
        await self._emit(
            self.STREAM_GRANTED,
            CreditsGranted(
                source="credit-service",
                correlation_id=self.correlation_id,
                payload={
                    "user_id": user_id,
                    "amount": amount,
                    "balance": balance,
                    "transaction_type": transaction_type,
                },
            ),
        )

    async def _emit(self, stream: str, event: EventEnvelope) -> None:
        if self.session is None:
            await self._publish(stream, event)
            return
        publish_after_commit(self.session, partial(self._publish, stream, event))

    async def _publish(self, stream: str, event: EventEnvelope) -> None:
        """Publish an event if the feature flag is enabled."""
        from modules.backend.core.config import get_app_config

        if not get_app_config().features.events_publish_enabled:
            return

        from modules.backend.events.broker import get_event_broker

        broker = get_event_broker()
        try:
            await broker.publish(
                event.model_dump(),
                stream=stream,
                maxlen=get_app_config().events.streams.default_maxlen,
            )
        except Exception as e:
            logger.warning(
                "Event publish failed",
                extra={
                    "stream": stream,
                    "event_type": event.event_type,
                    "event_id": event.event_id,
                    "error": str(e),
                },
            )
            return
        logger.debug(
            "Event published",
            extra={"stream": stream, "event_type": event.event_type, "event_id": event.event_id},
        )
