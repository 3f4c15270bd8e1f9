"""
Event Schemas.

Standardized event envelope and domain-specific event types.
All events published through the event bus use the EventEnvelope base.

Naming convention for event_type: domain.entity.action (dot notation)
Stream naming convention: {domain}:{event-type} (colon-separated)

Usage:
    from modules.backend.events.schemas import CreditsSpent

    event = CreditsSpent(
        source="credit-service",
        correlation_id=request_id,
        payload={"user_id": user.id, "amount": 10, "balance": 15},
    )
"""

from uuid import uuid4

from pydantic import BaseModel, Field

from modules.backend.core.utils import utc_now


class EventEnvelope(BaseModel):
    """Base event envelope. All events inherit from this.

    Fields:
        event_id: Unique event identifier (auto-generated UUID)
        event_type: Domain event type in dot notation (e.g. credits.credits.spent)
        event_version: Schema version for forward compatibility
        timestamp: ISO 8601 UTC timestamp
        source: Service/module that published the event
        correlation_id: Request ID, or a task name outside HTTP
        payload: Event-specific data
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    event_type: str
    event_version: int = 1
    timestamp: str = Field(default_factory=lambda: utc_now().isoformat())
    source: str
    correlation_id: str
    payload: dict


class CreditsSpent(EventEnvelope):
    """Published when credits are deducted for a paid feature."""

    event_type: str = "credits.credits.spent"


class CreditsGranted(EventEnvelope):
    """Published when credits are added (purchase, bonus, award, refund)."""

    event_type: str = "credits.credits.granted"
