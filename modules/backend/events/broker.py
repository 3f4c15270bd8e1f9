"""
Credit Event Bus.

Credit grants and spends are published to Redis streams through a
FastStream RedisBroker that shares the job queue's Redis instance. The
event worker runs the consumers registered here.

Usage:
    faststream run --factory modules.backend.events.broker:create_event_app
"""

from faststream import FastStream
from faststream.redis import RedisBroker

from modules.backend.core.logging import get_logger

logger = get_logger(__name__)

_broker: RedisBroker | None = None
_app: FastStream | None = None

# Imported for their @subscriber side effects.
CONSUMER_MODULES = ("modules.backend.events.consumers.achievements",)


def create_event_broker() -> RedisBroker:
    from modules.backend.core.config import get_redis_url
    from modules.backend.events.middleware import EventObservabilityMiddleware

    broker = RedisBroker(get_redis_url(), middlewares=[EventObservabilityMiddleware])
    logger.info("Credit event bus created")
    return broker


def get_event_broker() -> RedisBroker:
    """Shared bus used by publishers in the API and by the consumers."""
    global _broker
    if _broker is None:
        _broker = create_event_broker()
    return _broker


def create_event_app() -> FastStream:
    """Factory for the event worker process, with every consumer attached."""
    global _app
    if _app is not None:
        return _app

    import importlib

    broker = get_event_broker()
    for module in CONSUMER_MODULES:
        importlib.import_module(module)

    _app = FastStream(broker)
    logger.info("Event worker ready", extra={"consumers": list(CONSUMER_MODULES)})
    return _app
