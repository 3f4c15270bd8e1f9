"""
Background Job Broker.

Monthly veteran credits, subscription expiry and achievement sweeps run
as taskiq jobs on a Redis list queue. Queue name and result retention
come from database.yaml (redis.broker).

Usage:
    python cli.py --service worker

    taskiq worker modules.backend.tasks.broker:broker
"""

from typing import TYPE_CHECKING

from modules.backend.core.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from taskiq_redis import ListQueueBroker

_broker: "ListQueueBroker | None" = None


def create_broker() -> "ListQueueBroker":
    """Build the job queue with a Redis result backend attached."""
    from taskiq_redis import ListQueueBroker, RedisAsyncResultBackend

    from modules.backend.core.config import get_app_config, get_redis_url

    redis_url = get_redis_url()
    queue = get_app_config().database.redis.broker

    broker = ListQueueBroker(url=redis_url, queue_name=queue.queue_name).with_result_backend(
        RedisAsyncResultBackend(redis_url=redis_url, result_ex_time=queue.result_expiry_seconds)
    )
    logger.debug(
        "Job queue configured",
        extra={"queue_name": queue.queue_name, "result_expiry": queue.result_expiry_seconds},
    )
    return broker


def get_broker() -> "ListQueueBroker":
    """
    Shared job broker.

    The first call also registers the scheduled jobs, so the worker and the
    scheduler agree on task names and cron labels.
    """
    global _broker
    if _broker is not None:
        return _broker

    _broker = create_broker()

    @_broker.on_event("startup")
    async def on_startup() -> None:
        logger.info("Job worker started")

    @_broker.on_event("shutdown")
    async def on_shutdown() -> None:
        from modules.backend.core.database import dispose_engine

        # Jobs open their own sessions; release the pool with the worker.
        await dispose_engine()
        logger.info("Job worker stopped")

    from modules.backend.tasks.scheduled import register_scheduled_tasks

    register_scheduled_tasks()
    return _broker


def __getattr__(name: str):
    """`broker` is resolved lazily for the taskiq CLI."""
    if name == "broker":
        return get_broker()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
