"""
Task Scheduler.

Drives the monthly veteran credit run, daily subscription expiry and
nightly achievement evaluation. Schedules are read from the labels that
register_scheduled_tasks() attaches to each task; get_broker() registers
them when the broker is first built.

Usage:
    python cli.py --service scheduler

    # Or directly with taskiq
    taskiq scheduler modules.backend.tasks.scheduler:scheduler

Run only ONE scheduler process, otherwise every job fires once per process.
"""

from typing import TYPE_CHECKING

from modules.backend.core.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from taskiq import TaskiqScheduler

_scheduler: "TaskiqScheduler | None" = None


def create_scheduler() -> "TaskiqScheduler":
    """Build a scheduler over the labels of the registered jobs."""
    from taskiq import TaskiqScheduler
    from taskiq.schedule_sources import LabelScheduleSource

    from modules.backend.tasks.broker import get_broker
    from modules.backend.tasks.scheduled import SCHEDULED_TASKS

    broker = get_broker()

    scheduler = TaskiqScheduler(broker=broker, sources=[LabelScheduleSource(broker)])
    logger.info(
        "Scheduler ready",
        extra={
            "jobs": {
                name: config["schedule"][0]["cron"] for name, config in SCHEDULED_TASKS.items()
            },
        },
    )
    return scheduler


def get_scheduler() -> "TaskiqScheduler":
    global _scheduler
    if _scheduler is None:
        _scheduler = create_scheduler()
    return _scheduler


def __getattr__(name: str):
    """`scheduler` is resolved lazily for the taskiq CLI."""
    if name == "scheduler":
        return get_scheduler()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
