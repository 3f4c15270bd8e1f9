"""
Background Tasks Package.

Taskiq-based scheduled jobs with a Redis backend: the monthly veteran
credit gift, subscription expiry and nightly achievement evaluation.

Usage (with Redis - production):
    from modules.backend.tasks import get_broker, register_scheduled_tasks

    broker = get_broker()
    scheduled = register_scheduled_tasks()

    # Trigger a scheduled job immediately
    await scheduled["expire_subscriptions"].kiq()

Usage (without Redis - testing):
    from modules.backend.tasks.scheduled import expire_subscriptions

    result = await expire_subscriptions()

CLI Commands:
    python cli.py --service worker
    python cli.py --service scheduler

Important:
    Run only ONE scheduler instance to avoid duplicate task execution.
"""

from modules.backend.tasks.broker import get_broker
from modules.backend.tasks.scheduler import get_scheduler
from modules.backend.tasks.scheduled import (
    SCHEDULED_TASKS,
    register_scheduled_tasks,
    # Export raw functions for direct use/testing
    monthly_veteran_credits,
    expire_subscriptions,
    evaluate_achievements,
)

__all__ = [
    "get_broker",
    "get_scheduler",
    "register_scheduled_tasks",
    "SCHEDULED_TASKS",
    "monthly_veteran_credits",
    "expire_subscriptions",
    "evaluate_achievements",
]


def __getattr__(name: str):
    """Lazy attribute access for broker and scheduler."""
    if name == "broker":
        return get_broker()
    if name == "scheduler":
        return get_scheduler()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
