"""
Scheduled Background Tasks.

Tasks that run on a schedule (cron-based).
These tasks are registered with the broker and include schedule metadata
that the TaskiqScheduler reads via LabelScheduleSource.

Schedule Format:
    schedule=[{"cron": "* * * * *", "args": [...], "kwargs": {...}}]

Cron Format:
    ┌───────────── minute (0-59)
    │ ┌───────────── hour (0-23)
    │ │ ┌───────────── day of month (1-31)
    │ │ │ ┌───────────── month (1-12)
    │ │ │ │ ┌───────────── day of week (0-6, Sun=0)
    │ │ │ │ │
    * * * * *

Usage:
    # Start scheduler
    python cli.py --service scheduler

Each task opens its own database session and commits on success. The
functions are plain coroutines, so tests call them directly.
"""

from typing import Any

from modules.backend.core.database import get_session_factory
from modules.backend.core.exceptions import ConflictError
from modules.backend.core.logging import get_logger
from modules.backend.core.utils import month_key, utc_now

logger = get_logger(__name__)


# =============================================================================
# Scheduled Task Functions
# =============================================================================


async def monthly_veteran_credits() -> dict[str, Any]:
    """
    Give verified veterans and active-duty members their monthly credits.

    Runs on the 1st of each month at 6:00 AM UTC. A month that was already
    processed (for example from the admin endpoint) is skipped.
    """
    from modules.backend.services.admin import AdminService

    logger.info("Starting monthly veteran credits")
    async with get_session_factory()() as session:
        try:
            result = await AdminService(session).process_monthly_credits()
        except ConflictError as e:
            logger.info("Monthly veteran credits skipped", extra={"reason": e.message})
            return {"status": "skipped", "month": month_key(utc_now())}
        await session.commit()

    logger.info("Monthly veteran credits completed", extra=result)
    return {"status": "completed", **result}


async def expire_subscriptions() -> dict[str, Any]:
    """Move active subscriptions past their expiry to past_due. Runs daily."""
    from modules.backend.services.billing import BillingService

    async with get_session_factory()() as session:
        expired = await BillingService(session).expire_subscriptions()
        await session.commit()

    logger.info("Subscription expiry completed", extra={"expired": expired})
    return {"status": "completed", "expired": expired, "completed_at": utc_now().isoformat()}


async def evaluate_achievements() -> dict[str, Any]:
    """Re-evaluate achievements for every member. Runs nightly."""
    from modules.backend.services.achievement import AchievementService

    async with get_session_factory()() as session:
        unlocked = await AchievementService(session).evaluate_all()
        await session.commit()

    logger.info("Achievement evaluation completed", extra={"unlocked": unlocked})
    return {"status": "completed", "unlocked": unlocked}


# =============================================================================
# Task Configuration
# =============================================================================

SCHEDULED_TASKS = {
    "monthly_veteran_credits": {
        "function": monthly_veteran_credits,
        "schedule": [{"cron": "0 6 1 * *"}],
        "retry_on_error": True,
        "max_retries": 3,
        "description": "Monthly veteran credit gift on the 1st at 6:00 AM UTC",
    },
    "expire_subscriptions": {
        "function": expire_subscriptions,
        "schedule": [{"cron": "0 1 * * *"}],
        "retry_on_error": True,
        "max_retries": 3,
        "description": "Expire lapsed subscriptions daily at 1:00 AM UTC",
    },
    "evaluate_achievements": {
        "function": evaluate_achievements,
        "schedule": [{"cron": "30 3 * * *"}],
        "retry_on_error": False,
        "description": "Nightly achievement evaluation at 3:30 AM UTC",
    },
}

_registered: dict[str, Any] = {}


def register_scheduled_tasks() -> dict[str, Any]:
    """
    Register scheduled task functions with the Taskiq broker.

    This wraps the plain async functions with broker.task decorators
    including their schedule configuration. Repeat calls return the
    tasks registered by the first call.

    Returns:
        Dict mapping task names to registered task objects
    """
    if _registered:
        return _registered

    from modules.backend.tasks.broker import get_broker

    broker = get_broker()
    if _registered:
        return _registered

    for task_name, config in SCHEDULED_TASKS.items():
        task_kwargs = {
            "task_name": task_name,
            "schedule": config["schedule"],
            "retry_on_error": config.get("retry_on_error", False),
        }

        if "max_retries" in config:
            task_kwargs["max_retries"] = config["max_retries"]

        _registered[task_name] = broker.task(**task_kwargs)(config["function"])

    logger.info(
        "Scheduled tasks registered",
        extra={
            "task_count": len(_registered),
            "tasks": list(_registered.keys()),
        },
    )

    return _registered
