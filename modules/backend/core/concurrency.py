"""
Concurrency Infrastructure.

Named semaphores that bound concurrent calls to external providers.
Sizing is configured in config/settings/concurrency.yaml.

Usage:
    from modules.backend.core.concurrency import get_semaphore

    async with get_semaphore("llm"):
        response = await client.post(url, json=payload)
"""

import asyncio

from modules.backend.core.logging import get_logger

logger = get_logger(__name__)

_semaphores: dict[str, asyncio.Semaphore] = {}
_semaphore_capacities: dict[str, int] = {}


def get_semaphore(name: str) -> asyncio.Semaphore:
    """Get a named semaphore for concurrency-limiting external calls.

    Semaphores are created lazily. The capacity is read from concurrency.yaml
    under `semaphores.<name>`. Unknown names raise KeyError.
    """
    if name not in _semaphores:
        from modules.backend.core.config import get_app_config
        semaphore_config = get_app_config().concurrency.semaphores
        if not hasattr(semaphore_config, name):
            raise KeyError(f"Unknown semaphore: {name}")
        capacity = getattr(semaphore_config, name)
        _semaphores[name] = asyncio.Semaphore(capacity)
        _semaphore_capacities[name] = capacity
        logger.debug("Semaphore created", extra={"name": name, "capacity": capacity})
    return _semaphores[name]


def get_semaphore_status() -> dict[str, dict[str, int]]:
    """Capacity and free slots of every created semaphore."""
    return {
        name: {"capacity": _semaphore_capacities[name], "available": sem._value}
        for name, sem in _semaphores.items()
    }


async def shutdown_pools() -> None:
    """Drop all semaphores. Called during application shutdown."""
    _semaphores.clear()
    _semaphore_capacities.clear()
    logger.debug("Semaphores cleared")
