"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching real databases.
"""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Provides a fully mocked AsyncSession with common methods.

    Usage:
        def test_service(mock_db_session: AsyncMock):
            service = CreditService(mock_db_session)
            # Test service methods
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()
    session.get = AsyncMock()
    return session


# =============================================================================
# Redis Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_redis() -> MagicMock:
    """
    Mock Redis client for unit tests.

    Provides a mocked Redis client with common methods.
    """
    redis = MagicMock()
    redis.ping = AsyncMock(return_value=True)
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock(return_value=True)
    redis.delete = AsyncMock(return_value=1)
    redis.aclose = AsyncMock()
    return redis


# =============================================================================
# HTTP Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_transport():
    """
    Build an httpx client whose requests are answered by a handler.

    Usage:
        async def test_provider(mock_transport):
            http = mock_transport(lambda request: httpx.Response(200, json={}))
            client = StripeClient(http=http)
    """

    def _build(handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url="https://provider.test",
            transport=httpx.MockTransport(handler),
        )

    return _build
