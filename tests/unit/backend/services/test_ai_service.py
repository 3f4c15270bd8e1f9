"""
Unit tests for the AI tool runner.

Credits, notifications and the provider call are mocked; only the
charge-call-notify sequence is exercised.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from modules.backend.core.exceptions import ExternalServiceError
from modules.backend.services.ai import AiService


@pytest.fixture
def service(mock_db_session):
    service = AiService(mock_db_session)
    service.credits = MagicMock(
        deduct=AsyncMock(return_value=22),
        refund=AsyncMock(return_value=25),
    )
    service.notifications = MagicMock(notify=AsyncMock())
    with patch("modules.backend.services.ai.require_ai_tools"):
        yield service


@pytest.fixture
def user():
    return SimpleNamespace(id="user-1")


class TestRun:
    async def test_success_logs_the_ai_operation(self, service, user):
        with patch.object(service, "_logger") as logger:
            result = await service._run(
                user, "analyze_script", 3, "Script analysis ready", AsyncMock(return_value="Solid act two"),
            )

        assert result.content == "Solid act two"
        assert result.credits_used == 3
        assert result.remaining_credits == 22
        extra = logger.info.call_args.kwargs["extra"]
        assert extra["ai_operation"] == "analyze_script"
        assert extra["cost"] == 3
        service.notifications.notify.assert_awaited_once()

    async def test_provider_failure_refunds_and_reraises(self, service, user, mock_db_session):
        failing = AsyncMock(side_effect=ExternalServiceError("model unavailable"))

        with pytest.raises(ExternalServiceError):
            await service._run(user, "generate_script", 10, "Script ready", failing)

        service.credits.refund.assert_awaited_once_with(user, 10, "Refund for failed AI generate script")
        mock_db_session.commit.assert_awaited_once()
        service.notifications.notify.assert_not_awaited()
