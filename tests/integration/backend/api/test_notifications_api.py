"""
Integration tests for the notifications endpoints.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient

from modules.backend.models.enums import NotificationType
from modules.backend.realtime.manager import get_connection_manager
from modules.backend.services.notification import NotificationService

BASE = "/api/v1/notifications"


@pytest.fixture
def notify(db_session):
    """Store a notification for a member and commit it."""

    async def _notify(user_id: str, title: str = "Heads up"):
        notification = await NotificationService(db_session).notify(
            user_id, NotificationType.SYSTEM_ALERT, title, "Something happened.",
        )
        await db_session.commit()
        return notification

    return _notify


class TestListNotifications:
    async def test_lists_own_notifications_newest_first(
        self, client: AsyncClient, api, public_user, verified_user, public_headers, notify,
    ):
        await notify(public_user.id, "First")
        await notify(public_user.id, "Second")
        await notify(verified_user.id, "Not yours")

        response = await client.get(BASE, headers=public_headers)

        titles = [n["title"] for n in api.assert_success(response)["data"]]
        assert sorted(titles) == ["First", "Second"]

    async def test_unread_count(self, client: AsyncClient, api, public_user, public_headers, notify):
        await notify(public_user.id)
        await notify(public_user.id)

        response = await client.get(f"{BASE}/unread-count", headers=public_headers)

        assert api.assert_success(response)["data"]["count"] == 2


class TestMarkRead:
    async def test_mark_read_is_idempotent(
        self, client: AsyncClient, api, public_user, public_headers, notify,
    ):
        notification = await notify(public_user.id)
        url = f"{BASE}/{notification.id}/read"

        first = api.assert_success(await client.patch(url, headers=public_headers))["data"]
        second = api.assert_success(await client.patch(url, headers=public_headers))["data"]

        assert first["is_read"] is True
        assert first["read_at"] is not None
        assert second["read_at"] == first["read_at"]

    async def test_cannot_mark_someone_elses(
        self, client: AsyncClient, api, verified_user, public_headers, notify,
    ):
        notification = await notify(verified_user.id)

        response = await client.patch(f"{BASE}/{notification.id}/read", headers=public_headers)

        api.assert_error(response, 404, "RES_NOT_FOUND")

    async def test_mark_all_read_reports_count(
        self, client: AsyncClient, api, public_user, public_headers, notify,
    ):
        await notify(public_user.id)
        await notify(public_user.id)

        response = await client.patch(f"{BASE}/mark-all-read", headers=public_headers)
        assert api.assert_success(response)["data"]["updated"] == 2

        again = await client.patch(f"{BASE}/mark-all-read", headers=public_headers)
        assert api.assert_success(again)["data"]["updated"] == 0

        count = await client.get(f"{BASE}/unread-count", headers=public_headers)
        assert api.assert_success(count)["data"]["count"] == 0


class TestDeleteNotification:
    async def test_delete_own(self, client: AsyncClient, api, public_user, public_headers, notify):
        notification = await notify(public_user.id)

        response = await client.delete(f"{BASE}/{notification.id}", headers=public_headers)
        api.assert_success(response)

        listing = await client.get(BASE, headers=public_headers)
        assert api.assert_success(listing)["data"] == []


class TestRealtimePush:
    async def test_connected_member_receives_push(
        self, client: AsyncClient, public_user, notify,
    ):
        websocket = MagicMock()
        websocket.send_json = AsyncMock()
        get_connection_manager().connect(public_user.id, websocket)

        notification = await notify(public_user.id, "Live")

        websocket.send_json.assert_awaited_once()
        message = websocket.send_json.call_args[0][0]
        assert message["type"] == "notification"
        assert message["data"]["id"] == notification.id
        assert message["data"]["title"] == "Live"
