"""
Integration tests for the festival submission tracker.
"""

from httpx import AsyncClient
from sqlalchemy import select

from modules.backend.models.activity import Activity
from modules.backend.models.enums import ActivityType

BASE = "/api/v1/festival-submissions"


async def _create(client: AsyncClient, headers: dict, **overrides) -> dict:
    payload = {
        "festival_name": "GI Film Festival",
        "category": "Short Documentary",
        "deadline": "2026-12-01T00:00:00",
        "fee": 4500,
        **overrides,
    }
    response = await client.post(BASE, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestCreateSubmission:
    async def test_defaults_to_draft_and_logs_activity(
        self, client: AsyncClient, api, db_session, public_user, public_headers,
    ):
        user_id = public_user.id

        submission = await _create(client, public_headers)

        assert submission["submitter_id"] == user_id
        assert submission["status"] == "draft"
        assert submission["fee"] == 4500

        result = await db_session.execute(
            select(Activity).where(Activity.type == ActivityType.FESTIVAL_SUBMISSION)
        )
        activity = result.scalar_one()
        assert activity.user_id == user_id
        assert "GI Film Festival" in activity.description

    async def test_negative_fee_is_rejected(self, client: AsyncClient, api, public_headers):
        response = await client.post(
            BASE, json={"festival_name": "Sundance", "fee": -1}, headers=public_headers,
        )

        api.assert_validation_error(response, field="fee")


class TestOwnership:
    async def test_lists_own_only(self, client: AsyncClient, api, public_headers, verified_headers):
        await _create(client, public_headers)
        await _create(client, verified_headers, festival_name="Tribeca")

        response = await client.get(BASE, headers=public_headers)

        assert [s["festival_name"] for s in api.assert_success(response)["data"]] == [
            "GI Film Festival",
        ]

    async def test_non_owner_get_is_forbidden(
        self, client: AsyncClient, api, public_headers, verified_headers,
    ):
        submission = await _create(client, public_headers)

        response = await client.get(f"{BASE}/{submission['id']}", headers=verified_headers)

        api.assert_error(response, 403, "AUTHZ_FORBIDDEN")

    async def test_non_owner_update_is_not_found(
        self, client: AsyncClient, api, public_headers, verified_headers,
    ):
        submission = await _create(client, public_headers)

        response = await client.put(
            f"{BASE}/{submission['id']}", json={"status": "withdrawn"}, headers=verified_headers,
        )

        api.assert_error(response, 404, "RES_NOT_FOUND")

    async def test_non_owner_delete_is_not_found(
        self, client: AsyncClient, api, public_headers, verified_headers,
    ):
        submission = await _create(client, public_headers)

        response = await client.delete(f"{BASE}/{submission['id']}", headers=verified_headers)

        api.assert_error(response, 404, "RES_NOT_FOUND")


class TestLifecycle:
    async def test_update_then_delete(self, client: AsyncClient, api, public_headers):
        submission = await _create(client, public_headers)
        url = f"{BASE}/{submission['id']}"

        updated = await client.put(
            url, json={"status": "submitted", "notes": "Sent rough cut"}, headers=public_headers,
        )
        data = api.assert_success(updated)["data"]
        assert data["status"] == "submitted"
        assert data["notes"] == "Sent rough cut"

        api.assert_success(await client.delete(url, headers=public_headers))
        api.assert_error(await client.get(url, headers=public_headers), 404, "RES_NOT_FOUND")

    async def test_null_festival_name_is_rejected(self, client: AsyncClient, api, public_headers):
        submission = await _create(client, public_headers)

        response = await client.put(
            f"{BASE}/{submission['id']}", json={"festival_name": None}, headers=public_headers,
        )

        api.assert_validation_error(response, field="festival_name")

    async def test_null_status_is_rejected(self, client: AsyncClient, api, public_headers):
        submission = await _create(client, public_headers)

        response = await client.put(
            f"{BASE}/{submission['id']}", json={"status": None}, headers=public_headers,
        )

        api.assert_validation_error(response, field="status")
