"""
Integration tests for member reports and their moderation.
"""

from httpx import AsyncClient

BASE = "/api/v1/reports"


class TestCreateReport:
    async def test_report_a_member(
        self, client: AsyncClient, api, public_user, verified_user, public_headers,
    ):
        response = await client.post(
            BASE,
            json={
                "reason": "harassment",
                "description": "Repeated unwanted messages",
                "reported_user_id": verified_user.id,
            },
            headers=public_headers,
        )

        data = api.assert_success(response, expected_status=201)["data"]
        assert data["reporter_id"] == public_user.id
        assert data["reported_user_id"] == verified_user.id
        assert data["status"] == "pending"

    async def test_requires_exactly_one_target(self, client: AsyncClient, api, public_headers):
        response = await client.post(
            BASE,
            json={"reason": "spam", "reported_user_id": "a", "reported_post_id": "b"},
            headers=public_headers,
        )

        api.assert_validation_error(response)

    async def test_requires_a_target(self, client: AsyncClient, api, public_headers):
        response = await client.post(BASE, json={"reason": "spam"}, headers=public_headers)

        api.assert_validation_error(response)


class TestModeration:
    async def test_admin_lists_and_resolves(
        self, client: AsyncClient, api, verified_user, public_headers, admin_headers,
    ):
        created = await client.post(
            BASE,
            json={"reason": "spam", "reported_user_id": verified_user.id},
            headers=public_headers,
        )
        report_id = created.json()["data"]["id"]

        pending = await client.get(
            "/api/v1/admin/reports", params={"status": "pending"}, headers=admin_headers,
        )
        assert [r["id"] for r in api.assert_success(pending)["data"]] == [report_id]

        updated = await client.put(
            f"/api/v1/admin/reports/{report_id}",
            json={"status": "resolved"},
            headers=admin_headers,
        )
        assert api.assert_success(updated)["data"]["status"] == "resolved"

    async def test_members_cannot_list_reports(self, client: AsyncClient, api, verified_headers):
        response = await client.get("/api/v1/admin/reports", headers=verified_headers)

        api.assert_error(response, 403, "AUTHZ_FORBIDDEN")
