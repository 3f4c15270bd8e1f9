"""
Integration tests for onboarding progress and the welcome package.
"""

from httpx import AsyncClient
from sqlalchemy import select

from modules.backend.models.billing import CreditTransaction

BASE = "/api/v1/tutorial"


class TestProgress:
    async def test_saves_step(self, client: AsyncClient, api, public_headers):
        response = await client.put(f"{BASE}/progress", json={"step": 2}, headers=public_headers)

        data = api.assert_success(response)["data"]
        assert data["tutorial_step"] == 2
        assert data["has_completed_onboarding"] is False
        assert data["last_tutorial_interaction"] is not None

    async def test_completed_flag(self, client: AsyncClient, api, public_headers):
        response = await client.put(
            f"{BASE}/progress", json={"step": 5, "completed": True}, headers=public_headers,
        )

        data = api.assert_success(response)["data"]
        assert data["has_completed_onboarding"] is True
        assert data["tutorial_completed_at"] is not None
        # Progress alone never pays the welcome package
        assert data["has_received_welcome_package"] is False
        assert data["credits"] == 25

    async def test_step_out_of_range(self, client: AsyncClient, api, public_headers):
        response = await client.put(f"{BASE}/progress", json={"step": 6}, headers=public_headers)

        api.assert_validation_error(response, field="step")


class TestComplete:
    async def test_welcome_package_paid_once(
        self, client: AsyncClient, api, db_session, public_user, public_headers,
    ):
        user_id = public_user.id

        first = await client.post(f"{BASE}/complete", headers=public_headers)
        data = api.assert_success(first)["data"]
        assert data["credits_awarded"] == 25
        assert data["credits"] == 50
        assert data["tutorial_step"] == 5
        assert data["has_received_welcome_package"] is True

        second = await client.post(f"{BASE}/complete", headers=public_headers)
        data = api.assert_success(second)["data"]
        assert data["credits_awarded"] == 0
        assert data["credits"] == 50

        result = await db_session.execute(
            select(CreditTransaction).where(CreditTransaction.user_id == user_id)
        )
        assert [(t.amount, t.type) for t in result.scalars().all()] == [(25, "bonus")]
