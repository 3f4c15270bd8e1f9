"""
Integration tests for the admin endpoints.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from modules.backend.core.utils import month_key
from modules.backend.models.enums import RelationshipType, UserRole
from modules.backend.models.notification import Notification

BASE = "/api/v1/admin"


async def _notification_titles(db_session, user_id: str) -> list[str]:
    result = await db_session.execute(
        select(Notification.title).where(Notification.user_id == user_id)
    )
    return list(result.scalars().all())


class TestAccess:
    @pytest.mark.parametrize("path", ["/stats", "/users", "/verification-requests"])
    async def test_members_are_forbidden(self, client: AsyncClient, api, verified_headers, path):
        response = await client.get(f"{BASE}{path}", headers=verified_headers)

        api.assert_error(response, 403, "AUTHZ_FORBIDDEN")

    async def test_anonymous_is_unauthorized(self, client: AsyncClient, api):
        response = await client.get(f"{BASE}/stats")

        api.assert_error(response, 401, "AUTH_UNAUTHORIZED")


class TestOverview:
    async def test_users_are_paginated(
        self, client: AsyncClient, api, admin_headers, verified_user, public_user,
    ):
        response = await client.get(f"{BASE}/users", params={"limit": 2}, headers=admin_headers)

        data = api.assert_success(response)
        assert len(data["data"]) == 2
        assert data["pagination"]["total"] == 3
        assert data["pagination"]["has_more"] is True

    async def test_stats(self, client: AsyncClient, api, admin_headers, verified_user, public_user):
        response = await client.get(f"{BASE}/stats", headers=admin_headers)

        assert api.assert_success(response)["data"] == {
            "total_users": 3,
            "verified_veterans": 1,
            "total_scripts": 0,
            "total_projects": 0,
            "credits_awarded": 0,
        }


class TestAwardCredits:
    async def test_award_records_and_notifies(
        self, client: AsyncClient, api, db_session, admin_user, admin_headers, verified_user,
    ):
        admin_id, member_id = admin_user.id, verified_user.id

        response = await client.post(
            f"{BASE}/award-credits",
            json={"user_id": member_id, "amount": 40, "reason": "Festival volunteer"},
            headers=admin_headers,
        )

        assert api.assert_success(response)["data"]["credits"] == 65
        assert await _notification_titles(db_session, member_id) == ["Credits awarded"]

        ledger = await client.get(f"{BASE}/credit-transactions", headers=admin_headers)
        transactions = api.assert_success(ledger)["data"]
        assert len(transactions) == 1
        assert transactions[0]["type"] == "admin_award"
        assert transactions[0]["awarded_by"] == admin_id
        assert transactions[0]["user"]["id"] == member_id

    async def test_unknown_member(self, client: AsyncClient, api, admin_headers):
        response = await client.post(
            f"{BASE}/award-credits",
            json={"user_id": "ghost", "amount": 40, "reason": "Oops"},
            headers=admin_headers,
        )

        api.assert_error(response, 404, "RES_NOT_FOUND")

    async def test_amount_must_be_positive(self, client: AsyncClient, api, admin_headers, verified_user):
        response = await client.post(
            f"{BASE}/award-credits",
            json={"user_id": verified_user.id, "amount": 0, "reason": "Nothing"},
            headers=admin_headers,
        )

        api.assert_validation_error(response, field="amount")


class TestVerification:
    @pytest.fixture
    async def applicant(self, create_user):
        return await create_user(first_name="Ava", last_name="Applicant", role=UserRole.PENDING)

    async def test_pending_members_are_listed(self, client: AsyncClient, api, admin_headers, applicant):
        applicant_id = applicant.id

        response = await client.get(f"{BASE}/verification-requests", headers=admin_headers)

        assert [u["id"] for u in api.assert_success(response)["data"]] == [applicant_id]

    async def test_approve(self, client: AsyncClient, api, db_session, admin_headers, applicant):
        applicant_id = applicant.id

        response = await client.post(
            f"{BASE}/verify-service",
            json={
                "user_id": applicant_id,
                "service_type": "veteran",
                "branch": "navy",
                "years_served": 8,
            },
            headers=admin_headers,
        )

        data = api.assert_success(response)["data"]
        assert data["role"] == "verified"
        assert data["is_verified"] is True
        assert data["military_branch"] == "navy"
        assert data["years_of_service"] == 8
        assert await _notification_titles(db_session, applicant_id) == ["Verification approved"]

    async def test_hold(self, client: AsyncClient, api, admin_headers, applicant):
        response = await client.post(
            f"{BASE}/verify-service",
            json={"user_id": applicant.id, "service_type": "family_member", "verified": False},
            headers=admin_headers,
        )

        data = api.assert_success(response)["data"]
        assert data["role"] == "pending"
        assert data["is_verified"] is False

    async def test_update_military_service_always_verifies(
        self, client: AsyncClient, api, admin_headers, applicant,
    ):
        response = await client.post(
            f"{BASE}/update-military-service",
            json={"user_id": applicant.id, "service_type": "active_duty", "verified": False},
            headers=admin_headers,
        )

        data = api.assert_success(response)["data"]
        assert data["role"] == "verified"
        assert data["relationship_type"] == "active_duty"

    async def test_invalid_service_type(self, client: AsyncClient, api, admin_headers, applicant):
        response = await client.post(
            f"{BASE}/verify-service",
            json={"user_id": applicant.id, "service_type": "mercenary"},
            headers=admin_headers,
        )

        api.assert_validation_error(response, field="service_type")


class TestMonthlyCredits:
    async def test_runs_once_per_month(
        self, client: AsyncClient, api, db_session, admin_headers, verified_user, create_user,
    ):
        veteran_id = verified_user.id
        await create_user(
            first_name="Ally",
            role=UserRole.VERIFIED,
            relationship_type=RelationshipType.SUPPORTER,
        )

        response = await client.post(f"{BASE}/process-monthly-credits", headers=admin_headers)

        assert api.assert_success(response)["data"] == {
            "veterans_awarded": 1,
            "total_credits": 150,
            "month": month_key(),
        }
        await db_session.refresh(verified_user)
        assert verified_user.credits == 175
        assert await _notification_titles(db_session, veteran_id) == ["Monthly veteran credits"]

        again = await client.post(f"{BASE}/process-monthly-credits", headers=admin_headers)
        api.assert_error(again, 409, "RES_CONFLICT")

    async def test_unconfirmed_service_is_skipped(
        self, client: AsyncClient, api, db_session, admin_headers, verified_user, create_user,
    ):
        unconfirmed = await create_user(
            first_name="Una",
            role=UserRole.VERIFIED,
            relationship_type=RelationshipType.VETERAN,
            is_verified=False,
        )

        response = await client.post(f"{BASE}/process-monthly-credits", headers=admin_headers)

        assert api.assert_success(response)["data"]["veterans_awarded"] == 1
        await db_session.refresh(unconfirmed)
        assert unconfirmed.credits == 25


class TestSeedPlans:
    async def test_init_plans_once(self, client: AsyncClient, api, admin_headers):
        first = await client.post(f"{BASE}/init-plans", headers=admin_headers)
        assert api.assert_success(first)["data"] == {
            "message": "Created 3 plans",
            "plans_created": 3,
        }

        second = await client.post(f"{BASE}/init-plans", headers=admin_headers)
        assert api.assert_success(second)["data"]["plans_created"] == 0

        plans = await client.get("/api/v1/billing/plans")
        assert [p["id"] for p in api.assert_success(plans)["data"]] == [
            "weekly", "monthly", "yearly",
        ]
