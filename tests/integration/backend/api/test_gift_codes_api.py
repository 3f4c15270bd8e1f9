"""
Integration tests for gift code administration and redemption.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import update

from modules.backend.core.utils import utc_now
from modules.backend.models.gift_code import GiftCode
from modules.backend.repositories.gift_code import GiftCodeRepository

ADMIN_BASE = "/api/v1/admin/gift-codes"
REDEEM = "/api/v1/gift-codes/redeem"


@pytest.fixture
def make_code(db_session, admin_user):
    async def _make(code: str = "SALUTE50", **overrides):
        values = {"code": code, "credits": 50, "max_uses": 5, "created_by_id": admin_user.id}
        gift_code = await GiftCodeRepository(db_session).create(**{**values, **overrides})
        await db_session.commit()
        return gift_code

    return _make


class TestAdministration:
    async def test_create_normalizes_code(self, client: AsyncClient, api, admin_headers):
        response = await client.post(
            ADMIN_BASE,
            json={"code": " welcome25 ", "credits": 25, "description": "Launch promo"},
            headers=admin_headers,
        )

        data = api.assert_success(response, expected_status=201)["data"]
        assert data["code"] == "WELCOME25"
        assert data["max_uses"] == 1
        assert data["used_count"] == 0

    async def test_duplicate_code(self, client: AsyncClient, api, admin_headers, make_code):
        await make_code("SALUTE50")

        response = await client.post(
            ADMIN_BASE, json={"code": "salute50", "credits": 10}, headers=admin_headers,
        )

        api.assert_error(response, 409, "RES_CONFLICT")

    async def test_update_and_deactivate(self, client: AsyncClient, api, admin_headers, make_code):
        code_id = (await make_code()).id

        updated = await client.put(
            f"{ADMIN_BASE}/{code_id}", json={"credits": 75}, headers=admin_headers,
        )
        assert api.assert_success(updated)["data"]["credits"] == 75

        deactivated = await client.delete(f"{ADMIN_BASE}/{code_id}", headers=admin_headers)
        assert api.assert_success(deactivated)["data"]["is_active"] is False

        listing = await client.get(ADMIN_BASE, headers=admin_headers)
        assert [c["id"] for c in api.assert_success(listing)["data"]] == [code_id]

    async def test_null_credits_is_rejected(self, client: AsyncClient, api, admin_headers, make_code):
        code_id = (await make_code()).id

        response = await client.put(
            f"{ADMIN_BASE}/{code_id}", json={"credits": None}, headers=admin_headers,
        )

        api.assert_validation_error(response, field="credits")

    async def test_members_cannot_manage_codes(self, client: AsyncClient, api, verified_headers):
        response = await client.post(
            ADMIN_BASE, json={"code": "FREEBIE", "credits": 1000}, headers=verified_headers,
        )

        api.assert_error(response, 403, "AUTHZ_FORBIDDEN")


class TestRedeem:
    async def test_redeem_grants_credits_once(
        self, client: AsyncClient, api, public_headers, make_code,
    ):
        await make_code()

        response = await client.post(REDEEM, json={"code": "salute50"}, headers=public_headers)
        assert api.assert_success(response)["data"] == {"credits_received": 50, "credits": 75}

        again = await client.post(REDEEM, json={"code": "SALUTE50"}, headers=public_headers)
        api.assert_error(again, 409, "RES_CONFLICT")

    async def test_unknown_code(self, client: AsyncClient, api, public_headers):
        response = await client.post(REDEEM, json={"code": "NOPE"}, headers=public_headers)

        api.assert_error(response, 404, "RES_NOT_FOUND")

    async def test_inactive_code(self, client: AsyncClient, api, public_headers, make_code):
        await make_code(is_active=False)

        response = await client.post(REDEEM, json={"code": "SALUTE50"}, headers=public_headers)

        api.assert_error(response, 400, "VAL_VALIDATION_ERROR")

    async def test_expired_code(self, client: AsyncClient, api, public_headers, make_code):
        await make_code(expires_at=utc_now() - timedelta(days=1))

        response = await client.post(REDEEM, json={"code": "SALUTE50"}, headers=public_headers)

        api.assert_error(response, 400, "VAL_VALIDATION_ERROR")

    async def test_used_up_code(
        self, client: AsyncClient, api, public_headers, verified_headers, make_code,
    ):
        await make_code(max_uses=1)
        await client.post(REDEEM, json={"code": "SALUTE50"}, headers=verified_headers)

        response = await client.post(REDEEM, json={"code": "SALUTE50"}, headers=public_headers)

        data = api.assert_error(response, 400, "VAL_VALIDATION_ERROR")
        assert "usage limit" in data["error"]["message"]

    async def test_redeem_reads_the_committed_use_count(
        self, client: AsyncClient, api, db_session, public_headers, make_code,
    ):
        gift_code = await make_code(max_uses=1)
        # Another worker used the last redemption; this session still holds used_count=0
        await db_session.execute(
            update(GiftCode)
            .where(GiftCode.id == gift_code.id)
            .values(used_count=1)
            .execution_options(synchronize_session=False)
        )
        await db_session.commit()
        assert gift_code.used_count == 0

        response = await client.post(REDEEM, json={"code": "SALUTE50"}, headers=public_headers)

        data = api.assert_error(response, 400, "VAL_VALIDATION_ERROR")
        assert "usage limit" in data["error"]["message"]
