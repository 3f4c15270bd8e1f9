"""
Integration tests for achievements and spending tiers.
"""

import pytest
from httpx import AsyncClient

from modules.backend.models.enums import RelationshipType, UserRole
from modules.backend.services.achievement import AchievementService
from modules.backend.services.credits import CreditService


@pytest.fixture
async def seeded(db_session):
    await AchievementService(db_session).init_defaults()
    await db_session.commit()


class TestSeeding:
    async def test_admin_seeds_defaults_once(self, client: AsyncClient, api, admin_headers):
        first = await client.post("/api/v1/admin/init-achievements", headers=admin_headers)
        assert api.assert_success(first)["data"] == {"tiers_created": 5, "achievements_created": 8}

        second = await client.post("/api/v1/admin/init-achievements", headers=admin_headers)
        assert api.assert_success(second)["data"] == {"tiers_created": 0, "achievements_created": 0}

    async def test_catalog(self, client: AsyncClient, api, seeded, public_headers):
        achievements = await client.get("/api/v1/achievements", headers=public_headers)
        names = [a["name"] for a in api.assert_success(achievements)["data"]]
        assert names[0] == "First Draft"
        assert len(names) == 8

        tiers = await client.get("/api/v1/spending-tiers", headers=public_headers)
        assert [t["name"] for t in api.assert_success(tiers)["data"]] == [
            "Recruit", "Private", "Sergeant", "Captain", "General",
        ]


class TestProgress:
    async def test_new_member_is_a_recruit(self, client: AsyncClient, api, seeded, public_headers):
        response = await client.get("/api/v1/user/tier", headers=public_headers)

        data = api.assert_success(response)["data"]
        assert data["spending"] == 0
        assert data["current_tier"]["name"] == "Recruit"
        assert data["next_tier"]["name"] == "Private"

    async def test_spending_moves_tier_and_unlocks(
        self, client: AsyncClient, api, db_session, seeded, create_user, headers_for,
    ):
        veteran = await create_user(
            first_name="Sam",
            credits=200,
            role=UserRole.VERIFIED,
            relationship_type=RelationshipType.VETERAN,
        )
        headers = headers_for(veteran)
        await CreditService(db_session).deduct(veteran, 120, "Storyboard pack")
        unlocked = await AchievementService(db_session).evaluate_user(veteran.id)
        await db_session.commit()
        assert {a.name for a in unlocked} == {"First Investment", "Bravo Zulu"}

        tier = await client.get("/api/v1/user/tier", headers=headers)
        tier_data = api.assert_success(tier)["data"]
        assert tier_data["spending"] == 120
        assert tier_data["current_tier"]["name"] == "Private"
        assert tier_data["next_tier"]["name"] == "Sergeant"

        mine = await client.get("/api/v1/achievements/user", headers=headers)
        assert {a["achievement"]["name"] for a in api.assert_success(mine)["data"]} == {
            "First Investment", "Bravo Zulu",
        }

        stats = await client.get("/api/v1/achievements/stats", headers=headers)
        stats_data = api.assert_success(stats)["data"]
        assert stats_data["total_achievements"] == 8
        assert stats_data["unlocked_achievements"] == 2
        assert stats_data["current_tier"]["name"] == "Private"

    async def test_evaluation_is_idempotent(self, db_session, seeded, verified_user):
        service = AchievementService(db_session)

        first = await service.evaluate_user(verified_user.id)
        second = await service.evaluate_user(verified_user.id)

        assert [a.name for a in first] == ["Bravo Zulu"]
        assert second == []
