"""
Integration Tests for Model Persistence.

Column defaults, the shared mixins and the uniqueness constraints the
services rely on, checked against a real database session.
"""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.models.billing import MonthlyVeteranCredit
from modules.backend.models.friend import Friendship
from modules.backend.models.script import Script
from modules.backend.models.user import User


def _user(email: str) -> User:
    return User(email=email, hashed_password="not-a-real-hash")


class TestUserDefaults:
    async def test_new_member_defaults(self, db_session: AsyncSession):
        user = _user("recruit@example.com")
        db_session.add(user)
        await db_session.flush()

        assert user.role == "public"
        assert user.credits == 25
        assert user.total_credits_used == 0
        assert user.subscription_status == "none"
        assert user.specialties == []
        assert user.is_verified is False
        assert user.tutorial_step == 0

    async def test_display_name_falls_back_to_email(self):
        assert _user("anon@example.com").display_name == "anon@example.com"
        named = User(email="x@example.com", first_name="Vera", last_name="Veteran")
        assert named.display_name == "Vera Veteran"

    async def test_email_is_unique(self, db_session: AsyncSession):
        db_session.add(_user("twin@example.com"))
        await db_session.flush()

        db_session.add(_user("twin@example.com"))
        with pytest.raises(IntegrityError):
            await db_session.flush()


class TestMixins:
    async def test_uuid_and_timestamps(self, db_session: AsyncSession):
        author = _user("writer@example.com")
        db_session.add(author)
        await db_session.flush()
        first = Script(title="Homefront", author_id=author.id)
        second = Script(title="Night Watch", author_id=author.id)
        db_session.add_all([first, second])
        await db_session.flush()

        assert len(first.id) == 36
        assert first.id != second.id
        assert first.created_at is not None
        assert abs((first.updated_at - first.created_at).total_seconds()) < 1


class TestConstraints:
    async def test_friendship_pair_is_unique(self, db_session: AsyncSession):
        one, two = _user("one@example.com"), _user("two@example.com")
        db_session.add_all([one, two])
        await db_session.flush()
        db_session.add(Friendship(user1_id=one.id, user2_id=two.id))
        await db_session.flush()

        db_session.add(Friendship(user1_id=one.id, user2_id=two.id))
        with pytest.raises(IntegrityError):
            await db_session.flush()

    async def test_monthly_run_is_unique_per_month(self, db_session: AsyncSession):
        db_session.add(MonthlyVeteranCredit(month="2026-11", year=2026))
        await db_session.flush()

        db_session.add(MonthlyVeteranCredit(month="2026-11", year=2026))
        with pytest.raises(IntegrityError):
            await db_session.flush()


class TestIsolation:
    async def test_first_test_writes(self, db_session: AsyncSession):
        db_session.add(_user("isolated@example.com"))
        await db_session.flush()

    async def test_second_test_starts_clean(self, db_session: AsyncSession):
        result = await db_session.execute(select(User))
        assert result.scalars().all() == []
