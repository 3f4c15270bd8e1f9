"""
Unit Tests for pure service rules.

Discount pricing, spending tier resolution and referral code generation.
None of these touch the database.
"""

import re
from types import SimpleNamespace

import pytest

from modules.backend.models.achievement import SpendingTier
from modules.backend.services.achievement import (
    DEFAULT_ACHIEVEMENTS,
    DEFAULT_TIERS,
    next_tier,
    resolve_tier,
)
from modules.backend.services.billing import apply_discount, qualifies_for_military_discount
from modules.backend.services.referral import default_code_for


class TestApplyDiscount:
    """Tests for apply_discount."""

    @pytest.mark.parametrize(
        "amount,percent,expected",
        [
            (1000, 20, 800),
            (999, 20, 799),
            (1999, 20, 1599),
            (5, 50, 3),
            (1000, 0, 1000),
        ],
    )
    def test_rounds_half_up(self, amount, percent, expected):
        assert apply_discount(amount, percent) == expected


class TestMilitaryDiscount:
    """Tests for qualifies_for_military_discount."""

    @pytest.mark.parametrize("branch", ["army", "navy", "marines", "space_force"])
    def test_service_branches_qualify(self, branch):
        assert qualifies_for_military_discount(SimpleNamespace(military_branch=branch))

    @pytest.mark.parametrize("branch", [None, "", "civilian", "not_applicable"])
    def test_other_members_do_not(self, branch):
        assert not qualifies_for_military_discount(SimpleNamespace(military_branch=branch))


@pytest.fixture
def tiers() -> list[SpendingTier]:
    return [SpendingTier(**tier) for tier in DEFAULT_TIERS]


class TestResolveTier:
    """Tests for resolve_tier."""

    @pytest.mark.parametrize(
        "spent,expected",
        [
            (0, "Recruit"),
            (99, "Recruit"),
            (100, "Private"),
            (499, "Private"),
            (500, "Sergeant"),
            (2000, "Captain"),
            (4999, "Captain"),
            (5000, "General"),
            (250000, "General"),
        ],
    )
    def test_band_boundaries(self, tiers, spent, expected):
        assert resolve_tier(tiers, spent).name == expected

    def test_no_tiers(self):
        assert resolve_tier([], 100) is None


class TestNextTier:
    """Tests for next_tier."""

    def test_next_is_first_unreached(self, tiers):
        assert next_tier(tiers, 150).name == "Sergeant"

    def test_order_of_input_does_not_matter(self, tiers):
        assert next_tier(list(reversed(tiers)), 0).name == "Private"

    def test_none_at_top_tier(self, tiers):
        assert next_tier(tiers, 5000) is None


class TestDefaultCatalog:
    """Tests for the seeded tiers and achievements."""

    def test_tier_bands_are_contiguous(self):
        for lower, upper in zip(DEFAULT_TIERS, DEFAULT_TIERS[1:]):
            assert upper["min_spend"] == lower["max_spend"] + 1

    def test_top_tier_is_open_ended(self):
        assert DEFAULT_TIERS[-1]["max_spend"] is None

    def test_achievement_names_are_unique(self):
        names = [achievement["name"] for achievement in DEFAULT_ACHIEVEMENTS]
        assert len(names) == len(set(names)) == 8


class TestDefaultReferralCode:
    """Tests for default_code_for."""

    def test_uses_uppercased_first_name(self):
        code = default_code_for(SimpleNamespace(first_name="Vera"))
        assert re.fullmatch(r"VERA\d{4}", code)

    def test_strips_non_alphanumerics(self):
        code = default_code_for(SimpleNamespace(first_name="Mary-Jo 2"))
        assert re.fullmatch(r"MARYJO2\d{4}", code)

    @pytest.mark.parametrize("first_name", [None, "", "---"])
    def test_falls_back_without_usable_name(self, first_name):
        code = default_code_for(SimpleNamespace(first_name=first_name))
        assert re.fullmatch(r"BRAVO\d{4}", code)
