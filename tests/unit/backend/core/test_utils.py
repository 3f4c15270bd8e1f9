"""Unit tests for modules.backend.core.utils."""

from datetime import datetime

import pytest

from modules.backend.core.utils import (
    interval_end,
    month_key,
    random_digits,
    safe_filename,
    utc_now,
)


class TestUtcNow:
    def test_is_timezone_naive(self):
        assert utc_now().tzinfo is None


class TestMonthKey:
    def test_formats_year_and_month(self):
        assert month_key(datetime(2026, 3, 31, 23, 59)) == "2026-03"

    def test_defaults_to_current_month(self):
        assert month_key() == utc_now().strftime("%Y-%m")


class TestIntervalEnd:
    @pytest.mark.parametrize(
        ("interval", "expected"),
        [
            ("week", datetime(2026, 1, 8)),
            ("month", datetime(2026, 1, 31)),
            ("year", datetime(2027, 1, 1)),
        ],
    )
    def test_adds_interval_days(self, interval, expected):
        assert interval_end(interval, datetime(2026, 1, 1)) == expected

    def test_unknown_interval_raises(self):
        with pytest.raises(KeyError):
            interval_end("fortnight", datetime(2026, 1, 1))


class TestRandomDigits:
    def test_has_requested_length(self):
        value = random_digits(4)
        assert len(value) == 4
        assert value.isdigit()


class TestSafeFilename:
    def test_joins_and_replaces_unsafe_characters(self):
        assert safe_filename("Night Watch", "Sundance 2027", suffix=".zip") == "Night_Watch_Sundance_2027.zip"

    def test_strips_path_separators(self):
        assert safe_filename("../etc/passwd", "GI: Film/Fest") == "etc_passwd_GI_Film_Fest"

    def test_drops_empty_parts(self):
        assert safe_filename("Homefront", "!!!", suffix=".zip") == "Homefront.zip"
