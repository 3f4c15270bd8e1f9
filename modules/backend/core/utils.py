"""
Core Utilities.

Shared utility functions used across the backend.
"""

import re
import secrets
from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application are timezone-naive
    and assumed to be UTC.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def month_key(moment: datetime | None = None) -> str:
    """Return the "YYYY-MM" key for a moment (defaults to now)."""
    moment = moment or utc_now()
    return moment.strftime("%Y-%m")


INTERVAL_DAYS = {"week": 7, "month": 30, "year": 365}


def interval_end(interval: str, start: datetime | None = None) -> datetime:
    """End of a billing interval starting at `start` (defaults to now)."""
    start = start or utc_now()
    return start + timedelta(days=INTERVAL_DAYS[interval])


def random_digits(count: int) -> str:
    """Random decimal string of the given length."""
    return "".join(secrets.choice("0123456789") for _ in range(count))


def safe_filename(*parts: str, suffix: str = "") -> str:
    """
    Join parts into a filename with only letters, digits, dots, dashes and underscores.

    safe_filename("Night Watch", "Sundance 2027", suffix=".zip") -> "Night_Watch_Sundance_2027.zip"
    """
    cleaned = [re.sub(r"[^A-Za-z0-9.-]+", "_", part).strip("._-") for part in parts]
    return "_".join(p for p in cleaned if p) + suffix
