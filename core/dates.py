"""Calendar-day helpers for the on-this-day lookups.

The feed is addressed by zero-padded ``MM/DD``; these helpers validate user
input into that form and produce the "today" and "random date" quick picks.
"""

from __future__ import annotations

import calendar
import random
from datetime import date
from typing import Optional

MISSING_DATE_MESSAGE = "Please select both a Month and a Day."

#: A leap year, so 29 February is a valid random pick.
_LEAP_YEAR = 2024


def _to_int(value: object, label: str, upper: int) -> int:
    try:
        number = int(str(value).strip())
    except ValueError:
        raise ValueError(f"{label} must be a number, got {value!r}.") from None
    if not 1 <= number <= upper:
        raise ValueError(f"{label} must be between 1 and {upper}, got {number}.")
    return number


def normalize_month_day(month: object, day: object) -> tuple[str, str]:
    """Validate a month/day pair and return it zero-padded.

    Raises:
        ValueError: If either part is missing, non-numeric, or out of range.

    Examples:
        >>> normalize_month_day("7", 4)
        ('07', '04')
    """
    if month in (None, "") or day in (None, ""):
        raise ValueError(MISSING_DATE_MESSAGE)
    m = _to_int(month, "Month", 12)
    d = _to_int(day, "Day", 31)
    return f"{m:02d}", f"{d:02d}"


def today_month_day(today: Optional[date] = None) -> tuple[str, str]:
    """Zero-padded month and day of *today* (defaults to the current date)."""
    today = today or date.today()
    return f"{today.month:02d}", f"{today.day:02d}"


def random_month_day(rng: Optional[random.Random] = None) -> tuple[str, str]:
    """Pick a random calendar day that actually exists."""
    rng = rng or random.Random()
    month = rng.randint(1, 12)
    day = rng.randint(1, calendar.monthrange(_LEAP_YEAR, month)[1])
    return f"{month:02d}", f"{day:02d}"
