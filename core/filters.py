"""Event filtering.

Narrows a list of on-this-day events in two independent stages:

- Year bucket   coarse century-like ranges (``2000+``, ``1900s``, …)
- Category      naive keyword matching on the lower-cased event text

Both stages are stable: they select a subset and never reorder or modify the
events they are given. Selectors are always passed in explicitly.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Sequence
from enum import Enum
from typing import Callable, Optional, Union

from core.models import HistoricalEvent

logger = logging.getLogger(__name__)


# ── Selectors ──────────────────────────────────────────────────────────────────


class YearBucket(str, Enum):
    """Named year ranges offered in the era dropdown."""

    ALL = "all"
    SINCE_2001 = "2000+"
    C1900S = "1900s"
    C1800S = "1800s"
    BEFORE_1800 = "before-1800"

    @classmethod
    def coerce(cls, value: Union[YearBucket, str, None]) -> YearBucket:
        """Map *value* onto a bucket, falling back to ``ALL`` when unknown."""
        try:
            return cls(value)
        except ValueError:
            return cls.ALL


class Category(str, Enum):
    """Thematic labels offered in the category dropdown."""

    ALL = "all"
    SCIENCE = "science"
    WARS = "wars"
    ART = "art"
    POLITICS = "politics"
    DISASTER = "disaster"
    SPORTS = "sports"
    ECONOMY = "economy"
    BIRTHS = "births"

    @classmethod
    def coerce(cls, value: Union[Category, str, None]) -> Category:
        """Map *value* onto a category, falling back to ``ALL`` when unknown."""
        try:
            return cls(value)
        except ValueError:
            return cls.ALL


#: Inclusive predicate for each bucket. ``ALL`` has none: it never filters.
_BUCKET_PREDICATES: dict[YearBucket, Callable[[int], bool]] = {
    YearBucket.SINCE_2001: lambda y: y >= 2001,
    YearBucket.C1900S: lambda y: 1901 <= y <= 2000,
    YearBucket.C1800S: lambda y: 1801 <= y <= 1900,
    YearBucket.BEFORE_1800: lambda y: y <= 1800,
}


# ── Keyword sets ───────────────────────────────────────────────────────────────

#: Lower-case substrings per category. Matching is plain containment, so
#: "war" also hits "warden" and "award".
CATEGORY_KEYWORDS: dict[Category, tuple[str, ...]] = {
    Category.ALL: (),
    Category.SCIENCE: (
        "science", "scientist", "discover", "invent", "physic", "chemi",
        "astronom", "telescope", "space", "satellite", "moon", "planet",
        "vaccine", "medic", "nobel", "computer", "patent",
    ),
    Category.WARS: (
        "war", "battle", "invasion", "invade", "siege", "army", "troops",
        "military", "bomb", "treaty", "armistice", "surrender", "rebellion",
    ),
    Category.ART: (
        "painting", "painter", "sculpt", "museum", "artist", "novel", "poet",
        "music", "film", "opera", "album", "theatre", "theater", "literature",
        "composer",
    ),
    Category.POLITICS: (
        "president", "election", "elected", "parliament", "government",
        "prime minister", "king", "queen", "emperor", "independence",
        "constitution", "senate", "congress", "assassinat", "revolution",
    ),
    Category.DISASTER: (
        "earthquake", "flood", "hurricane", "tsunami", "eruption", "volcano",
        "fire", "explosion", "crash", "disaster", "famine", "epidemic",
        "pandemic", "sank", "collapse",
    ),
    Category.SPORTS: (
        "olympic", "football", "championship", "world cup", "tournament",
        "medal", "cricket", "baseball", "tennis", "boxing", "race", "stadium",
    ),
    Category.ECONOMY: (
        "economy", "economic", "bank", "stock", "market", "trade", "currency",
        "company", "recession", "depression", "tax", "oil", "inflation",
    ),
    Category.BIRTHS: ("born", "birth"),
}


# ── Year parsing ───────────────────────────────────────────────────────────────

_LEADING_INT = re.compile(r"\s*([+-]?)([0-9]+)")

#: Digit runs longer than this are truncated; the magnitude still exceeds
#: every bucket boundary, so comparisons are unaffected.
_MAX_YEAR_DIGITS = 18


def parse_year(value: object) -> Optional[int]:
    """Parse a feed ``year`` value the way a browser's ``parseInt`` would.

    Leading whitespace and sign are accepted and trailing garbage is ignored;
    a value with no leading digits does not parse.

    Examples:
        >>> parse_year("1969")
        1969
        >>> parse_year(" 44 BC")
        44
        >>> parse_year("circa 1500") is None
        True
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if not match:
            return None
        sign, digits = match.groups()
        digits = digits.lstrip("0") or "0"
        year = int(digits[:_MAX_YEAR_DIGITS])
        return -year if sign == "-" else year
    return None


# ── Stage 1: year bucket ───────────────────────────────────────────────────────


def filter_by_year(
    events: Sequence[HistoricalEvent],
    bucket: Union[YearBucket, str, None],
) -> list[HistoricalEvent]:
    """Keep the events whose year falls inside *bucket*.

    Unknown bucket values behave like ``ALL``. Events whose year cannot be
    parsed never fall inside a bucket; they are dropped with a warning.

    Args:
        events: Events in feed order.
        bucket: A ``YearBucket`` or its string value.

    Returns:
        A new list holding the matching events in their original order.
    """
    bucket = YearBucket.coerce(bucket)
    predicate = _BUCKET_PREDICATES.get(bucket)
    if predicate is None:
        return list(events)

    kept: list[HistoricalEvent] = []
    for event in events:
        year = parse_year(event.year)
        if year is None:
            logger.warning(
                "Dropping event with unparseable year %r from bucket %s: %.60r",
                event.year, bucket.value, event.text,
            )
            continue
        if predicate(year):
            kept.append(event)
    return kept


# ── Stage 2: category ──────────────────────────────────────────────────────────


def matches_category(event: HistoricalEvent, category: Category) -> bool:
    """Return True if *event*'s text contains any keyword of *category*."""
    keywords = CATEGORY_KEYWORDS.get(category) or ()
    if not keywords:
        return True
    text = event.text.lower()
    return any(keyword in text for keyword in keywords)


def filter_by_category(
    events: Sequence[HistoricalEvent],
    category: Union[Category, str, None],
) -> list[HistoricalEvent]:
    """Keep the events whose text mentions one of *category*'s keywords.

    ``ALL``, unknown categories and categories without keywords pass every
    event through.
    """
    category = Category.coerce(category)
    if not CATEGORY_KEYWORDS.get(category):
        return list(events)
    return [event for event in events if matches_category(event, category)]


# ── Public pipeline ────────────────────────────────────────────────────────────


def apply_filters(
    events: Sequence[HistoricalEvent],
    bucket: Union[YearBucket, str, None] = YearBucket.ALL,
    category: Union[Category, str, None] = Category.ALL,
) -> list[HistoricalEvent]:
    """Full filter pipeline: year bucket → category.

    This is the single entry point used by ``web/app.py``.
    """
    by_year = filter_by_year(events, bucket)
    result = filter_by_category(by_year, category)
    logger.info(
        "Filtered %d events to %d (bucket=%s category=%s)",
        len(events), len(result),
        YearBucket.coerce(bucket).value, Category.coerce(category).value,
    )
    return result
