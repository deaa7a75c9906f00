from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Literal, Optional, Tuple, TypeAlias, Union

Weekday: TypeAlias = Literal[
    "Saturday",
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
]

# Canonical order for iteration and CSV layout (site week starts on Saturday).
WEEKDAYS: Tuple[Weekday, ...] = (
    "Saturday",
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
)

# date.weekday(): Monday == 0
_PY_WEEKDAY: Tuple[Weekday, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

BUCKET_MINUTES: int = 30
BUCKETS: int = 1440 // BUCKET_MINUTES

DateLike: TypeAlias = Union[str, date]

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


# -----------------------------
# Dates
# -----------------------------
def to_date(value: DateLike) -> date:
    """Accepts a date or an ISO `YYYY-MM-DD` string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError as e:
        raise ValueError(f"Invalid ISO date: {value!r}") from e


def compare_date(a: DateLike, b: DateLike) -> int:
    da, db = to_date(a), to_date(b)
    if da < db:
        return -1
    if da > db:
        return 1
    return 0


def add_days(value: DateLike, days: int) -> date:
    return to_date(value) + timedelta(days=int(days))


def weekday_of(value: DateLike) -> Weekday:
    return _PY_WEEKDAY[to_date(value).weekday()]


def is_weekday(value: object) -> bool:
    return isinstance(value, str) and value in WEEKDAYS


# -----------------------------
# Minutes / buckets
# -----------------------------
def bucket_label(k: int) -> str:
    """Start time of half-hour bucket k, covering [k*30, k*30+30)."""
    assert 0 <= k < BUCKETS, f"bucket index out of range: {k}"
    return to_hhmm(k * BUCKET_MINUTES)


def bucket_bounds(k: int) -> Tuple[int, int]:
    assert 0 <= k < BUCKETS, f"bucket index out of range: {k}"
    return k * BUCKET_MINUTES, (k + 1) * BUCKET_MINUTES


def to_hhmm(minutes: int) -> str:
    m = int(minutes)
    return f"{m // 60:02d}:{m % 60:02d}"


def parse_leading_int(text: object) -> Optional[int]:
    """
    Leading-integer parse: "30" -> 30, "30min" -> 30, " 7" -> 7, "abc" -> None.
    """
    if text is None:
        return None
    match = _LEADING_INT.match(str(text))
    if match is None:
        return None
    return int(match.group(1))


def parse_hhmm(text: object) -> Optional[int]:
    """
    Lenient HH:MM -> minute-of-day.

    Returns None when empty or when hour/minute are not numeric.
    Hour is clamped to [0, 23] and minute to [0, 59].
    """
    if text is None:
        return None
    s = str(text).strip()
    if not s:
        return None

    parts = s.split(":")
    if len(parts) < 2:
        return None

    hh = parse_leading_int(parts[0])
    mm = parse_leading_int(parts[1])
    if hh is None or mm is None:
        return None

    hh = max(0, min(23, hh))
    mm = max(0, min(59, mm))
    return hh * 60 + mm


__all__ = [
    "Weekday",
    "WEEKDAYS",
    "BUCKETS",
    "BUCKET_MINUTES",
    "DateLike",
    "to_date",
    "compare_date",
    "add_days",
    "weekday_of",
    "is_weekday",
    "bucket_label",
    "bucket_bounds",
    "to_hhmm",
    "parse_leading_int",
    "parse_hhmm",
]
