from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta


def parse_day(value) -> date | None:
    """Coerce a date, datetime or ISO string to a calendar date.

    Time components are dropped, so ``"2024-01-01T09:00:00"`` reads as
    ``date(2024, 1, 1)``. Returns ``None`` for anything unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def day_key(value) -> str | None:
    parsed = parse_day(value)
    return parsed.isoformat() if parsed else None


def days_between(first, second) -> int:
    a = parse_day(first)
    b = parse_day(second)
    if a is None or b is None:
        raise ValueError("Invalid date")
    return abs((b - a).days)


def days_of_week(day: date) -> list[date]:
    start = day - timedelta(days=day.weekday())
    return [start + timedelta(days=idx) for idx in range(7)]


def days_of_month(day: date) -> list[date]:
    _, last = calendar.monthrange(day.year, day.month)
    return [date(day.year, day.month, idx) for idx in range(1, last + 1)]


def week_number(day: date) -> int:
    return day.isocalendar()[1]


def relative_label(day: date, today: date) -> str:
    diff = (day - today).days
    if diff == 0:
        return "today"
    if diff == 1:
        return "tomorrow"
    if diff == -1:
        return "yesterday"
    if 1 < diff < 7:
        return f"in {diff} days"
    if -7 < diff < -1:
        return f"{abs(diff)} days ago"
    return day.isoformat()
