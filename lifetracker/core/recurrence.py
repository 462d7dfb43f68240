"""Resolve recurring calendar events against concrete days.

Every check works at day granularity. Malformed recurrence data (unknown
type, negative or non-numeric interval, unparseable dates) never raises;
it simply produces no recurring occurrence.
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

from lifetracker.core.dates import parse_day
from lifetracker.core.models import Event


def _interval(raw) -> int | None:
    if raw is None:
        return 1
    if isinstance(raw, bool):
        return None
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return None
    if value == 0:
        return 1
    if value < 0:
        return None
    return value


def occurs_on(event: Event, candidate) -> bool:
    anchor = parse_day(getattr(event, "date", None))
    target = parse_day(candidate)
    if anchor is None or target is None:
        return False
    if target == anchor:
        return True

    recurrence = getattr(event, "recurrence", None)
    kind = getattr(recurrence, "type", None) if recurrence is not None else None
    if not kind or kind == "none":
        return False
    if target < anchor:
        return False

    raw_end = getattr(recurrence, "end_date", None)
    if raw_end:
        end = parse_day(raw_end)
        if end is None:
            return False
        if target > end:
            return False

    interval = _interval(getattr(recurrence, "interval", None))
    if interval is None:
        return False

    elapsed = (target - anchor).days
    if kind == "daily":
        return elapsed % interval == 0
    if kind == "weekly":
        # Weeks are counted as elapsed days // 7, not calendar weeks.
        return (elapsed // 7) % interval == 0 and target.weekday() == anchor.weekday()
    if kind == "monthly":
        months = (target.year - anchor.year) * 12 + (target.month - anchor.month)
        return months % interval == 0 and target.day == anchor.day
    if kind == "yearly":
        years = target.year - anchor.year
        return years % interval == 0 and target.month == anchor.month and target.day == anchor.day
    return False


def events_on(events: Iterable[Event], day) -> list[Event]:
    return [event for event in events if occurs_on(event, day)]


def occurrences_between(event: Event, start: date, end: date) -> list[date]:
    if end < start:
        return []
    days = []
    current = start
    while current <= end:
        if occurs_on(event, current):
            days.append(current)
        current += timedelta(days=1)
    return days


def upcoming_occurrences(events: list[Event], start: date, days: int = 30, limit: int | None = 5) -> list[tuple[date, Event]]:
    found: list[tuple[date, Event]] = []
    for offset in range(max(0, days)):
        current = start + timedelta(days=offset)
        for event in events_on(events, current):
            found.append((current, event))
            if limit is not None and len(found) >= limit:
                return found
    return found
