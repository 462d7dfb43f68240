from __future__ import annotations

from collections.abc import Mapping
from datetime import date, timedelta

from lifetracker.core.dates import parse_day

MAX_LOOKBACK_DAYS = 365


def _index_logs(logs) -> dict:
    indexed = {}
    for key, value in (logs or {}).items():
        day = parse_day(key)
        if day is not None:
            indexed[day] = value
    return indexed


def is_completed(day_log, habit_id) -> bool:
    """True when ``day_log`` marks ``habit_id`` as completed.

    Accepts a plain bool, a collection of completed habit ids, or a mapping
    of habit id to a bool or to a ``{"completed": ...}`` record.
    """
    if day_log is None:
        return False
    if isinstance(day_log, bool):
        return day_log
    if isinstance(day_log, Mapping):
        entry = day_log.get(habit_id)
        if entry is None:
            entry = day_log.get(str(habit_id))
        if isinstance(entry, Mapping):
            return bool(entry.get("completed"))
        return bool(entry)
    if isinstance(day_log, (list, tuple, set, frozenset)):
        return habit_id in day_log or str(habit_id) in day_log
    return False


def current_streak(logs, habit_id, today: date, max_lookback: int = MAX_LOOKBACK_DAYS) -> int:
    indexed = _index_logs(logs)
    streak = 0
    for offset in range(max_lookback + 1):
        current = today - timedelta(days=offset)
        if is_completed(indexed.get(current), habit_id):
            streak += 1
        elif offset == 0:
            # An unfinished today keeps yesterday's streak alive.
            continue
        else:
            break
    return streak


def longest_streak(logs, habit_id, today: date, max_lookback: int = MAX_LOOKBACK_DAYS) -> int:
    indexed = _index_logs(logs)
    longest = 0
    run = 0
    for offset in range(max_lookback + 1):
        current = today - timedelta(days=offset)
        if is_completed(indexed.get(current), habit_id):
            run += 1
            longest = max(longest, run)
        else:
            run = 0
    return longest


def completion_rate(logs, habit_ids, day: date) -> float:
    habit_ids = list(habit_ids)
    if not habit_ids:
        return 0
    day_log = _index_logs(logs).get(day)
    done = sum(1 for habit_id in habit_ids if is_completed(day_log, habit_id))
    return round(done / len(habit_ids) * 100, 1)


def top_streaks(habits, logs, today: date, limit: int = 3, max_lookback: int = MAX_LOOKBACK_DAYS) -> list[dict]:
    rows = []
    for habit in habits:
        if not habit.get("active", True):
            continue
        rows.append(
            {
                "id": habit.get("id"),
                "name": habit.get("name"),
                "current_streak": current_streak(logs, habit.get("id"), today, max_lookback),
            }
        )
    rows.sort(key=lambda row: row["current_streak"], reverse=True)
    return rows[:limit]
