"""Row mapping for the relational store.

Columns are snake_case and some of them differ in meaning from the
in-memory records: events keep ISO datetimes in ``start_time``/``end_time``,
goals a ``status`` string, meals ``calories``, collection items a
``category`` column and reflections one ``answers_json`` blob.
"""
from __future__ import annotations

import json
import logging
from datetime import date, datetime

from lifetracker.adapters.snapshot import REFLECTION_ANSWER_FIELDS
from lifetracker.core.dates import day_key, parse_day
from lifetracker.core.models import Event, Recurrence

logger = logging.getLogger(__name__)

DEFAULT_EVENT_TIME = "09:00"
GOAL_STATUSES = {"planned", "active", "completed"}


def _loads(raw, default):
    if raw is None or raw == "":
        return default
    if isinstance(raw, (list, dict)):
        return raw
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        return default
    return value if isinstance(value, type(default)) else default


def _dumps(value) -> str | None:
    if value is None:
        return None
    return json.dumps(value, ensure_ascii=False)


def _iso(value):
    if value is None:
        return None
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def _clock(value) -> str | None:
    """``HH:MM`` from either a clock string or an ISO datetime string."""
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    if "T" in text:
        text = text.split("T", 1)[1]
    return text[:5] or None


def _combine(day: date, clock: str | None) -> str | None:
    if not clock:
        return None
    return f"{day.isoformat()}T{_clock(clock)}:00"


def recurrence_from_json(raw) -> Recurrence | None:
    payload = _loads(raw, {})
    kind = payload.get("type") or "none"
    if kind == "none":
        return None
    raw_end = payload.get("end_date") or payload.get("endDate")
    end_date = parse_day(raw_end)
    if raw_end and end_date is None:
        logger.warning("Dropping recurrence with unreadable end date: %r", raw_end)
        return None
    return Recurrence(
        type=str(kind),
        interval=payload.get("interval") if payload.get("interval") is not None else 1,
        end_date=end_date,
    )


def recurrence_to_json(recurrence: Recurrence | None) -> str | None:
    if recurrence is None or not recurrence.is_recurring:
        return None
    return _dumps(
        {
            "type": recurrence.type,
            "interval": recurrence.interval,
            "end_date": recurrence.end_date.isoformat() if recurrence.end_date else None,
        }
    )


def event_from_row(row) -> Event | None:
    row = dict(row)
    anchor = parse_day(row.get("start_time"))
    if anchor is None:
        return None
    all_day = bool(int(row.get("all_day") or 0))
    return Event(
        id=str(row.get("id")),
        title=row.get("title") or "Untitled event",
        date=anchor,
        start_time=None if all_day else _clock(row.get("start_time")),
        end_time=_clock(row.get("end_time")),
        recurrence=recurrence_from_json(row.get("recurrence_json")),
        color=row.get("color"),
        category=row.get("category"),
        location=row.get("location"),
        description=row.get("description"),
        extra={"created_at": _iso(row.get("created_at")), "updated_at": _iso(row.get("updated_at"))},
    )


def event_to_row(event: Event) -> dict:
    all_day = not event.start_time
    return {
        "id": event.id,
        "title": event.title,
        "description": event.description or "",
        "start_time": _combine(event.date, event.start_time or DEFAULT_EVENT_TIME),
        "end_time": _combine(event.date, event.end_time),
        "all_day": int(all_day),
        "category": event.category,
        "location": event.location or "",
        "color": event.color,
        "recurrence_json": recurrence_to_json(event.recurrence),
    }


def diary_entry_from_row(row) -> dict:
    row = dict(row)
    sport = _loads(row.get("sport_json"), {})
    return {
        "id": row.get("id"),
        "date": day_key(row.get("date")),
        "content": row.get("content") or "",
        "mood": row.get("mood"),
        "energy": row.get("energy"),
        "stress": row.get("stress"),
        "sleep": row.get("sleep"),
        "sport": sport or None,
        "tags": _loads(row.get("tags_json"), []),
        "timestamp": _iso(row.get("timestamp")),
    }


def diary_entry_to_row(entry: dict) -> dict:
    return {
        "content": entry.get("content") or "",
        "mood": entry.get("mood"),
        "energy": entry.get("energy"),
        "stress": entry.get("stress"),
        "sleep": entry.get("sleep"),
        "sport_json": _dumps(entry.get("sport")),
        "tags_json": _dumps(list(entry.get("tags") or [])),
    }


def habit_from_row(row) -> dict:
    row = dict(row)
    return {
        "id": row.get("id"),
        "name": row.get("name"),
        "icon": row.get("icon"),
        "color": row.get("color"),
        "frequency": row.get("frequency") or "daily",
        "weekly_goal": int(row.get("weekly_goal") or 7),
        "active": bool(int(row.get("active") if row.get("active") is not None else 1)),
        "created_at": _iso(row.get("created_at")),
    }


def goal_from_row(row) -> dict:
    row = dict(row)
    status = row.get("status") if row.get("status") in GOAL_STATUSES else "planned"
    return {
        "id": row.get("id"),
        "title": row.get("title"),
        "description": row.get("description"),
        "deadline": day_key(row.get("deadline")),
        "status": status,
        "completed": status == "completed",
        "milestones": _loads(row.get("milestones_json"), []),
        "tags": _loads(row.get("tags_json"), []),
        "created_at": _iso(row.get("created_at")),
    }


def goal_status(goal: dict) -> str:
    if "completed" in goal and goal["completed"] is not None:
        if goal["completed"]:
            return "completed"
        return goal.get("status") if goal.get("status") in {"planned", "active"} else "planned"
    status = goal.get("status")
    return status if status in GOAL_STATUSES else "planned"


def goal_to_row(goal: dict) -> dict:
    return {
        "title": goal.get("title"),
        "description": goal.get("description"),
        "deadline": day_key(goal.get("deadline")),
        "status": goal_status(goal),
        "milestones_json": _dumps(list(goal.get("milestones") or [])),
        "tags_json": _dumps(list(goal.get("tags") or [])),
    }


def reflection_from_row(row) -> dict:
    row = dict(row)
    record = {
        "id": row.get("id"),
        "type": row.get("type"),
        "date": day_key(row.get("date")),
        "created_at": _iso(row.get("created_at")),
    }
    answers = _loads(row.get("answers_json"), {})
    for camel, snake in REFLECTION_ANSWER_FIELDS.items():
        value = answers.get(camel)
        if value is not None:
            record[snake] = value
    return record


def reflection_answers(reflection: dict) -> str:
    answers = {}
    for camel, snake in REFLECTION_ANSWER_FIELDS.items():
        if reflection.get(snake) is not None:
            answers[camel] = reflection[snake]
    return _dumps(answers)


def meal_from_row(row) -> dict:
    row = dict(row)
    return {
        "id": row.get("id"),
        "date": day_key(row.get("date")),
        "type": row.get("type"),
        "name": row.get("name"),
        "amount": row.get("amount"),
        "unit": row.get("unit"),
        "kcal": int(row.get("calories") or 0),
        "notes": row.get("notes"),
    }


def _amount(value) -> float | None:
    try:
        return float(value) if value not in (None, "") else None
    except (TypeError, ValueError):
        return None


def meal_to_row(meal: dict) -> dict:
    return {
        "type": meal.get("type") or "Lunch",
        "name": meal.get("name"),
        "amount": _amount(meal.get("amount")),
        "unit": meal.get("unit"),
        "calories": int(meal.get("kcal") or 0),
        "notes": meal.get("notes"),
    }


def collection_item_from_row(row) -> dict:
    row = dict(row)
    return {
        "id": row.get("id"),
        "title": row.get("title"),
        "description": row.get("description"),
        "url": row.get("url"),
        "category_id": row.get("category"),
        "tags": _loads(row.get("tags_json"), []),
        "created_at": _iso(row.get("created_at")),
    }


def collection_item_to_row(item: dict) -> dict:
    return {
        "title": item.get("title"),
        "description": item.get("description"),
        "url": item.get("url"),
        "category": item.get("category_id"),
        "tags_json": _dumps(list(item.get("tags") or [])),
    }


def idea_from_row(row) -> dict:
    row = dict(row)
    return {
        "id": row.get("id"),
        "title": row.get("title"),
        "description": row.get("description"),
        "category_id": row.get("category"),
        "status": row.get("status") or "backlog",
        "tags": _loads(row.get("tags_json"), []),
        "created_at": _iso(row.get("created_at")),
    }


def idea_to_row(idea: dict) -> dict:
    return {
        "title": idea.get("title"),
        "description": idea.get("description"),
        "category": idea.get("category_id"),
        "status": idea.get("status") or "backlog",
        "tags_json": _dumps(list(idea.get("tags") or [])),
    }


def now_iso() -> str:
    return datetime.utcnow().isoformat()
