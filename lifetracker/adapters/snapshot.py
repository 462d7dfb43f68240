"""Backend neutral snapshot of a user's data plus camelCase item mapping.

Both local persistence paths keep every record in the client's camelCase
shape; they only differ in how records are grouped. The item converters
here are shared by both adapters, the grouping lives in each adapter.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from lifetracker.core.dates import day_key, parse_day
from lifetracker.core.models import Event, Recurrence

logger = logging.getLogger(__name__)

DEFAULT_TARGET_KCAL = 2000
THEMES = {"light", "dark", "system"}
IDEA_STATUSES = ["backlog", "in-progress", "completed", "archived"]
REFLECTION_TYPES = ["daily", "weekly", "monthly"]
REFLECTION_ANSWER_FIELDS = {
    "gratitude": "gratitude",
    "highlights": "highlights",
    "challenges": "challenges",
    "learnings": "learnings",
    "tomorrow": "tomorrow",
    "wins": "wins",
    "habits": "habits",
    "nextWeekFocus": "next_week_focus",
    "achievements": "achievements",
    "growthAreas": "growth_areas",
    "nextMonthGoals": "next_month_goals",
    "overall": "overall",
}


@dataclass
class Snapshot:
    settings: Dict[str, Any] = field(default_factory=dict)
    diary_entries: List[dict] = field(default_factory=list)
    diary_summaries: Dict[str, str] = field(default_factory=dict)
    collection_items: List[dict] = field(default_factory=list)
    collection_categories: List[dict] = field(default_factory=list)
    ideas: List[dict] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)
    habits: List[dict] = field(default_factory=list)
    habit_logs: List[dict] = field(default_factory=list)
    goals: List[dict] = field(default_factory=list)
    reflections: List[dict] = field(default_factory=list)
    meals: List[dict] = field(default_factory=list)

    def counts(self) -> dict:
        return {
            "diary_entries": len(self.diary_entries),
            "diary_summaries": len(self.diary_summaries),
            "collection_items": len(self.collection_items),
            "collection_categories": len(self.collection_categories),
            "ideas": len(self.ideas),
            "events": len(self.events),
            "habits": len(self.habits),
            "habit_logs": len(self.habit_logs),
            "goals": len(self.goals),
            "reflections": len(self.reflections),
            "meals": len(self.meals),
        }


def _str_or_none(value):
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _int_or_none(value):
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _tags(value) -> list:
    if not value:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return [str(item) for item in value if str(item).strip()]


def _id(value):
    return None if value is None else str(value)


def settings_from_camel(raw: dict | None, target_kcal=None) -> dict:
    raw = raw or {}
    theme = raw.get("theme") if raw.get("theme") in THEMES else "system"
    kcal = _int_or_none(target_kcal if target_kcal is not None else raw.get("targetKcal"))
    return {
        "notifications_enabled": bool(raw.get("notificationsEnabled", False)),
        "target_kcal": kcal or DEFAULT_TARGET_KCAL,
        "theme": theme,
    }


def settings_to_camel(settings: dict) -> dict:
    return {
        "notificationsEnabled": bool(settings.get("notifications_enabled")),
        "targetKcal": settings.get("target_kcal") or DEFAULT_TARGET_KCAL,
        "theme": settings.get("theme") or "system",
    }


def recurrence_from_camel(raw) -> Recurrence | None:
    if not isinstance(raw, dict):
        return None
    kind = raw.get("type") or "none"
    if kind == "none":
        return None
    raw_end = raw.get("endDate") or raw.get("end_date")
    end_date = parse_day(raw_end)
    if raw_end and end_date is None:
        logger.warning("Dropping recurrence with unreadable end date: %r", raw_end)
        return None
    return Recurrence(
        type=str(kind),
        interval=raw.get("interval") if raw.get("interval") not in ("", None) else 1,
        end_date=end_date,
    )


def recurrence_to_camel(recurrence: Recurrence | None) -> dict:
    if recurrence is None or not recurrence.is_recurring:
        return {"type": "none", "interval": None, "endDate": None}
    return {
        "type": recurrence.type,
        "interval": recurrence.interval,
        "endDate": recurrence.end_date.isoformat() if recurrence.end_date else None,
    }


def event_from_camel(raw: dict) -> Event | None:
    anchor = parse_day(raw.get("date") or raw.get("start_time"))
    if anchor is None:
        return None
    return Event(
        id=_id(raw.get("id")) or "",
        title=str(raw.get("title") or "Untitled event"),
        date=anchor,
        start_time=_str_or_none(raw.get("startTime")),
        end_time=_str_or_none(raw.get("endTime")),
        recurrence=recurrence_from_camel(raw.get("recurrence")),
        color=_str_or_none(raw.get("color")),
        category=_str_or_none(raw.get("category")),
        location=_str_or_none(raw.get("location")),
        description=_str_or_none(raw.get("description")),
    )


def event_to_camel(event: Event) -> dict:
    return {
        "id": event.id,
        "title": event.title,
        "date": event.date.isoformat(),
        "startTime": event.start_time,
        "endTime": event.end_time,
        "recurrence": recurrence_to_camel(event.recurrence),
        "color": event.color,
        "category": event.category,
        "location": event.location,
        "description": event.description,
    }


def diary_entry_from_camel(raw: dict, day=None) -> dict | None:
    key = day_key(day or raw.get("date"))
    if key is None:
        return None
    sport = raw.get("sport")
    return {
        "id": _id(raw.get("id")),
        "date": key,
        "content": raw.get("content") or "",
        "mood": _int_or_none(raw.get("mood")),
        "energy": _int_or_none(raw.get("energy")),
        "stress": _int_or_none(raw.get("stress")),
        "sleep": _int_or_none(raw.get("sleep")),
        "sport": sport if isinstance(sport, dict) else None,
        "tags": _tags(raw.get("tags")),
        "timestamp": _str_or_none(raw.get("timestamp")),
    }


def diary_entry_to_camel(entry: dict) -> dict:
    return {
        "id": entry.get("id"),
        "date": entry.get("date"),
        "content": entry.get("content") or "",
        "mood": entry.get("mood"),
        "energy": entry.get("energy"),
        "stress": entry.get("stress"),
        "sleep": entry.get("sleep"),
        "sport": entry.get("sport"),
        "tags": list(entry.get("tags") or []),
        "timestamp": entry.get("timestamp"),
    }


def habit_from_camel(raw: dict) -> dict:
    return {
        "id": _id(raw.get("id")),
        "name": str(raw.get("name") or "").strip() or "Untitled habit",
        "icon": _str_or_none(raw.get("icon")),
        "color": _str_or_none(raw.get("color")),
        "frequency": raw.get("frequency") or "daily",
        "weekly_goal": _int_or_none(raw.get("weeklyGoal")) or 7,
        "active": bool(raw.get("active", True)),
        "created_at": _str_or_none(raw.get("createdAt")),
    }


def habit_to_camel(habit: dict) -> dict:
    return {
        "id": habit.get("id"),
        "name": habit.get("name"),
        "icon": habit.get("icon"),
        "color": habit.get("color"),
        "frequency": habit.get("frequency") or "daily",
        "weeklyGoal": habit.get("weekly_goal") or 7,
        "active": bool(habit.get("active", True)),
        "createdAt": habit.get("created_at"),
    }


def habit_log(habit_id, day, completed=True, duration=None, notes=None) -> dict | None:
    key = day_key(day)
    if key is None or habit_id is None:
        return None
    return {
        "habit_id": str(habit_id),
        "date": key,
        "completed": bool(completed),
        "duration": _int_or_none(duration),
        "notes": _str_or_none(notes),
    }


def goal_from_camel(raw: dict) -> dict:
    completed = raw.get("completed")
    if completed is None:
        completed = raw.get("status") == "completed"
    milestones = []
    for item in raw.get("milestones") or []:
        if isinstance(item, dict) and str(item.get("title") or "").strip():
            milestones.append({"title": str(item["title"]).strip(), "completed": bool(item.get("completed"))})
    return {
        "id": _id(raw.get("id")),
        "title": str(raw.get("title") or "").strip() or "Untitled goal",
        "description": _str_or_none(raw.get("description")),
        "deadline": day_key(raw.get("deadline")),
        "completed": bool(completed),
        "milestones": milestones,
        "tags": _tags(raw.get("tags")),
        "created_at": _str_or_none(raw.get("createdAt")),
    }


def goal_to_camel(goal: dict) -> dict:
    return {
        "id": goal.get("id"),
        "title": goal.get("title"),
        "description": goal.get("description"),
        "deadline": goal.get("deadline"),
        "completed": bool(goal.get("completed")),
        "milestones": [dict(item) for item in goal.get("milestones") or []],
        "tags": list(goal.get("tags") or []),
        "createdAt": goal.get("created_at"),
    }


def reflection_from_camel(raw: dict, kind: str | None = None, day=None) -> dict | None:
    kind = kind or raw.get("type")
    if kind not in REFLECTION_TYPES:
        return None
    key = day_key(day or raw.get("date") or raw.get("weekStart") or raw.get("month") or raw.get("createdAt"))
    if key is None:
        return None
    record = {
        "id": _id(raw.get("id")),
        "type": kind,
        "date": key,
        "created_at": _str_or_none(raw.get("createdAt")),
    }
    answers = dict(raw.get("answers") or {})
    for camel, snake in REFLECTION_ANSWER_FIELDS.items():
        value = raw.get(camel, answers.get(camel))
        if value is not None:
            record[snake] = value
    return record


def reflection_to_camel(reflection: dict) -> dict:
    payload = {
        "id": reflection.get("id"),
        "type": reflection.get("type"),
        "date": reflection.get("date"),
        "createdAt": reflection.get("created_at"),
    }
    for camel, snake in REFLECTION_ANSWER_FIELDS.items():
        if reflection.get(snake) is not None:
            payload[camel] = reflection[snake]
    return payload


def meal_from_camel(raw: dict, day=None) -> dict | None:
    key = day_key(day or raw.get("date"))
    if key is None:
        return None
    kcal = raw.get("kcal")
    if kcal is None:
        kcal = raw.get("calories")
    return {
        "id": _id(raw.get("id")),
        "date": key,
        "type": raw.get("type") or "Lunch",
        "name": str(raw.get("name") or "").strip() or "Meal",
        "amount": raw.get("amount") if raw.get("amount") not in ("", None) else None,
        "unit": _str_or_none(raw.get("unit")),
        "kcal": _int_or_none(kcal) or 0,
        "notes": _str_or_none(raw.get("notes")),
    }


def meal_to_camel(meal: dict) -> dict:
    return {
        "id": meal.get("id"),
        "date": meal.get("date"),
        "type": meal.get("type"),
        "name": meal.get("name"),
        "amount": meal.get("amount"),
        "unit": meal.get("unit"),
        "kcal": meal.get("kcal") or 0,
        "notes": meal.get("notes"),
    }


def category_from_camel(raw) -> dict | None:
    if isinstance(raw, str):
        raw = {"name": raw}
    if not isinstance(raw, dict) or not str(raw.get("name") or "").strip():
        return None
    return {
        "id": _id(raw.get("id")),
        "name": str(raw["name"]).strip(),
        "color": _str_or_none(raw.get("color")),
        "icon": _str_or_none(raw.get("icon")),
    }


def collection_item_from_camel(raw: dict) -> dict:
    return {
        "id": _id(raw.get("id")),
        "title": str(raw.get("title") or "").strip() or "Untitled",
        "description": _str_or_none(raw.get("description")),
        "url": _str_or_none(raw.get("url")),
        "category_id": _id(raw.get("categoryId") or raw.get("category")),
        "tags": _tags(raw.get("tags")),
        "created_at": _str_or_none(raw.get("createdAt")),
    }


def collection_item_to_camel(item: dict) -> dict:
    return {
        "id": item.get("id"),
        "title": item.get("title"),
        "description": item.get("description"),
        "url": item.get("url"),
        "categoryId": item.get("category_id"),
        "tags": list(item.get("tags") or []),
        "createdAt": item.get("created_at"),
    }


def idea_from_camel(raw: dict) -> dict:
    status = raw.get("status") if raw.get("status") in IDEA_STATUSES else "backlog"
    return {
        "id": _id(raw.get("id")),
        "title": str(raw.get("title") or "").strip() or "Untitled idea",
        "description": _str_or_none(raw.get("description")),
        "category_id": _id(raw.get("categoryId") or raw.get("category")),
        "status": status,
        "tags": _tags(raw.get("tags")),
        "created_at": _str_or_none(raw.get("createdAt")),
    }


def idea_to_camel(idea: dict) -> dict:
    return {
        "id": idea.get("id"),
        "title": idea.get("title"),
        "description": idea.get("description"),
        "categoryId": idea.get("category_id"),
        "status": idea.get("status") or "backlog",
        "tags": list(idea.get("tags") or []),
        "createdAt": idea.get("created_at"),
    }

