from __future__ import annotations

import dataclasses
import json
import logging
from datetime import datetime
from uuid import uuid4

from sqlalchemy import text as sql_text

from lifetracker.adapters import remote
from lifetracker.adapters.snapshot import IDEA_STATUSES, REFLECTION_TYPES, THEMES
from lifetracker.core.dates import day_key
from lifetracker.core.models import Event
from lifetracker.db import get_sessionmaker
from lifetracker.db_init import (
    COLLECTION_CATEGORIES_TABLE,
    COLLECTION_ITEMS_TABLE,
    DIARY_SUMMARIES_TABLE,
    DIARY_TABLE,
    EVENTS_TABLE,
    GOALS_TABLE,
    HABIT_LOGS_TABLE,
    HABITS_TABLE,
    IDEAS_TABLE,
    MEALS_TABLE,
    REFLECTIONS_TABLE,
    SETTINGS_TABLE,
)
from lifetracker.settings import get_settings

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION_CATEGORIES = [
    {"name": "Reading", "color": "#3B82F6", "icon": "book"},
    {"name": "Watching", "color": "#10B981", "icon": "video"},
    {"name": "Listening", "color": "#8B5CF6", "icon": "mic"},
    {"name": "Tools", "color": "#F59E0B", "icon": "wrench"},
    {"name": "Recipes", "color": "#EC4899", "icon": "utensils"},
    {"name": "Other", "color": "#6B7280", "icon": "folder"},
]
EVENT_FIELDS = {"title", "date", "start_time", "end_time", "recurrence", "color", "category", "location", "description"}


def _new_id() -> str:
    return uuid4().hex


def _now() -> str:
    return datetime.utcnow().isoformat()


def _clean_name(value, limit=120) -> str:
    return " ".join(str(value or "").split()).strip()[:limit]


def _require_day(value) -> str:
    key = day_key(value)
    if key is None:
        raise ValueError("Invalid date format")
    return key


async def _fetch_all(statement: str, params: dict) -> list[dict]:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        rows = (await session.execute(sql_text(statement), params)).mappings().all()
    return [dict(row) for row in rows]


async def _fetch_one(statement: str, params: dict) -> dict | None:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        row = (await session.execute(sql_text(statement), params)).mappings().fetchone()
    return dict(row) if row else None


async def _execute(statement: str, params: dict) -> int:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        result = await session.execute(sql_text(statement), params)
        affected = int(result.rowcount or 0)
        await session.commit()
    return affected


async def _insert(table: str, record: dict) -> None:
    columns = list(record.keys())
    placeholders = ", ".join(f":{col}" for col in columns)
    await _execute(f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})", record)


async def _update(table: str, user_email: str, row_id: str, values: dict) -> int:
    if not values:
        return 0
    assignments = ", ".join(f"{col} = :{col}" for col in values)
    params = {**values, "id": row_id, "user_email": user_email}
    return await _execute(
        f"UPDATE {table} SET {assignments} WHERE id = :id AND user_email = :user_email",
        params,
    )


async def _delete(table: str, user_email: str, row_id: str) -> bool:
    deleted = await _execute(
        f"DELETE FROM {table} WHERE id = :id AND user_email = :user_email",
        {"id": row_id, "user_email": user_email},
    )
    return deleted > 0


# Settings

async def get_setting(user_email: str, key: str, scoped: bool = True) -> str | None:
    setting_key = f"{user_email}::{key}" if scoped else key
    row = await _fetch_one(f"SELECT value FROM {SETTINGS_TABLE} WHERE key = :key", {"key": setting_key})
    return row["value"] if row else None


async def set_setting(user_email: str, key: str, value: str, scoped: bool = True) -> None:
    setting_key = f"{user_email}::{key}" if scoped else key
    await _execute(
        f"INSERT INTO {SETTINGS_TABLE} (key, value) VALUES (:key, :value) "
        "ON CONFLICT(key) DO UPDATE SET value=EXCLUDED.value",
        {"key": setting_key, "value": value},
    )


async def get_preferences(user_email: str) -> dict:
    settings = get_settings()
    notifications = await get_setting(user_email, "notifications_enabled")
    target_kcal = await get_setting(user_email, "target_kcal")
    theme = await get_setting(user_email, "theme")
    try:
        kcal = int(target_kcal) if target_kcal else settings.default_target_kcal
    except ValueError:
        kcal = settings.default_target_kcal
    return {
        "notifications_enabled": notifications == "1",
        "target_kcal": kcal,
        "theme": theme if theme in THEMES else "system",
    }


async def update_preferences(user_email: str, patch: dict) -> dict:
    if "theme" in patch and patch["theme"] is not None:
        if patch["theme"] not in THEMES:
            raise ValueError("Unknown theme")
        await set_setting(user_email, "theme", patch["theme"])
    if "target_kcal" in patch and patch["target_kcal"] is not None:
        kcal = int(patch["target_kcal"])
        if kcal <= 0:
            raise ValueError("Target kcal must be positive")
        await set_setting(user_email, "target_kcal", str(kcal))
    if "notifications_enabled" in patch and patch["notifications_enabled"] is not None:
        await set_setting(user_email, "notifications_enabled", "1" if patch["notifications_enabled"] else "0")
    return await get_preferences(user_email)


# Diary

async def list_diary_entries(user_email: str, start_iso: str, end_iso: str) -> list[dict]:
    rows = await _fetch_all(
        f"""
        SELECT id, date, content, mood, energy, stress, sleep, sport_json, tags_json, timestamp
        FROM {DIARY_TABLE}
        WHERE user_email = :user_email
          AND date BETWEEN :start_date AND :end_date
        ORDER BY date, timestamp
        """,
        {"user_email": user_email, "start_date": start_iso, "end_date": end_iso},
    )
    return [remote.diary_entry_from_row(row) for row in rows]


async def get_diary_entry(user_email: str, entry_id: str) -> dict | None:
    row = await _fetch_one(
        f"""
        SELECT id, date, content, mood, energy, stress, sleep, sport_json, tags_json, timestamp
        FROM {DIARY_TABLE}
        WHERE id = :id AND user_email = :user_email
        """,
        {"id": entry_id, "user_email": user_email},
    )
    return remote.diary_entry_from_row(row) if row else None


async def add_diary_entry(user_email: str, day, entry: dict) -> dict:
    record = {
        "id": _new_id(),
        "user_email": user_email,
        "date": _require_day(day),
        "timestamp": entry.get("timestamp") or _now(),
        **remote.diary_entry_to_row(entry),
    }
    await _insert(DIARY_TABLE, record)
    return await get_diary_entry(user_email, record["id"])


async def update_diary_entry(user_email: str, entry_id: str, patch: dict) -> dict | None:
    existing = await get_diary_entry(user_email, entry_id)
    if not existing:
        return None
    merged = {**existing, **patch}
    await _update(DIARY_TABLE, user_email, entry_id, remote.diary_entry_to_row(merged))
    return await get_diary_entry(user_email, entry_id)


async def delete_diary_entry(user_email: str, entry_id: str) -> bool:
    return await _delete(DIARY_TABLE, user_email, entry_id)


async def set_day_summary(user_email: str, day, summary: str) -> None:
    await _execute(
        f"""
        INSERT INTO {DIARY_SUMMARIES_TABLE} (user_email, date, summary)
        VALUES (:user_email, :date, :summary)
        ON CONFLICT(user_email, date) DO UPDATE SET summary=EXCLUDED.summary
        """,
        {"user_email": user_email, "date": _require_day(day), "summary": summary},
    )


async def list_day_summaries(user_email: str, start_iso: str, end_iso: str) -> dict:
    rows = await _fetch_all(
        f"""
        SELECT date, summary FROM {DIARY_SUMMARIES_TABLE}
        WHERE user_email = :user_email AND date BETWEEN :start_date AND :end_date
        ORDER BY date
        """,
        {"user_email": user_email, "start_date": start_iso, "end_date": end_iso},
    )
    return {row["date"]: row["summary"] for row in rows if row.get("summary")}


# Calendar

EVENT_COLUMNS = (
    "id, title, description, start_time, end_time, all_day, category, location, color, "
    "recurrence_json, created_at, updated_at"
)


async def list_events(user_email: str) -> list[Event]:
    rows = await _fetch_all(
        f"SELECT {EVENT_COLUMNS} FROM {EVENTS_TABLE} WHERE user_email = :user_email ORDER BY created_at, id",
        {"user_email": user_email},
    )
    events = []
    for row in rows:
        event = remote.event_from_row(row)
        if event is None:
            logger.warning("Skipping calendar event %s with unreadable start time", row.get("id"))
            continue
        events.append(event)
    return events


async def get_event(user_email: str, event_id: str) -> Event | None:
    row = await _fetch_one(
        f"SELECT {EVENT_COLUMNS} FROM {EVENTS_TABLE} WHERE id = :id AND user_email = :user_email",
        {"id": event_id, "user_email": user_email},
    )
    return remote.event_from_row(row) if row else None


async def create_event(user_email: str, event: Event) -> Event:
    if not _clean_name(event.title):
        raise ValueError("Event title cannot be empty")
    event = dataclasses.replace(event, id=_new_id(), title=_clean_name(event.title, 200))
    now = _now()
    record = {**remote.event_to_row(event), "user_email": user_email, "created_at": now, "updated_at": now}
    await _insert(EVENTS_TABLE, record)
    return await get_event(user_email, event.id)


async def update_event(user_email: str, event_id: str, patch: dict) -> Event | None:
    existing = await get_event(user_email, event_id)
    if existing is None:
        return None
    changes = {key: value for key, value in patch.items() if key in EVENT_FIELDS}
    if "title" in changes and not _clean_name(changes["title"]):
        raise ValueError("Event title cannot be empty")
    updated = dataclasses.replace(existing, **changes)
    row = remote.event_to_row(updated)
    row.pop("id")
    row["updated_at"] = _now()
    await _update(EVENTS_TABLE, user_email, event_id, row)
    return await get_event(user_email, event_id)


async def delete_event(user_email: str, event_id: str) -> bool:
    return await _delete(EVENTS_TABLE, user_email, event_id)


# Habits

async def list_habits(user_email: str, include_inactive: bool = False) -> list[dict]:
    rows = await _fetch_all(
        f"""
        SELECT id, name, icon, color, frequency, weekly_goal, active, created_at
        FROM {HABITS_TABLE}
        WHERE user_email = :user_email
        ORDER BY created_at, id
        """,
        {"user_email": user_email},
    )
    habits = [remote.habit_from_row(row) for row in rows]
    if include_inactive:
        return habits
    return [habit for habit in habits if habit["active"]]


async def get_habit(user_email: str, habit_id: str) -> dict | None:
    row = await _fetch_one(
        f"""
        SELECT id, name, icon, color, frequency, weekly_goal, active, created_at
        FROM {HABITS_TABLE}
        WHERE id = :id AND user_email = :user_email
        """,
        {"id": habit_id, "user_email": user_email},
    )
    return remote.habit_from_row(row) if row else None


async def create_habit(user_email: str, habit: dict) -> dict:
    name = _clean_name(habit.get("name"), 60)
    if not name:
        raise ValueError("Habit name cannot be empty")
    existing = await list_habits(user_email)
    if any(item["name"].lower() == name.lower() for item in existing):
        raise ValueError("Habit already exists")
    record = {
        "id": _new_id(),
        "user_email": user_email,
        "name": name,
        "icon": habit.get("icon"),
        "color": habit.get("color"),
        "frequency": habit.get("frequency") or "daily",
        "weekly_goal": int(habit.get("weekly_goal") or 7),
        "active": int(bool(habit.get("active", True))),
        "created_at": habit.get("created_at") or _now(),
    }
    await _insert(HABITS_TABLE, record)
    return await get_habit(user_email, record["id"])


async def update_habit(user_email: str, habit_id: str, patch: dict) -> dict:
    if not await get_habit(user_email, habit_id):
        raise ValueError("Habit not found")
    values = {}
    for key in ("name", "icon", "color", "frequency", "weekly_goal", "active"):
        if key not in patch or patch[key] is None:
            continue
        value = patch[key]
        if key == "name":
            value = _clean_name(value, 60)
            if not value:
                raise ValueError("Habit name cannot be empty")
        elif key == "weekly_goal":
            value = int(value)
            if not 1 <= value <= 7:
                raise ValueError("Weekly goal must be between 1 and 7")
        elif key == "active":
            value = int(bool(value))
        values[key] = value
    await _update(HABITS_TABLE, user_email, habit_id, values)
    return await get_habit(user_email, habit_id)


async def delete_habit(user_email: str, habit_id: str) -> None:
    await _update(HABITS_TABLE, user_email, habit_id, {"active": 0})


async def log_habit(user_email: str, habit_id: str, day, completed: bool, duration=None, notes=None) -> None:
    if not await get_habit(user_email, habit_id):
        raise ValueError("Habit not found")
    day_iso = _require_day(day)
    params = {"user_email": user_email, "habit_id": habit_id, "date": day_iso}
    if not completed:
        await _execute(
            f"DELETE FROM {HABIT_LOGS_TABLE} WHERE user_email = :user_email AND habit_id = :habit_id AND date = :date",
            params,
        )
        return
    await _execute(
        f"""
        INSERT INTO {HABIT_LOGS_TABLE} (user_email, habit_id, date, completed, duration, notes)
        VALUES (:user_email, :habit_id, :date, 1, :duration, :notes)
        ON CONFLICT(user_email, habit_id, date) DO UPDATE SET
            completed=EXCLUDED.completed, duration=EXCLUDED.duration, notes=EXCLUDED.notes
        """,
        {**params, "duration": duration, "notes": notes},
    )


async def list_habit_logs(user_email: str, start_iso: str, end_iso: str) -> dict:
    rows = await _fetch_all(
        f"""
        SELECT habit_id, date, completed, duration, notes
        FROM {HABIT_LOGS_TABLE}
        WHERE user_email = :user_email AND date BETWEEN :start_date AND :end_date
        ORDER BY date
        """,
        {"user_email": user_email, "start_date": start_iso, "end_date": end_iso},
    )
    payload: dict = {}
    for row in rows:
        payload.setdefault(row["date"], {})[row["habit_id"]] = {
            "completed": bool(int(row.get("completed") or 0)),
            "duration": row.get("duration"),
            "notes": row.get("notes"),
        }
    return payload


# Goals

GOAL_COLUMNS = "id, title, description, deadline, status, milestones_json, tags_json, created_at"


async def list_goals(user_email: str, status: str | None = None) -> list[dict]:
    rows = await _fetch_all(
        f"SELECT {GOAL_COLUMNS} FROM {GOALS_TABLE} WHERE user_email = :user_email ORDER BY created_at, id",
        {"user_email": user_email},
    )
    goals = [remote.goal_from_row(row) for row in rows]
    if status == "active":
        return [goal for goal in goals if not goal["completed"]]
    if status == "completed":
        return [goal for goal in goals if goal["completed"]]
    return goals


async def get_goal(user_email: str, goal_id: str) -> dict | None:
    row = await _fetch_one(
        f"SELECT {GOAL_COLUMNS} FROM {GOALS_TABLE} WHERE id = :id AND user_email = :user_email",
        {"id": goal_id, "user_email": user_email},
    )
    return remote.goal_from_row(row) if row else None


async def create_goal(user_email: str, goal: dict) -> dict:
    if not _clean_name(goal.get("title")):
        raise ValueError("Goal title cannot be empty")
    now = _now()
    record = {
        "id": _new_id(),
        "user_email": user_email,
        **remote.goal_to_row({**goal, "title": _clean_name(goal.get("title"), 200)}),
        "created_at": goal.get("created_at") or now,
        "updated_at": now,
    }
    await _insert(GOALS_TABLE, record)
    return await get_goal(user_email, record["id"])


async def update_goal(user_email: str, goal_id: str, patch: dict) -> dict | None:
    existing = await get_goal(user_email, goal_id)
    if not existing:
        return None
    merged = {**existing, **{key: value for key, value in patch.items() if value is not None}}
    if "status" in patch and patch["status"] is not None and "completed" not in patch:
        merged["completed"] = None
    if not _clean_name(merged.get("title")):
        raise ValueError("Goal title cannot be empty")
    await _update(GOALS_TABLE, user_email, goal_id, {**remote.goal_to_row(merged), "updated_at": _now()})
    return await get_goal(user_email, goal_id)


async def delete_goal(user_email: str, goal_id: str) -> bool:
    return await _delete(GOALS_TABLE, user_email, goal_id)


async def toggle_milestone(user_email: str, goal_id: str, index: int) -> dict | None:
    goal = await get_goal(user_email, goal_id)
    if not goal:
        return None
    milestones = list(goal["milestones"])
    if not 0 <= index < len(milestones):
        raise ValueError("Milestone index out of range")
    milestone = dict(milestones[index])
    milestone["completed"] = not bool(milestone.get("completed"))
    milestones[index] = milestone
    await _update(
        GOALS_TABLE,
        user_email,
        goal_id,
        {"milestones_json": json.dumps(milestones, ensure_ascii=False), "updated_at": _now()},
    )
    return await get_goal(user_email, goal_id)


# Reflections

async def list_reflections(user_email: str, kind: str | None = None) -> list[dict]:
    statement = f"SELECT id, type, date, answers_json, created_at FROM {REFLECTIONS_TABLE} WHERE user_email = :user_email"
    params = {"user_email": user_email}
    if kind:
        statement += " AND type = :type"
        params["type"] = kind
    rows = await _fetch_all(statement + " ORDER BY date, created_at", params)
    return [remote.reflection_from_row(row) for row in rows]


async def get_reflection(user_email: str, reflection_id: str) -> dict | None:
    row = await _fetch_one(
        f"""
        SELECT id, type, date, answers_json, created_at FROM {REFLECTIONS_TABLE}
        WHERE id = :id AND user_email = :user_email
        """,
        {"id": reflection_id, "user_email": user_email},
    )
    return remote.reflection_from_row(row) if row else None


async def add_reflection(user_email: str, kind: str, day, answers: dict) -> dict:
    if kind not in REFLECTION_TYPES:
        raise ValueError("Unknown reflection type")
    record = {
        "id": _new_id(),
        "user_email": user_email,
        "type": kind,
        "date": _require_day(day),
        "answers_json": remote.reflection_answers(answers),
        "created_at": answers.get("created_at") or _now(),
    }
    await _insert(REFLECTIONS_TABLE, record)
    return await get_reflection(user_email, record["id"])


async def update_reflection(user_email: str, reflection_id: str, patch: dict) -> dict | None:
    existing = await get_reflection(user_email, reflection_id)
    if not existing:
        return None
    merged = {**existing, **{key: value for key, value in patch.items() if value is not None}}
    values = {"answers_json": remote.reflection_answers(merged)}
    if patch.get("date"):
        values["date"] = _require_day(patch["date"])
    await _update(REFLECTIONS_TABLE, user_email, reflection_id, values)
    return await get_reflection(user_email, reflection_id)


async def delete_reflection(user_email: str, reflection_id: str) -> bool:
    return await _delete(REFLECTIONS_TABLE, user_email, reflection_id)


# Nutrition

async def list_meals(user_email: str, start_iso: str, end_iso: str) -> list[dict]:
    rows = await _fetch_all(
        f"""
        SELECT id, date, type, name, amount, unit, calories, notes
        FROM {MEALS_TABLE}
        WHERE user_email = :user_email AND date BETWEEN :start_date AND :end_date
        ORDER BY date, created_at
        """,
        {"user_email": user_email, "start_date": start_iso, "end_date": end_iso},
    )
    return [remote.meal_from_row(row) for row in rows]


async def get_meal(user_email: str, meal_id: str) -> dict | None:
    row = await _fetch_one(
        f"""
        SELECT id, date, type, name, amount, unit, calories, notes
        FROM {MEALS_TABLE} WHERE id = :id AND user_email = :user_email
        """,
        {"id": meal_id, "user_email": user_email},
    )
    return remote.meal_from_row(row) if row else None


async def add_meal(user_email: str, day, meal: dict) -> dict:
    if not _clean_name(meal.get("name")):
        raise ValueError("Meal name cannot be empty")
    if int(meal.get("kcal") or 0) < 0:
        raise ValueError("Calories cannot be negative")
    record = {
        "id": _new_id(),
        "user_email": user_email,
        "date": _require_day(day),
        **remote.meal_to_row(meal),
        "created_at": _now(),
    }
    await _insert(MEALS_TABLE, record)
    return await get_meal(user_email, record["id"])


async def update_meal(user_email: str, meal_id: str, patch: dict) -> dict | None:
    existing = await get_meal(user_email, meal_id)
    if not existing:
        return None
    merged = {**existing, **{key: value for key, value in patch.items() if value is not None}}
    if int(merged.get("kcal") or 0) < 0:
        raise ValueError("Calories cannot be negative")
    await _update(MEALS_TABLE, user_email, meal_id, remote.meal_to_row(merged))
    return await get_meal(user_email, meal_id)


async def delete_meal(user_email: str, meal_id: str) -> bool:
    return await _delete(MEALS_TABLE, user_email, meal_id)


# Collection

async def list_collection_categories(user_email: str, seed_defaults: bool = True) -> list[dict]:
    statement = (
        f"SELECT id, name, color, icon FROM {COLLECTION_CATEGORIES_TABLE} "
        "WHERE user_email = :user_email ORDER BY name"
    )
    rows = await _fetch_all(statement, {"user_email": user_email})
    if rows or not seed_defaults:
        return rows
    for category in DEFAULT_COLLECTION_CATEGORIES:
        await add_collection_category(user_email, category["name"], category["color"], category["icon"])
    return await _fetch_all(statement, {"user_email": user_email})


async def add_collection_category(user_email: str, name: str, color: str | None = None, icon: str | None = None) -> dict:
    clean = _clean_name(name, 60)
    if not clean:
        raise ValueError("Category name cannot be empty")
    existing = await list_collection_categories(user_email, seed_defaults=False)
    if any(item["name"].lower() == clean.lower() for item in existing):
        raise ValueError("Category already exists")
    record = {"id": _new_id(), "user_email": user_email, "name": clean, "color": color, "icon": icon}
    await _insert(COLLECTION_CATEGORIES_TABLE, record)
    return {key: record[key] for key in ("id", "name", "color", "icon")}


async def list_collection_items(user_email: str, category_id: str | None = None, search: str | None = None) -> list[dict]:
    rows = await _fetch_all(
        f"""
        SELECT id, title, description, url, category, tags_json, created_at
        FROM {COLLECTION_ITEMS_TABLE}
        WHERE user_email = :user_email
        ORDER BY created_at, id
        """,
        {"user_email": user_email},
    )
    items = [remote.collection_item_from_row(row) for row in rows]
    if category_id:
        items = [item for item in items if item["category_id"] == category_id]
    if search:
        needle = search.lower()
        items = [
            item
            for item in items
            if needle in (item["title"] or "").lower() or needle in (item["description"] or "").lower()
        ]
    return items


async def get_collection_item(user_email: str, item_id: str) -> dict | None:
    row = await _fetch_one(
        f"""
        SELECT id, title, description, url, category, tags_json, created_at
        FROM {COLLECTION_ITEMS_TABLE} WHERE id = :id AND user_email = :user_email
        """,
        {"id": item_id, "user_email": user_email},
    )
    return remote.collection_item_from_row(row) if row else None


async def add_collection_item(user_email: str, item: dict) -> dict:
    if not _clean_name(item.get("title")):
        raise ValueError("Title cannot be empty")
    record = {
        "id": _new_id(),
        "user_email": user_email,
        **remote.collection_item_to_row(item),
        "created_at": item.get("created_at") or _now(),
    }
    await _insert(COLLECTION_ITEMS_TABLE, record)
    return await get_collection_item(user_email, record["id"])


async def update_collection_item(user_email: str, item_id: str, patch: dict) -> dict | None:
    existing = await get_collection_item(user_email, item_id)
    if not existing:
        return None
    merged = {**existing, **{key: value for key, value in patch.items() if value is not None}}
    await _update(COLLECTION_ITEMS_TABLE, user_email, item_id, remote.collection_item_to_row(merged))
    return await get_collection_item(user_email, item_id)


async def delete_collection_item(user_email: str, item_id: str) -> bool:
    return await _delete(COLLECTION_ITEMS_TABLE, user_email, item_id)


# Ideas

async def list_ideas(user_email: str, status: str | None = None, category_id: str | None = None) -> list[dict]:
    rows = await _fetch_all(
        f"""
        SELECT id, title, description, category, status, tags_json, created_at
        FROM {IDEAS_TABLE}
        WHERE user_email = :user_email
        ORDER BY created_at, id
        """,
        {"user_email": user_email},
    )
    ideas = [remote.idea_from_row(row) for row in rows]
    if status:
        ideas = [idea for idea in ideas if idea["status"] == status]
    if category_id:
        ideas = [idea for idea in ideas if idea["category_id"] == category_id]
    return ideas


async def get_idea(user_email: str, idea_id: str) -> dict | None:
    row = await _fetch_one(
        f"""
        SELECT id, title, description, category, status, tags_json, created_at
        FROM {IDEAS_TABLE} WHERE id = :id AND user_email = :user_email
        """,
        {"id": idea_id, "user_email": user_email},
    )
    return remote.idea_from_row(row) if row else None


def _check_idea_status(status) -> None:
    if status is not None and status not in IDEA_STATUSES:
        raise ValueError("Unknown idea status")


async def add_idea(user_email: str, idea: dict) -> dict:
    if not _clean_name(idea.get("title")):
        raise ValueError("Title cannot be empty")
    _check_idea_status(idea.get("status"))
    record = {
        "id": _new_id(),
        "user_email": user_email,
        **remote.idea_to_row(idea),
        "created_at": idea.get("created_at") or _now(),
    }
    await _insert(IDEAS_TABLE, record)
    return await get_idea(user_email, record["id"])


async def update_idea(user_email: str, idea_id: str, patch: dict) -> dict | None:
    existing = await get_idea(user_email, idea_id)
    if not existing:
        return None
    _check_idea_status(patch.get("status"))
    merged = {**existing, **{key: value for key, value in patch.items() if value is not None}}
    await _update(IDEAS_TABLE, user_email, idea_id, remote.idea_to_row(merged))
    return await get_idea(user_email, idea_id)


async def delete_idea(user_email: str, idea_id: str) -> bool:
    return await _delete(IDEAS_TABLE, user_email, idea_id)


async def count_rows(user_email: str) -> dict:
    tables = {
        "diary_entries": DIARY_TABLE,
        "diary_summaries": DIARY_SUMMARIES_TABLE,
        "collection_items": COLLECTION_ITEMS_TABLE,
        "collection_categories": COLLECTION_CATEGORIES_TABLE,
        "ideas": IDEAS_TABLE,
        "events": EVENTS_TABLE,
        "habits": HABITS_TABLE,
        "habit_logs": HABIT_LOGS_TABLE,
        "goals": GOALS_TABLE,
        "reflections": REFLECTIONS_TABLE,
        "meals": MEALS_TABLE,
    }
    counts = {}
    for name, table in tables.items():
        row = await _fetch_one(f"SELECT COUNT(*) AS total FROM {table} WHERE user_email = :user_email", {"user_email": user_email})
        counts[name] = int(row["total"] or 0) if row else 0
    return counts
