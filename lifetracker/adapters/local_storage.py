"""Mapping for the single-document local storage backup format.

The document is one JSON object keyed by module, with diary days, habit
logs, daily reflections and meals grouped by ``YYYY-MM-DD`` keys.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping

from lifetracker.adapters import snapshot as items
from lifetracker.adapters.snapshot import Snapshot

logger = logging.getLogger(__name__)

STORAGE_KEY = "persoonlijke-levenstracker"
STORAGE_VERSION = "1.0.0"


def _diary_days(dagboek) -> tuple[dict, dict]:
    if not isinstance(dagboek, Mapping):
        return {}, {}
    # The document store loader nests days under "entries" with summaries aside.
    if isinstance(dagboek.get("entries"), Mapping):
        return dict(dagboek["entries"]), dict(dagboek.get("daySummaries") or {})
    return dict(dagboek), {}


def _habit_logs(logs) -> list[dict]:
    records = []
    if not isinstance(logs, Mapping):
        return records
    for day, day_logs in logs.items():
        if isinstance(day_logs, Mapping):
            for habit_id, entry in day_logs.items():
                if isinstance(entry, Mapping):
                    if not entry.get("completed"):
                        continue
                    record = items.habit_log(habit_id, day, True, entry.get("duration"), entry.get("notes"))
                elif entry:
                    record = items.habit_log(habit_id, day, True)
                else:
                    continue
                if record:
                    records.append(record)
        elif isinstance(day_logs, (list, tuple)):
            for habit_id in day_logs:
                record = items.habit_log(habit_id, day, True)
                if record:
                    records.append(record)
    return records


def _reflections(reflecties) -> list[dict]:
    records = []
    if not isinstance(reflecties, Mapping):
        return records
    daily = reflecties.get("daily") or {}
    if isinstance(daily, Mapping):
        daily_items = [(day, raw) for day, raw in daily.items()]
    else:
        daily_items = [(None, raw) for raw in daily]
    for day, raw in daily_items:
        if isinstance(raw, Mapping):
            record = items.reflection_from_camel(dict(raw), "daily", day)
            if record:
                records.append(record)
    for kind in ("weekly", "monthly"):
        for raw in reflecties.get(kind) or []:
            if isinstance(raw, Mapping):
                record = items.reflection_from_camel(dict(raw), kind)
                if record:
                    records.append(record)
    return records


def load(payload: dict) -> Snapshot:
    if not isinstance(payload, Mapping) or not payload.get("version") or "settings" not in payload:
        raise ValueError("Invalid local storage data format")

    snap = Snapshot()
    voeding = payload.get("voeding") or {}
    snap.settings = items.settings_from_camel(payload.get("settings"), voeding.get("targetKcal"))

    days, summaries = _diary_days(payload.get("dagboek"))
    for day, day_data in days.items():
        if not isinstance(day_data, Mapping):
            continue
        for raw in day_data.get("entries") or []:
            record = items.diary_entry_from_camel(raw, day)
            if record:
                snap.diary_entries.append(record)
        if day_data.get("daySummary"):
            snap.diary_summaries[day] = str(day_data["daySummary"])
    for day, summary in summaries.items():
        if summary:
            snap.diary_summaries[day] = str(summary)

    verzameling = payload.get("verzameling") or {}
    snap.collection_items = [items.collection_item_from_camel(raw) for raw in verzameling.get("items") or []]
    snap.collection_categories = [
        category
        for category in (items.category_from_camel(raw) for raw in verzameling.get("categories") or [])
        if category
    ]

    ideeen = payload.get("ideeen") or {}
    snap.ideas = [items.idea_from_camel(raw) for raw in (ideeen.get("ideas") or ideeen.get("items") or [])]

    for raw in (payload.get("kalender") or {}).get("events") or []:
        event = items.event_from_camel(raw)
        if event is None:
            logger.warning("Skipping calendar event without a valid date: %s", raw.get("id"))
            continue
        snap.events.append(event)

    gewoontes = payload.get("gewoontes") or {}
    snap.habits = [items.habit_from_camel(raw) for raw in gewoontes.get("habits") or []]
    snap.habit_logs = _habit_logs(gewoontes.get("logs"))

    snap.goals = [items.goal_from_camel(raw) for raw in (payload.get("doelen") or {}).get("goals") or []]
    snap.reflections = _reflections(payload.get("reflecties"))

    meals = voeding.get("meals") or {}
    for day, day_data in meals.items():
        if not isinstance(day_data, Mapping):
            continue
        for raw in day_data.get("meals") or []:
            record = items.meal_from_camel(raw, day)
            if record:
                snap.meals.append(record)
    return snap


def dump(snap: Snapshot) -> dict:
    dagboek: dict = {}
    for entry in snap.diary_entries:
        day = dagboek.setdefault(entry["date"], {"entries": [], "daySummary": None})
        day["entries"].append(items.diary_entry_to_camel(entry))
    for day, summary in snap.diary_summaries.items():
        dagboek.setdefault(day, {"entries": [], "daySummary": None})["daySummary"] = summary

    logs: dict = {}
    for log in snap.habit_logs:
        logs.setdefault(log["date"], {})[log["habit_id"]] = {
            "completed": bool(log.get("completed")),
            "duration": log.get("duration"),
            "notes": log.get("notes"),
        }

    daily = {}
    weekly = []
    monthly = []
    for reflection in snap.reflections:
        payload = items.reflection_to_camel(reflection)
        if reflection["type"] == "daily":
            daily[reflection["date"]] = payload
        elif reflection["type"] == "weekly":
            weekly.append(payload)
        else:
            monthly.append(payload)

    meals: dict = {}
    for meal in snap.meals:
        day = meals.setdefault(meal["date"], {"meals": [], "totalKcal": 0})
        day["meals"].append(items.meal_to_camel(meal))
        day["totalKcal"] += int(meal.get("kcal") or 0)

    settings = items.settings_to_camel(snap.settings)
    return {
        "version": STORAGE_VERSION,
        "settings": {
            "theme": settings["theme"],
            "notificationsEnabled": settings["notificationsEnabled"],
        },
        "dagboek": dagboek,
        "verzameling": {
            "items": [items.collection_item_to_camel(item) for item in snap.collection_items],
            "categories": [dict(category) for category in snap.collection_categories],
        },
        "ideeen": {"items": [items.idea_to_camel(idea) for idea in snap.ideas], "categories": []},
        "kalender": {"events": [items.event_to_camel(event) for event in snap.events]},
        "gewoontes": {"habits": [items.habit_to_camel(habit) for habit in snap.habits], "logs": logs},
        "doelen": {"goals": [items.goal_to_camel(goal) for goal in snap.goals]},
        "reflecties": {"daily": daily, "weekly": weekly, "monthly": monthly},
        "voeding": {"meals": meals, "targetKcal": settings["targetKcal"]},
    }
