"""Mapping for the embedded document store export.

The store keeps one table per module with flat rows (``gewoonteLog`` rows
are ``{habitId, date}`` pairs, reflections carry a ``type`` field). Its
loader also produced an assembled, nested document; that form is close
enough to the local storage backup to share its parser.
"""
from __future__ import annotations

from collections.abc import Mapping

from lifetracker.adapters import local_storage
from lifetracker.adapters import snapshot as items
from lifetracker.adapters.snapshot import Snapshot

TABLES = (
    "settings",
    "dagboek",
    "dagboekSummaries",
    "verzameling",
    "verzamelingCategories",
    "ideeen",
    "kalender",
    "gewoontes",
    "gewoonteLog",
    "doelen",
    "reflecties",
    "voeding",
)


def is_table_export(payload) -> bool:
    return isinstance(payload, Mapping) and isinstance(payload.get("settings"), list)


def _rows(payload, table) -> list:
    rows = payload.get(table) or []
    return [row for row in rows if isinstance(row, Mapping)]


def load(payload: dict) -> Snapshot:
    if not is_table_export(payload):
        return local_storage.load(payload)
    unknown = set(payload) - set(TABLES) - {"version"}
    if unknown:
        raise ValueError(f"Unknown document store tables: {', '.join(sorted(unknown))}")

    snap = Snapshot()
    settings = {row.get("key"): row.get("value") for row in _rows(payload, "settings")}
    snap.settings = items.settings_from_camel(settings, settings.get("targetKcal"))

    for row in _rows(payload, "dagboek"):
        record = items.diary_entry_from_camel(dict(row))
        if record:
            snap.diary_entries.append(record)
    for row in _rows(payload, "dagboekSummaries"):
        if row.get("date") and row.get("summary"):
            snap.diary_summaries[str(row["date"])[:10]] = str(row["summary"])

    snap.collection_items = [items.collection_item_from_camel(dict(row)) for row in _rows(payload, "verzameling")]
    snap.collection_categories = [
        category
        for category in (items.category_from_camel(dict(row)) for row in _rows(payload, "verzamelingCategories"))
        if category
    ]
    snap.ideas = [items.idea_from_camel(dict(row)) for row in _rows(payload, "ideeen")]

    for row in _rows(payload, "kalender"):
        event = items.event_from_camel(dict(row))
        if event is not None:
            snap.events.append(event)

    snap.habits = [items.habit_from_camel(dict(row)) for row in _rows(payload, "gewoontes")]
    for row in _rows(payload, "gewoonteLog"):
        record = items.habit_log(row.get("habitId"), row.get("date"), row.get("completed", True))
        if record and record["completed"]:
            snap.habit_logs.append(record)

    snap.goals = [items.goal_from_camel(dict(row)) for row in _rows(payload, "doelen")]
    for row in _rows(payload, "reflecties"):
        record = items.reflection_from_camel(dict(row))
        if record:
            snap.reflections.append(record)
    for row in _rows(payload, "voeding"):
        record = items.meal_from_camel(dict(row))
        if record:
            snap.meals.append(record)
    return snap
