"""One-time import of a local backup into the relational store."""
from __future__ import annotations

import json
import logging
from datetime import datetime

from lifetracker import repositories
from lifetracker.adapters import document_store, local_storage
from lifetracker.adapters.snapshot import Snapshot

logger = logging.getLogger(__name__)

MIGRATION_STATUS_KEY = "migration_status"
SOURCES = ("local", "document")
FIRST_DAY = "0001-01-01"
LAST_DAY = "9999-12-31"


def load_snapshot(payload: dict, source: str = "local") -> Snapshot:
    if source == "local":
        return local_storage.load(payload)
    if source == "document":
        return document_store.load(payload)
    raise ValueError(f"Unknown snapshot source: {source}")


async def get_migration_status(user_email: str) -> dict:
    raw = await repositories.get_setting(user_email, MIGRATION_STATUS_KEY)
    if not raw:
        return {"migrated": False, "date": None}
    try:
        status = json.loads(raw)
    except ValueError:
        logger.warning("Unreadable migration status for %s", user_email)
        return {"migrated": False, "date": None}
    return {"migrated": bool(status.get("migrated")), "date": status.get("date")}


async def set_migration_status(user_email: str, migrated: bool) -> dict:
    status = {"migrated": migrated, "date": datetime.utcnow().isoformat() if migrated else None}
    await repositories.set_setting(user_email, MIGRATION_STATUS_KEY, json.dumps(status))
    return status


def verify(snap: Snapshot, imported: dict) -> dict:
    expected = snap.counts()
    mismatches = {
        kind: {"expected": count, "imported": int(imported.get(kind, 0))}
        for kind, count in expected.items()
        if int(imported.get(kind, 0)) != count
    }
    return {"ok": not mismatches, "expected": expected, "imported": dict(imported), "mismatches": mismatches}


class _Import:
    def __init__(self, user_email: str):
        self.user_email = user_email
        self.imported = {kind: 0 for kind in Snapshot().counts()}
        self.skipped = {kind: 0 for kind in Snapshot().counts()}

    async def run(self, kind: str, coro) -> object | None:
        try:
            result = await coro
        except ValueError as exc:
            logger.warning("Skipping %s record for %s: %s", kind, self.user_email, exc)
            self.skipped[kind] += 1
            return None
        self.imported[kind] += 1
        return result


async def import_snapshot(user_email: str, snap: Snapshot, force: bool = False) -> dict:
    status = await get_migration_status(user_email)
    if status["migrated"] and not force:
        raise ValueError(f"Data was already migrated on {status['date']}")

    job = _Import(user_email)
    await repositories.update_preferences(user_email, snap.settings)

    for entry in snap.diary_entries:
        await job.run("diary_entries", repositories.add_diary_entry(user_email, entry["date"], entry))
    for day, summary in snap.diary_summaries.items():
        await job.run("diary_summaries", repositories.set_day_summary(user_email, day, summary))

    existing = {item["name"].lower(): item["id"] for item in await repositories.list_collection_categories(user_email, seed_defaults=False)}
    category_ids: dict = {}
    for category in snap.collection_categories:
        name = category["name"]
        if name.lower() in existing:
            new_id = existing[name.lower()]
            job.imported["collection_categories"] += 1
        else:
            created = await job.run(
                "collection_categories",
                repositories.add_collection_category(user_email, name, category.get("color"), category.get("icon")),
            )
            if created is None:
                continue
            new_id = created["id"]
            existing[name.lower()] = new_id
        if category.get("id"):
            category_ids[category["id"]] = new_id

    for item in snap.collection_items:
        record = {**item, "category_id": category_ids.get(item.get("category_id"), item.get("category_id"))}
        await job.run("collection_items", repositories.add_collection_item(user_email, record))
    for idea in snap.ideas:
        record = {**idea, "category_id": category_ids.get(idea.get("category_id"), idea.get("category_id"))}
        await job.run("ideas", repositories.add_idea(user_email, record))

    for event in snap.events:
        await job.run("events", repositories.create_event(user_email, event))

    current = {habit["name"].lower(): habit["id"] for habit in await repositories.list_habits(user_email)}
    habit_ids: dict = {}
    for habit in snap.habits:
        if habit["name"].lower() in current:
            new_id = current[habit["name"].lower()]
            job.imported["habits"] += 1
        else:
            created = await job.run("habits", repositories.create_habit(user_email, habit))
            if created is None:
                continue
            new_id = created["id"]
            if created["active"]:
                current[habit["name"].lower()] = new_id
        if habit.get("id"):
            habit_ids[habit["id"]] = new_id

    for log in snap.habit_logs:
        habit_id = habit_ids.get(log["habit_id"])
        if habit_id is None:
            logger.warning("Skipping habit log for unknown habit %s", log["habit_id"])
            job.skipped["habit_logs"] += 1
            continue
        await job.run(
            "habit_logs",
            repositories.log_habit(user_email, habit_id, log["date"], True, log.get("duration"), log.get("notes")),
        )

    for goal in snap.goals:
        await job.run("goals", repositories.create_goal(user_email, goal))
    for reflection in snap.reflections:
        await job.run(
            "reflections",
            repositories.add_reflection(user_email, reflection["type"], reflection["date"], reflection),
        )
    for meal in snap.meals:
        await job.run("meals", repositories.add_meal(user_email, meal["date"], meal))

    await set_migration_status(user_email, True)
    logger.info("Imported snapshot for %s: %s", user_email, job.imported)
    return {
        "imported": job.imported,
        "skipped": job.skipped,
        "verification": verify(snap, job.imported),
    }


async def export_snapshot(user_email: str) -> Snapshot:
    snap = Snapshot()
    snap.settings = await repositories.get_preferences(user_email)
    snap.diary_entries = await repositories.list_diary_entries(user_email, FIRST_DAY, LAST_DAY)
    snap.diary_summaries = await repositories.list_day_summaries(user_email, FIRST_DAY, LAST_DAY)
    snap.collection_items = await repositories.list_collection_items(user_email)
    snap.collection_categories = await repositories.list_collection_categories(user_email, seed_defaults=False)
    snap.ideas = await repositories.list_ideas(user_email)
    snap.events = await repositories.list_events(user_email)
    snap.habits = await repositories.list_habits(user_email, include_inactive=True)
    logs = await repositories.list_habit_logs(user_email, FIRST_DAY, LAST_DAY)
    snap.habit_logs = [
        {"habit_id": habit_id, "date": day, **entry}
        for day, day_logs in logs.items()
        for habit_id, entry in day_logs.items()
    ]
    snap.goals = await repositories.list_goals(user_email)
    snap.reflections = await repositories.list_reflections(user_email)
    snap.meals = await repositories.list_meals(user_email, FIRST_DAY, LAST_DAY)
    return snap
