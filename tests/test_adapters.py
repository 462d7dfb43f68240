from datetime import date

import pytest

from lifetracker.adapters import document_store, local_storage, remote
from lifetracker.adapters.snapshot import event_from_camel
from lifetracker.core.models import Event, Recurrence
from lifetracker.core.recurrence import occurs_on
from lifetracker.migration import load_snapshot


def test_local_storage_load(local_backup):
    snap = local_storage.load(local_backup)
    assert snap.settings == {"notifications_enabled": True, "target_kcal": 2200, "theme": "dark"}
    assert [entry["id"] for entry in snap.diary_entries] == ["d1", "d2"]
    assert snap.diary_entries[0]["date"] == "2024-03-01"
    assert snap.diary_summaries == {"2024-03-01": "Good day"}
    assert [event.id for event in snap.events] == ["e1", "e2"]
    assert snap.events[0].recurrence == Recurrence("weekly", 1, None)
    assert snap.events[0].start_time == "09:30"
    assert {(log["habit_id"], log["date"]) for log in snap.habit_logs} == {("h1", "2024-03-01"), ("h1", "2024-03-02")}
    assert snap.habit_logs[0]["duration"] == 20
    assert snap.goals[0]["milestones"][0] == {"title": "5k", "completed": True}
    kinds = sorted((item["type"], item["date"]) for item in snap.reflections)
    assert kinds == [("daily", "2024-03-01"), ("weekly", "2024-02-26")]
    weekly = next(item for item in snap.reflections if item["type"] == "weekly")
    assert weekly["next_week_focus"] == "Sleep"
    assert [meal["kcal"] for meal in snap.meals] == [350, 700]
    assert snap.collection_items[0]["category_id"] == "cat-1"
    assert snap.ideas[0]["status"] == "in-progress"


def test_local_storage_rejects_invalid_payload():
    with pytest.raises(ValueError):
        local_storage.load({"dagboek": {}})
    with pytest.raises(ValueError):
        local_storage.load(["not", "a", "document"])


def test_local_storage_dump_reloads(local_backup):
    snap = local_storage.load(local_backup)
    dumped = local_storage.dump(snap)
    assert dumped["version"] == local_storage.STORAGE_VERSION
    assert dumped["voeding"]["meals"]["2024-03-01"]["totalKcal"] == 1050
    assert dumped["gewoontes"]["logs"]["2024-03-01"]["h1"]["completed"] is True
    assert local_storage.load(dumped).counts() == snap.counts()


def test_document_store_tables():
    payload = {
        "settings": [{"key": "theme", "value": "light"}, {"key": "targetKcal", "value": "1800"}],
        "dagboek": [{"id": 1, "date": "2024-03-01", "content": "Hi", "mood": "6"}],
        "dagboekSummaries": [{"date": "2024-03-01", "summary": "Fine"}],
        "kalender": [{"id": 5, "title": "Gym", "date": "2024-03-02", "recurrence": {"type": "daily", "interval": 2}}],
        "gewoontes": [{"id": 9, "name": "Stretch"}],
        "gewoonteLog": [{"habitId": 9, "date": "2024-03-01"}, {"habitId": 9, "date": "2024-03-02"}],
        "reflecties": [{"id": 2, "type": "monthly", "month": "2024-02-01", "overall": "Busy"}],
        "voeding": [{"id": 3, "date": "2024-03-01", "name": "Soup", "kcal": 250}],
    }
    snap = document_store.load(payload)
    assert snap.settings["theme"] == "light"
    assert snap.settings["target_kcal"] == 1800
    assert snap.diary_entries[0]["id"] == "1"
    assert snap.diary_entries[0]["mood"] == 6
    assert snap.events[0].id == "5"
    assert [log["habit_id"] for log in snap.habit_logs] == ["9", "9"]
    assert snap.reflections[0]["overall"] == "Busy"
    assert snap.meals[0]["kcal"] == 250


def test_document_store_unknown_table():
    with pytest.raises(ValueError):
        document_store.load({"settings": [], "todo": []})


def test_document_store_nested_shape():
    payload = {
        "version": "1.0.0",
        "settings": {"theme": "system"},
        "dagboek": {"entries": {"2024-03-01": {"entries": [{"id": "a", "content": "x"}]}}, "daySummaries": {"2024-03-01": "Ok"}},
        "gewoontes": {"habits": [{"id": "h", "name": "Walk"}], "logs": {"2024-03-01": ["h"]}},
    }
    snap = document_store.load(payload)
    assert snap.diary_summaries == {"2024-03-01": "Ok"}
    assert snap.habit_logs[0]["habit_id"] == "h"


def test_load_snapshot_dispatch(local_backup):
    assert load_snapshot(local_backup, "local").counts()["events"] == 2
    with pytest.raises(ValueError):
        load_snapshot(local_backup, "cloud")


def test_remote_event_rows():
    event = Event(
        id="e1",
        title="Dentist",
        date=date(2024, 5, 2),
        start_time="14:30",
        end_time="15:00",
        recurrence=Recurrence("monthly", 2, date(2024, 12, 31)),
        location="Center",
    )
    row = remote.event_to_row(event)
    assert row["start_time"] == "2024-05-02T14:30:00"
    assert row["end_time"] == "2024-05-02T15:00:00"
    assert row["all_day"] == 0
    restored = remote.event_from_row(row)
    assert restored.date == event.date
    assert restored.start_time == "14:30"
    assert restored.recurrence == event.recurrence


def test_remote_all_day_event_keeps_no_start_time():
    row = remote.event_to_row(Event(id="e2", title="Holiday", date=date(2024, 5, 3)))
    assert row["start_time"] == "2024-05-03T09:00:00"
    assert row["all_day"] == 1
    assert remote.event_from_row(row).start_time is None


def test_remote_permissive_json_columns():
    goal = remote.goal_from_row({"id": "g", "title": "T", "status": "completed", "milestones_json": "{broken"})
    assert goal["milestones"] == []
    assert goal["completed"] is True
    assert remote.goal_to_row({"title": "T", "completed": False, "status": "active"})["status"] == "active"
    assert remote.meal_from_row({"id": "m", "date": "2024-01-01", "calories": 120})["kcal"] == 120


def test_remote_reflection_answers_are_packed():
    packed = remote.reflection_answers({"gratitude": "Tea", "next_week_focus": "Sleep", "id": "x"})
    assert packed == '{"gratitude": "Tea", "nextWeekFocus": "Sleep"}'
    record = remote.reflection_from_row({"id": "r", "type": "weekly", "date": "2024-01-01", "answers_json": packed})
    assert record["next_week_focus"] == "Sleep"


def test_unreadable_end_date_keeps_event_on_its_anchor():
    event = event_from_camel(
        {
            "id": "e9",
            "title": "Course",
            "date": "2024-01-01",
            "recurrence": {"type": "daily", "interval": 1, "endDate": "2024/01/10"},
        }
    )
    assert event.recurrence is None
    assert occurs_on(event, date(2024, 1, 1))
    assert not occurs_on(event, date(2025, 6, 1))


def test_remote_unreadable_end_date_drops_recurrence():
    row = {
        "id": "e10",
        "title": "Course",
        "start_time": "2024-01-01T09:00:00",
        "recurrence_json": '{"type": "weekly", "interval": 1, "end_date": "soon"}',
    }
    event = remote.event_from_row(row)
    assert event.recurrence is None
    assert not occurs_on(event, date(2024, 1, 8))
    assert remote.recurrence_from_json('{"type": "weekly", "end_date": "2024-02-01"}') == Recurrence(
        "weekly", 1, date(2024, 2, 1)
    )
