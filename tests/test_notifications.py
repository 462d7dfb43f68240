from datetime import date, timedelta

from lifetracker.notifications import ReminderRegistry, ReminderTracker, format_body
from tests.conftest import make_event


def test_due_returns_tomorrows_occurrences_once():
    tracker = ReminderTracker()
    events = [
        make_event(date(2024, 1, 1), "weekly", event_id="gym", start_time="18:00", location="Gym"),
        make_event(date(2024, 1, 9), event_id="other"),
    ]
    first = tracker.due(events, date(2024, 1, 7))
    assert [item["event_id"] for item in first] == ["gym"]
    assert first[0]["date"] == "2024-01-08"
    assert tracker.due(events, date(2024, 1, 7)) == []


def test_recurring_event_is_announced_per_occurrence():
    tracker = ReminderTracker()
    events = [make_event(date(2024, 1, 1), "daily", event_id="meds")]
    assert len(tracker.due(events, date(2024, 1, 1))) == 1
    assert len(tracker.due(events, date(2024, 1, 2))) == 1
    assert tracker.due(events, date(2024, 1, 2)) == []


def test_announced_keys_are_pruned_as_days_pass():
    tracker = ReminderTracker()
    events = [make_event(date(2024, 1, 1), "daily", event_id="meds")]
    day = date(2024, 1, 1)
    for offset in range(400):
        assert len(tracker.due(events, day + timedelta(days=offset))) == 1
    assert len(tracker._announced) == 1


def test_format_body():
    event = make_event(date(2024, 1, 1), start_time="09:30", location="Office")
    assert format_body(event, date(2024, 1, 8)) == "Date: 08-01-2024 at 09:30\nLocation: Office"
    assert format_body(make_event(date(2024, 1, 1)), date(2024, 1, 1)) == "Date: 01-01-2024"


def test_registry_keeps_one_tracker_per_user():
    registry = ReminderRegistry()
    assert registry.for_user("a@example.com") is registry.for_user("a@example.com")
    assert registry.for_user("a@example.com") is not registry.for_user("b@example.com")
