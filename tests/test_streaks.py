from datetime import date, timedelta

from lifetracker.core.streaks import (
    completion_rate,
    current_streak,
    is_completed,
    longest_streak,
    top_streaks,
)

TODAY = date(2024, 3, 10)


def _days_back(*offsets):
    return [(TODAY - timedelta(days=offset)).isoformat() for offset in offsets]


def test_consecutive_days_including_today():
    logs = {day: {"h1": {"completed": True}} for day in _days_back(0, 1, 2)}
    assert current_streak(logs, "h1", TODAY) == 3


def test_unfinished_today_does_not_break_streak():
    logs = {day: {"h1": True} for day in _days_back(1, 2, 3, 4)}
    assert current_streak(logs, "h1", TODAY) == 4
    logs[TODAY.isoformat()] = {"h1": False}
    assert current_streak(logs, "h1", TODAY) == 4


def test_five_completed_days_before_today():
    logs = {day: {"h1": True} for day in _days_back(1, 2, 3, 4, 5)}
    assert current_streak(logs, "h1", TODAY) == 5
    del logs[_days_back(3)[0]]
    assert current_streak(logs, "h1", TODAY) == 2
    logs[TODAY.isoformat()] = {"h1": True}
    assert current_streak(logs, "h1", TODAY) == 3


def test_gap_stops_the_walk():
    logs = {day: {"h1": True} for day in _days_back(0, 1, 3, 4, 5)}
    assert current_streak(logs, "h1", TODAY) == 2


def test_incomplete_past_day_stops_the_walk():
    logs = {day: {"h1": {"completed": True}} for day in _days_back(0, 2)}
    logs[_days_back(1)[0]] = {"h1": {"completed": False}}
    assert current_streak(logs, "h1", TODAY) == 1


def test_no_logs():
    assert current_streak({}, "h1", TODAY) == 0
    assert current_streak(None, "h1", TODAY) == 0


def test_other_habits_do_not_count():
    logs = {day: {"h2": True} for day in _days_back(0, 1)}
    assert current_streak(logs, "h1", TODAY) == 0


def test_lookback_bounds_the_walk():
    logs = {(TODAY - timedelta(days=offset)): ["h1"] for offset in range(0, 500)}
    assert current_streak(logs, "h1", TODAY) == 366
    assert current_streak(logs, "h1", TODAY, max_lookback=10) == 11


def test_day_log_shapes():
    assert is_completed({"h1": True}, "h1")
    assert is_completed({"h1": {"completed": True, "duration": 5}}, "h1")
    assert not is_completed({"h1": {"completed": False}}, "h1")
    assert is_completed(["h1", "h2"], "h1")
    assert is_completed({"7": True}, 7)
    assert is_completed(True, "anything")
    assert not is_completed(None, "h1")
    assert not is_completed("h1", "h1")


def test_longest_streak():
    logs = {day: {"h1": True} for day in _days_back(0, 1, 5, 6, 7, 8)}
    assert longest_streak(logs, "h1", TODAY) == 4


def test_completion_rate():
    logs = {TODAY.isoformat(): {"h1": True, "h2": {"completed": False}, "h3": True}}
    assert completion_rate(logs, ["h1", "h2", "h3"], TODAY) == 66.7
    assert completion_rate(logs, [], TODAY) == 0


def test_top_streaks_sorted_and_active_only():
    habits = [
        {"id": "h1", "name": "Read", "active": True},
        {"id": "h2", "name": "Run", "active": True},
        {"id": "h3", "name": "Old", "active": False},
    ]
    logs = {day: {"h2": True, "h3": True} for day in _days_back(0, 1, 2)}
    logs[TODAY.isoformat()]["h1"] = True
    rows = top_streaks(habits, logs, TODAY, limit=2)
    assert [row["id"] for row in rows] == ["h2", "h1"]
    assert rows[0]["current_streak"] == 3
