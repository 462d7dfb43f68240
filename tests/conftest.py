"""
Pytest fixtures for the life tracker tests.

- pure core/adapters tests need nothing but the sample records below
- API tests get a FastAPI TestClient bound to a fresh sqlite database
"""

from datetime import date

import pytest
from fastapi.testclient import TestClient

from lifetracker import db
from lifetracker.core.models import Event, Recurrence
from lifetracker.settings import reset_settings

SECRET = "test-secret"
USER = "tester@example.com"


def make_event(day, kind=None, interval=1, end_date=None, event_id="evt", **extra):
    recurrence = Recurrence(type=kind, interval=interval, end_date=end_date) if kind else None
    return Event(id=event_id, title=extra.pop("title", "Event"), date=day, recurrence=recurrence, **extra)


@pytest.fixture
def anchor():
    return date(2024, 1, 15)


@pytest.fixture
def local_backup():
    """A small backup document in the browser local-storage shape."""
    return {
        "version": "1.0.0",
        "settings": {"theme": "dark", "notificationsEnabled": True},
        "dagboek": {
            "2024-03-01": {
                "entries": [
                    {
                        "id": "d1",
                        "content": "Walked to work",
                        "mood": 7,
                        "energy": 6,
                        "tags": ["walk", "work"],
                        "timestamp": "2024-03-01T08:00:00",
                    },
                    {"id": "d2", "content": "Evening", "mood": 5, "tags": ["work"]},
                ],
                "daySummary": "Good day",
            }
        },
        "verzameling": {
            "items": [{"id": "c1", "title": "Python docs", "url": "https://docs.python.org", "categoryId": "cat-1"}],
            "categories": [{"id": "cat-1", "name": "Websites", "color": "#3B82F6", "icon": "globe"}],
        },
        "ideeen": {"items": [{"id": "i1", "title": "Garden app", "status": "in-progress"}], "categories": []},
        "kalender": {
            "events": [
                {
                    "id": "e1",
                    "title": "Standup",
                    "date": "2024-03-04",
                    "startTime": "09:30",
                    "recurrence": {"type": "weekly", "interval": 1, "endDate": None},
                },
                {"id": "e2", "title": "Birthday", "date": "2024-02-29", "recurrence": {"type": "yearly", "interval": 1}},
                {"id": "bad", "title": "No date"},
            ]
        },
        "gewoontes": {
            "habits": [
                {"id": "h1", "name": "Read", "weeklyGoal": 7, "active": True},
                {"id": "h2", "name": "Run", "weeklyGoal": 3, "active": True},
            ],
            "logs": {
                "2024-03-01": {"h1": {"completed": True, "duration": 20}, "h2": {"completed": False}},
                "2024-03-02": {"h1": {"completed": True}},
            },
        },
        "doelen": {
            "goals": [
                {
                    "id": "g1",
                    "title": "Run a 10k",
                    "deadline": "2024-06-01",
                    "completed": False,
                    "milestones": [{"title": "5k", "completed": True}, {"title": "8k", "completed": False}],
                }
            ]
        },
        "reflecties": {
            "daily": {"2024-03-01": {"gratitude": "Sunshine", "tomorrow": "Rest"}},
            "weekly": [{"id": "w1", "weekStart": "2024-02-26", "wins": "Ran twice", "nextWeekFocus": "Sleep"}],
            "monthly": [],
        },
        "voeding": {
            "meals": {
                "2024-03-01": {
                    "meals": [
                        {"id": "m1", "type": "Breakfast", "name": "Oats", "kcal": 350},
                        {"id": "m2", "type": "Dinner", "name": "Pasta", "kcal": 700},
                    ],
                    "totalKcal": 1050,
                }
            },
            "targetKcal": 2200,
        },
    }


@pytest.fixture
def api_env(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'tracker.db'}")
    monkeypatch.setenv("BACKEND_SESSION_SECRET", SECRET)
    monkeypatch.setenv("ALLOWED_EMAILS", "")
    monkeypatch.setenv("TRACKER_TIMEZONE", "UTC")
    reset_settings()
    db._engine = None
    db._session_factory = None
    yield
    reset_settings()
    db._engine = None
    db._session_factory = None


@pytest.fixture
def client(api_env):
    from lifetracker.main import create_app

    with TestClient(create_app()) as test_client:
        test_client.headers.update({"X-User-Email": USER, "X-Backend-Token": SECRET})
        yield test_client
