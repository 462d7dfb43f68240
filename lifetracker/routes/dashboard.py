from __future__ import annotations

from datetime import date, timedelta

from fastapi import APIRouter, Depends, Query

from lifetracker import repositories
from lifetracker.adapters.snapshot import event_to_camel
from lifetracker.auth import require_user_email
from lifetracker.core.dates import relative_label
from lifetracker.core.recurrence import events_on, upcoming_occurrences
from lifetracker.core.streaks import completion_rate, top_streaks
from lifetracker.settings import get_settings

router = APIRouter()

UPCOMING_DAYS = 30
UPCOMING_LIMIT = 5


@router.get("/v1/dashboard")
async def dashboard(day: date | None = Query(None), user_email: str = Depends(require_user_email)):
    settings = get_settings()
    today = day or settings.today()
    lookback = settings.streak_lookback_days
    today_key = today.isoformat()

    events = await repositories.list_events(user_email)
    habits = await repositories.list_habits(user_email)
    logs = await repositories.list_habit_logs(user_email, (today - timedelta(days=lookback)).isoformat(), today_key)
    meals = await repositories.list_meals(user_email, today_key, today_key)
    entries = await repositories.list_diary_entries(user_email, today_key, today_key)
    goals = await repositories.list_goals(user_email, "active")
    preferences = await repositories.get_preferences(user_email)

    upcoming = upcoming_occurrences(events, today + timedelta(days=1), days=UPCOMING_DAYS, limit=UPCOMING_LIMIT)
    total_kcal = sum(meal["kcal"] for meal in meals)
    return {
        "date": today_key,
        "todayEvents": [event_to_camel(event) for event in events_on(events, today)],
        "upcomingEvents": [
            {"date": when.isoformat(), "label": relative_label(when, today), "event": event_to_camel(event)}
            for when, event in upcoming
        ],
        "habits": {
            "total": len(habits),
            "completedToday": sum(1 for habit in habits if logs.get(today_key, {}).get(habit["id"])),
            "completionRate": completion_rate(logs, [habit["id"] for habit in habits], today),
            "topStreaks": [
                {"id": row["id"], "name": row["name"], "currentStreak": row["current_streak"]}
                for row in top_streaks(habits, logs, today, max_lookback=lookback)
            ],
        },
        "nutrition": {
            "totalKcal": total_kcal,
            "targetKcal": preferences["target_kcal"],
            "meals": len(meals),
        },
        "diaryEntries": len(entries),
        "activeGoals": len(goals),
    }
