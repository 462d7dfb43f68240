from __future__ import annotations

from datetime import date, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query

from lifetracker import repositories
from lifetracker.adapters.snapshot import habit_to_camel
from lifetracker.auth import require_user_email
from lifetracker.core.streaks import completion_rate, current_streak, longest_streak
from lifetracker.schemas import HabitCreate, HabitLogPayload, HabitPatch
from lifetracker.settings import get_settings

router = APIRouter()


@router.get("/v1/habits")
async def list_habits(include_inactive: bool = Query(False), user_email: str = Depends(require_user_email)):
    habits = await repositories.list_habits(user_email, include_inactive=include_inactive)
    return {"items": [habit_to_camel(habit) for habit in habits]}


@router.post("/v1/habits")
async def create_habit(payload: HabitCreate, user_email: str = Depends(require_user_email)):
    try:
        habit = await repositories.create_habit(user_email, payload.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return habit_to_camel(habit)


@router.patch("/v1/habits/{habit_id}")
async def update_habit(habit_id: str, payload: HabitPatch, user_email: str = Depends(require_user_email)):
    try:
        habit = await repositories.update_habit(user_email, habit_id, payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        if str(exc) == "Habit not found":
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return habit_to_camel(habit)


@router.delete("/v1/habits/{habit_id}")
async def delete_habit(habit_id: str, user_email: str = Depends(require_user_email)):
    await repositories.delete_habit(user_email, habit_id)
    return {"ok": True}


@router.get("/v1/habits/logs")
async def list_habit_logs(
    start: date = Query(...),
    end: date = Query(...),
    user_email: str = Depends(require_user_email),
):
    logs = await repositories.list_habit_logs(user_email, start.isoformat(), end.isoformat())
    return {"start": start.isoformat(), "end": end.isoformat(), "logs": logs}


@router.put("/v1/habits/logs")
async def log_habit(payload: HabitLogPayload, user_email: str = Depends(require_user_email)):
    try:
        await repositories.log_habit(
            user_email,
            payload.habit_id,
            payload.date,
            payload.completed,
            payload.duration,
            payload.notes,
        )
    except ValueError as exc:
        if str(exc) == "Habit not found":
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"ok": True}


@router.get("/v1/habits/streaks")
async def habit_streaks(day: date | None = Query(None), user_email: str = Depends(require_user_email)):
    settings = get_settings()
    today = day or settings.today()
    lookback = settings.streak_lookback_days
    habits = await repositories.list_habits(user_email)
    logs = await repositories.list_habit_logs(
        user_email,
        (today - timedelta(days=lookback)).isoformat(),
        today.isoformat(),
    )
    items = [
        {
            "id": habit["id"],
            "name": habit["name"],
            "currentStreak": current_streak(logs, habit["id"], today, lookback),
            "longestStreak": longest_streak(logs, habit["id"], today, lookback),
            "completedToday": bool(logs.get(today.isoformat(), {}).get(habit["id"])),
        }
        for habit in habits
    ]
    return {
        "date": today.isoformat(),
        "completionRate": completion_rate(logs, [habit["id"] for habit in habits], today),
        "items": items,
    }
