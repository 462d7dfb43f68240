from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from lifetracker import overviews, repositories
from lifetracker.auth import require_user_email

router = APIRouter()


def _period(start: date | None, end: date | None, year: int | None, month: int | None) -> tuple[date, date]:
    if start and end:
        if end < start:
            raise HTTPException(status_code=400, detail="End date before start date")
        return start, end
    if year is None:
        raise HTTPException(status_code=400, detail="Provide start and end, or a year")
    try:
        return overviews.period_bounds(year, month)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/v1/overviews/habits")
async def habit_overview(
    start: date | None = Query(None),
    end: date | None = Query(None),
    year: int | None = Query(None),
    month: int | None = Query(None),
    user_email: str = Depends(require_user_email),
):
    start, end = _period(start, end, year, month)
    habits = await repositories.list_habits(user_email)
    logs = await repositories.list_habit_logs(user_email, start.isoformat(), end.isoformat())
    return overviews.habit_overview(habits, logs, start, end)


@router.get("/v1/overviews/nutrition")
async def nutrition_overview(
    start: date | None = Query(None),
    end: date | None = Query(None),
    year: int | None = Query(None),
    month: int | None = Query(None),
    user_email: str = Depends(require_user_email),
):
    start, end = _period(start, end, year, month)
    meals = await repositories.list_meals(user_email, start.isoformat(), end.isoformat())
    preferences = await repositories.get_preferences(user_email)
    return overviews.nutrition_overview(meals, start, end, preferences["target_kcal"])


@router.get("/v1/overviews/goals")
async def goal_overview(user_email: str = Depends(require_user_email)):
    return overviews.goal_overview(await repositories.list_goals(user_email))


@router.get("/v1/overviews/diary")
async def diary_overview(
    start: date | None = Query(None),
    end: date | None = Query(None),
    year: int | None = Query(None),
    month: int | None = Query(None),
    user_email: str = Depends(require_user_email),
):
    start, end = _period(start, end, year, month)
    entries = await repositories.list_diary_entries(user_email, start.isoformat(), end.isoformat())
    return overviews.diary_overview(entries, start, end)
