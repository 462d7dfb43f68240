from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from lifetracker import repositories
from lifetracker.adapters.snapshot import meal_to_camel
from lifetracker.auth import require_user_email
from lifetracker.schemas import MealCreate, MealPatch

router = APIRouter()


@router.get("/v1/nutrition")
async def list_meals(
    start: date = Query(...),
    end: date | None = Query(None),
    user_email: str = Depends(require_user_email),
):
    end = end or start
    meals = await repositories.list_meals(user_email, start.isoformat(), end.isoformat())
    preferences = await repositories.get_preferences(user_email)
    days: dict = {}
    for meal in meals:
        day = days.setdefault(meal["date"], {"meals": [], "totalKcal": 0})
        day["meals"].append(meal_to_camel(meal))
        day["totalKcal"] += meal["kcal"]
    return {"targetKcal": preferences["target_kcal"], "days": days}


@router.post("/v1/nutrition/meals")
async def add_meal(payload: MealCreate, user_email: str = Depends(require_user_email)):
    meal = payload.model_dump()
    try:
        created = await repositories.add_meal(user_email, meal.pop("date"), meal)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return meal_to_camel(created)


@router.patch("/v1/nutrition/meals/{meal_id}")
async def update_meal(meal_id: str, payload: MealPatch, user_email: str = Depends(require_user_email)):
    try:
        meal = await repositories.update_meal(user_email, meal_id, payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if meal is None:
        raise HTTPException(status_code=404, detail="Meal not found")
    return meal_to_camel(meal)


@router.delete("/v1/nutrition/meals/{meal_id}")
async def delete_meal(meal_id: str, user_email: str = Depends(require_user_email)):
    if not await repositories.delete_meal(user_email, meal_id):
        raise HTTPException(status_code=404, detail="Meal not found")
    return {"ok": True}
