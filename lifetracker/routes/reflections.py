from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query

from lifetracker import repositories
from lifetracker.adapters.snapshot import reflection_to_camel
from lifetracker.auth import require_user_email
from lifetracker.schemas import ReflectionCreate, ReflectionPatch

router = APIRouter()


@router.get("/v1/reflections")
async def list_reflections(
    type: Literal["daily", "weekly", "monthly"] | None = Query(None),
    user_email: str = Depends(require_user_email),
):
    reflections = await repositories.list_reflections(user_email, type)
    return {"items": [reflection_to_camel(item) for item in reflections]}


@router.post("/v1/reflections")
async def add_reflection(payload: ReflectionCreate, user_email: str = Depends(require_user_email)):
    answers = payload.model_dump(exclude={"type", "date"}, exclude_none=True)
    try:
        reflection = await repositories.add_reflection(user_email, payload.type, payload.date, answers)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return reflection_to_camel(reflection)


@router.patch("/v1/reflections/{reflection_id}")
async def update_reflection(reflection_id: str, payload: ReflectionPatch, user_email: str = Depends(require_user_email)):
    reflection = await repositories.update_reflection(
        user_email,
        reflection_id,
        payload.model_dump(exclude_unset=True),
    )
    if reflection is None:
        raise HTTPException(status_code=404, detail="Reflection not found")
    return reflection_to_camel(reflection)


@router.delete("/v1/reflections/{reflection_id}")
async def delete_reflection(reflection_id: str, user_email: str = Depends(require_user_email)):
    if not await repositories.delete_reflection(user_email, reflection_id):
        raise HTTPException(status_code=404, detail="Reflection not found")
    return {"ok": True}
