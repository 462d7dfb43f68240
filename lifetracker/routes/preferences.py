from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from lifetracker import repositories
from lifetracker.adapters.snapshot import settings_to_camel
from lifetracker.auth import require_user_email
from lifetracker.schemas import PreferencesPatch

router = APIRouter()


@router.get("/v1/preferences")
async def get_preferences(user_email: str = Depends(require_user_email)):
    return settings_to_camel(await repositories.get_preferences(user_email))


@router.patch("/v1/preferences")
async def update_preferences(payload: PreferencesPatch, user_email: str = Depends(require_user_email)):
    try:
        preferences = await repositories.update_preferences(user_email, payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return settings_to_camel(preferences)
