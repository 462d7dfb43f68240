from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query, Request

from lifetracker import repositories
from lifetracker.auth import require_user_email
from lifetracker.settings import get_settings

router = APIRouter()


@router.get("/v1/reminders")
async def due_reminders(
    request: Request,
    day: date | None = Query(None),
    user_email: str = Depends(require_user_email),
):
    preferences = await repositories.get_preferences(user_email)
    if not preferences["notifications_enabled"]:
        return {"enabled": False, "items": []}
    today = day or get_settings().today()
    events = await repositories.list_events(user_email)
    tracker = request.app.state.reminders.for_user(user_email)
    return {"enabled": True, "items": tracker.due(events, today)}
