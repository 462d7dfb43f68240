from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from lifetracker import repositories
from lifetracker.adapters.snapshot import diary_entry_to_camel
from lifetracker.auth import require_user_email
from lifetracker.schemas import DaySummaryPayload, DiaryEntryCreate, DiaryEntryPatch

router = APIRouter()


@router.get("/v1/diary")
async def list_diary(
    start: date = Query(...),
    end: date | None = Query(None),
    user_email: str = Depends(require_user_email),
):
    end = end or start
    entries = await repositories.list_diary_entries(user_email, start.isoformat(), end.isoformat())
    summaries = await repositories.list_day_summaries(user_email, start.isoformat(), end.isoformat())
    return {"items": [diary_entry_to_camel(entry) for entry in entries], "summaries": summaries}


@router.post("/v1/diary")
async def add_diary_entry(payload: DiaryEntryCreate, user_email: str = Depends(require_user_email)):
    entry = payload.model_dump()
    try:
        created = await repositories.add_diary_entry(user_email, entry.pop("date"), entry)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return diary_entry_to_camel(created)


@router.patch("/v1/diary/{entry_id}")
async def update_diary_entry(entry_id: str, payload: DiaryEntryPatch, user_email: str = Depends(require_user_email)):
    entry = await repositories.update_diary_entry(user_email, entry_id, payload.model_dump(exclude_unset=True))
    if entry is None:
        raise HTTPException(status_code=404, detail="Diary entry not found")
    return diary_entry_to_camel(entry)


@router.delete("/v1/diary/{entry_id}")
async def delete_diary_entry(entry_id: str, user_email: str = Depends(require_user_email)):
    if not await repositories.delete_diary_entry(user_email, entry_id):
        raise HTTPException(status_code=404, detail="Diary entry not found")
    return {"ok": True}


@router.put("/v1/diary/summary/{day}")
async def set_day_summary(day: date, payload: DaySummaryPayload, user_email: str = Depends(require_user_email)):
    await repositories.set_day_summary(user_email, day, payload.summary)
    return {"ok": True}
