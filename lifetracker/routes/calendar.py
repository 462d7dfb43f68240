from __future__ import annotations

from datetime import date, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query

from lifetracker import repositories
from lifetracker.adapters.snapshot import event_to_camel
from lifetracker.auth import require_user_email
from lifetracker.core.dates import days_between, days_of_month, days_of_week, week_number
from lifetracker.core.models import Event
from lifetracker.core.recurrence import events_on, occurrences_between, upcoming_occurrences
from lifetracker.schemas import EventCreate, EventPatch

router = APIRouter()

MAX_RANGE_DAYS = 366


def _check_range(start: date, end: date) -> None:
    if end < start:
        raise HTTPException(status_code=400, detail="End date before start date")
    if days_between(start, end) >= MAX_RANGE_DAYS:
        raise HTTPException(status_code=400, detail="Date range too large")


def _grid(events: list[Event], days: list[date]) -> list[dict]:
    return [
        {"date": day.isoformat(), "items": [event_to_camel(event) for event in events_on(events, day)]}
        for day in days
    ]


@router.get("/v1/calendar/events")
async def list_events(user_email: str = Depends(require_user_email)):
    events = await repositories.list_events(user_email)
    return {"items": [event_to_camel(event) for event in events]}


@router.post("/v1/calendar/events")
async def create_event(payload: EventCreate, user_email: str = Depends(require_user_email)):
    event = Event(
        id="",
        title=payload.title,
        date=payload.date,
        start_time=payload.start_time,
        end_time=payload.end_time,
        recurrence=payload.recurrence.to_recurrence() if payload.recurrence else None,
        color=payload.color,
        category=payload.category,
        location=payload.location,
        description=payload.description,
    )
    try:
        created = await repositories.create_event(user_email, event)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return event_to_camel(created)


@router.get("/v1/calendar/events/{event_id}")
async def get_event(event_id: str, user_email: str = Depends(require_user_email)):
    event = await repositories.get_event(user_email, event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event_to_camel(event)


@router.patch("/v1/calendar/events/{event_id}")
async def update_event(event_id: str, payload: EventPatch, user_email: str = Depends(require_user_email)):
    changes = payload.model_dump(exclude_unset=True)
    if "recurrence" in changes:
        changes["recurrence"] = payload.recurrence.to_recurrence() if payload.recurrence else None
    if changes.get("date") is None:
        changes.pop("date", None)
    try:
        event = await repositories.update_event(user_email, event_id, changes)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event_to_camel(event)


@router.delete("/v1/calendar/events/{event_id}")
async def delete_event(event_id: str, user_email: str = Depends(require_user_email)):
    if not await repositories.delete_event(user_email, event_id):
        raise HTTPException(status_code=404, detail="Event not found")
    return {"ok": True}


@router.get("/v1/calendar/day/{day}")
async def events_for_day(day: date, user_email: str = Depends(require_user_email)):
    events = await repositories.list_events(user_email)
    return {"date": day.isoformat(), "items": [event_to_camel(event) for event in events_on(events, day)]}


@router.get("/v1/calendar/range")
async def events_for_range(
    start: date = Query(...),
    end: date = Query(...),
    user_email: str = Depends(require_user_email),
):
    _check_range(start, end)
    events = await repositories.list_events(user_email)
    span = [start + timedelta(days=offset) for offset in range((end - start).days + 1)]
    days = [entry for entry in _grid(events, span) if entry["items"]]
    return {"start": start.isoformat(), "end": end.isoformat(), "days": days}


@router.get("/v1/calendar/upcoming")
async def upcoming_events(
    start: date = Query(...),
    days: int = Query(30, ge=1, le=MAX_RANGE_DAYS),
    limit: int = Query(5, ge=1, le=100),
    user_email: str = Depends(require_user_email),
):
    events = await repositories.list_events(user_email)
    items = upcoming_occurrences(events, start, days=days, limit=limit)
    return {"items": [{"date": day.isoformat(), "event": event_to_camel(event)} for day, event in items]}


@router.get("/v1/calendar/week/{day}")
async def events_for_week(day: date, user_email: str = Depends(require_user_email)):
    events = await repositories.list_events(user_email)
    return {"week": week_number(day), "days": _grid(events, days_of_week(day))}


@router.get("/v1/calendar/month/{year}/{month}")
async def events_for_month(year: int, month: int, user_email: str = Depends(require_user_email)):
    try:
        first = date(year, month, 1)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    events = await repositories.list_events(user_email)
    return {"year": year, "month": month, "days": _grid(events, days_of_month(first))}


@router.get("/v1/calendar/events/{event_id}/occurrences")
async def event_occurrences(
    event_id: str,
    start: date = Query(...),
    end: date = Query(...),
    user_email: str = Depends(require_user_email),
):
    _check_range(start, end)
    event = await repositories.get_event(user_email, event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return {"id": event.id, "dates": [day.isoformat() for day in occurrences_between(event, start, end)]}
