from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from lifetracker import repositories
from lifetracker.adapters.snapshot import idea_to_camel
from lifetracker.auth import require_user_email
from lifetracker.schemas import IdeaCreate, IdeaPatch

router = APIRouter()


@router.get("/v1/ideas")
async def list_ideas(
    status: str | None = Query(None),
    category_id: str | None = Query(None, alias="categoryId"),
    user_email: str = Depends(require_user_email),
):
    ideas = await repositories.list_ideas(user_email, status, category_id)
    return {"items": [idea_to_camel(idea) for idea in ideas]}


@router.post("/v1/ideas")
async def add_idea(payload: IdeaCreate, user_email: str = Depends(require_user_email)):
    try:
        idea = await repositories.add_idea(user_email, payload.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return idea_to_camel(idea)


@router.patch("/v1/ideas/{idea_id}")
async def update_idea(idea_id: str, payload: IdeaPatch, user_email: str = Depends(require_user_email)):
    try:
        idea = await repositories.update_idea(user_email, idea_id, payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if idea is None:
        raise HTTPException(status_code=404, detail="Idea not found")
    return idea_to_camel(idea)


@router.delete("/v1/ideas/{idea_id}")
async def delete_idea(idea_id: str, user_email: str = Depends(require_user_email)):
    if not await repositories.delete_idea(user_email, idea_id):
        raise HTTPException(status_code=404, detail="Idea not found")
    return {"ok": True}
