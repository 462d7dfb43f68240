from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query

from lifetracker import repositories
from lifetracker.adapters.snapshot import goal_to_camel
from lifetracker.auth import require_user_email
from lifetracker.schemas import GoalCreate, GoalPatch

router = APIRouter()


@router.get("/v1/goals")
async def list_goals(
    status: Literal["active", "completed"] | None = Query(None),
    user_email: str = Depends(require_user_email),
):
    goals = await repositories.list_goals(user_email, status)
    return {"items": [goal_to_camel(goal) for goal in goals]}


@router.post("/v1/goals")
async def create_goal(payload: GoalCreate, user_email: str = Depends(require_user_email)):
    try:
        goal = await repositories.create_goal(user_email, payload.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return goal_to_camel(goal)


@router.get("/v1/goals/{goal_id}")
async def get_goal(goal_id: str, user_email: str = Depends(require_user_email)):
    goal = await repositories.get_goal(user_email, goal_id)
    if goal is None:
        raise HTTPException(status_code=404, detail="Goal not found")
    return goal_to_camel(goal)


@router.patch("/v1/goals/{goal_id}")
async def update_goal(goal_id: str, payload: GoalPatch, user_email: str = Depends(require_user_email)):
    try:
        goal = await repositories.update_goal(user_email, goal_id, payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if goal is None:
        raise HTTPException(status_code=404, detail="Goal not found")
    return goal_to_camel(goal)


@router.delete("/v1/goals/{goal_id}")
async def delete_goal(goal_id: str, user_email: str = Depends(require_user_email)):
    if not await repositories.delete_goal(user_email, goal_id):
        raise HTTPException(status_code=404, detail="Goal not found")
    return {"ok": True}


@router.post("/v1/goals/{goal_id}/milestones/{index}/toggle")
async def toggle_milestone(goal_id: str, index: int, user_email: str = Depends(require_user_email)):
    try:
        goal = await repositories.toggle_milestone(user_email, goal_id, index)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if goal is None:
        raise HTTPException(status_code=404, detail="Goal not found")
    return goal_to_camel(goal)
