from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from lifetracker import repositories
from lifetracker.adapters.snapshot import collection_item_to_camel
from lifetracker.auth import require_user_email
from lifetracker.schemas import CategoryCreate, CollectionItemCreate, CollectionItemPatch

router = APIRouter()


@router.get("/v1/collection/categories")
async def list_categories(user_email: str = Depends(require_user_email)):
    return {"items": await repositories.list_collection_categories(user_email)}


@router.post("/v1/collection/categories")
async def add_category(payload: CategoryCreate, user_email: str = Depends(require_user_email)):
    try:
        return await repositories.add_collection_category(user_email, payload.name, payload.color, payload.icon)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/v1/collection")
async def list_items(
    category_id: str | None = Query(None, alias="categoryId"),
    search: str | None = Query(None),
    user_email: str = Depends(require_user_email),
):
    items = await repositories.list_collection_items(user_email, category_id, search)
    return {"items": [collection_item_to_camel(item) for item in items]}


@router.post("/v1/collection")
async def add_item(payload: CollectionItemCreate, user_email: str = Depends(require_user_email)):
    try:
        item = await repositories.add_collection_item(user_email, payload.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return collection_item_to_camel(item)


@router.patch("/v1/collection/{item_id}")
async def update_item(item_id: str, payload: CollectionItemPatch, user_email: str = Depends(require_user_email)):
    item = await repositories.update_collection_item(user_email, item_id, payload.model_dump(exclude_unset=True))
    if item is None:
        raise HTTPException(status_code=404, detail="Item not found")
    return collection_item_to_camel(item)


@router.delete("/v1/collection/{item_id}")
async def delete_item(item_id: str, user_email: str = Depends(require_user_email)):
    if not await repositories.delete_collection_item(user_email, item_id):
        raise HTTPException(status_code=404, detail="Item not found")
    return {"ok": True}
