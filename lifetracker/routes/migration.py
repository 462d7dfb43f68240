from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from lifetracker import migration
from lifetracker.adapters import local_storage
from lifetracker.auth import require_user_email
from lifetracker.schemas import MigrationImport

router = APIRouter()


@router.get("/v1/migration/status")
async def migration_status(user_email: str = Depends(require_user_email)):
    return await migration.get_migration_status(user_email)


@router.post("/v1/migration/import")
async def import_backup(payload: MigrationImport, user_email: str = Depends(require_user_email)):
    try:
        snap = migration.load_snapshot(payload.data, payload.source)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    try:
        return await migration.import_snapshot(user_email, snap, force=payload.force)
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc


@router.post("/v1/migration/verify")
async def verify_backup(payload: MigrationImport, user_email: str = Depends(require_user_email)):
    try:
        snap = migration.load_snapshot(payload.data, payload.source)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    stored = (await migration.export_snapshot(user_email)).counts()
    return migration.verify(snap, stored)


@router.delete("/v1/migration/status")
async def reset_migration_status(user_email: str = Depends(require_user_email)):
    return await migration.set_migration_status(user_email, False)


@router.get("/v1/export")
async def export_backup(user_email: str = Depends(require_user_email)):
    return local_storage.dump(await migration.export_snapshot(user_email))
