from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from lifetracker.db import dispose_engine
from lifetracker.db_init import init_db
from lifetracker.notifications import ReminderRegistry
from lifetracker.routes import (
    calendar,
    collection,
    dashboard,
    diary,
    goals,
    habits,
    ideas,
    migration,
    nutrition,
    overviews,
    preferences,
    reflections,
    reminders,
)


def create_app() -> FastAPI:
    logging.basicConfig(
        level=os.getenv("TRACKER_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    app = FastAPI(title="Life Tracker API", version="0.1.0")
    app.state.reminders = ReminderRegistry()

    app.include_router(dashboard.router)
    app.include_router(calendar.router)
    app.include_router(habits.router)
    app.include_router(diary.router)
    app.include_router(goals.router)
    app.include_router(reflections.router)
    app.include_router(nutrition.router)
    app.include_router(collection.router)
    app.include_router(ideas.router)
    app.include_router(preferences.router)
    app.include_router(overviews.router)
    app.include_router(reminders.router)
    app.include_router(migration.router)

    @app.on_event("startup")
    async def _startup():
        await init_db()

    @app.on_event("shutdown")
    async def _shutdown():
        await dispose_engine()

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):
        logging.getLogger("lifetracker").exception("Unhandled exception: %s", exc)
        return JSONResponse(status_code=500, content={"detail": "Internal error"})

    @app.get("/health")
    async def health():
        return {"ok": True}

    return app


app = create_app()
