from __future__ import annotations

from sqlalchemy import text as sql_text

from lifetracker.db import get_engine


SETTINGS_TABLE = "settings"
DIARY_TABLE = "diary_entries"
DIARY_SUMMARIES_TABLE = "diary_summaries"
EVENTS_TABLE = "calendar_events"
HABITS_TABLE = "habits"
HABIT_LOGS_TABLE = "habit_logs"
GOALS_TABLE = "goals"
REFLECTIONS_TABLE = "reflections"
MEALS_TABLE = "meals"
COLLECTION_ITEMS_TABLE = "collection_items"
COLLECTION_CATEGORIES_TABLE = "collection_categories"
IDEAS_TABLE = "ideas"

SCHEMA = [
    f"""
    CREATE TABLE IF NOT EXISTS {SETTINGS_TABLE} (
        key TEXT PRIMARY KEY,
        value TEXT
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {DIARY_TABLE} (
        id TEXT PRIMARY KEY,
        user_email TEXT NOT NULL,
        date TEXT NOT NULL,
        content TEXT,
        mood INTEGER,
        energy INTEGER,
        stress INTEGER,
        sleep INTEGER,
        sport_json TEXT,
        tags_json TEXT,
        timestamp TEXT NOT NULL
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {DIARY_SUMMARIES_TABLE} (
        user_email TEXT NOT NULL,
        date TEXT NOT NULL,
        summary TEXT,
        PRIMARY KEY (user_email, date)
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {EVENTS_TABLE} (
        id TEXT PRIMARY KEY,
        user_email TEXT NOT NULL,
        title TEXT NOT NULL,
        description TEXT,
        start_time TEXT NOT NULL,
        end_time TEXT,
        all_day INTEGER DEFAULT 0,
        category TEXT,
        location TEXT,
        color TEXT,
        recurrence_json TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {HABITS_TABLE} (
        id TEXT PRIMARY KEY,
        user_email TEXT NOT NULL,
        name TEXT NOT NULL,
        icon TEXT,
        color TEXT,
        frequency TEXT DEFAULT 'daily',
        weekly_goal INTEGER DEFAULT 7,
        active INTEGER DEFAULT 1,
        created_at TEXT NOT NULL
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {HABIT_LOGS_TABLE} (
        user_email TEXT NOT NULL,
        habit_id TEXT NOT NULL,
        date TEXT NOT NULL,
        completed INTEGER DEFAULT 1,
        duration INTEGER,
        notes TEXT,
        PRIMARY KEY (user_email, habit_id, date)
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {GOALS_TABLE} (
        id TEXT PRIMARY KEY,
        user_email TEXT NOT NULL,
        title TEXT NOT NULL,
        description TEXT,
        deadline TEXT,
        status TEXT DEFAULT 'planned',
        milestones_json TEXT,
        tags_json TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {REFLECTIONS_TABLE} (
        id TEXT PRIMARY KEY,
        user_email TEXT NOT NULL,
        type TEXT NOT NULL,
        date TEXT NOT NULL,
        answers_json TEXT,
        created_at TEXT NOT NULL
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {MEALS_TABLE} (
        id TEXT PRIMARY KEY,
        user_email TEXT NOT NULL,
        date TEXT NOT NULL,
        type TEXT,
        name TEXT NOT NULL,
        amount REAL,
        unit TEXT,
        calories INTEGER DEFAULT 0,
        notes TEXT,
        created_at TEXT NOT NULL
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {COLLECTION_ITEMS_TABLE} (
        id TEXT PRIMARY KEY,
        user_email TEXT NOT NULL,
        title TEXT NOT NULL,
        description TEXT,
        url TEXT,
        category TEXT,
        tags_json TEXT,
        created_at TEXT NOT NULL
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {COLLECTION_CATEGORIES_TABLE} (
        id TEXT PRIMARY KEY,
        user_email TEXT NOT NULL,
        name TEXT NOT NULL,
        color TEXT,
        icon TEXT
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {IDEAS_TABLE} (
        id TEXT PRIMARY KEY,
        user_email TEXT NOT NULL,
        title TEXT NOT NULL,
        description TEXT,
        category TEXT,
        status TEXT DEFAULT 'backlog',
        tags_json TEXT,
        created_at TEXT NOT NULL
    )
    """,
    f"CREATE INDEX IF NOT EXISTS idx_{DIARY_TABLE}_user_date ON {DIARY_TABLE}(user_email, date)",
    f"CREATE INDEX IF NOT EXISTS idx_{EVENTS_TABLE}_user ON {EVENTS_TABLE}(user_email)",
    f"CREATE INDEX IF NOT EXISTS idx_{HABIT_LOGS_TABLE}_user_date ON {HABIT_LOGS_TABLE}(user_email, date)",
    f"CREATE INDEX IF NOT EXISTS idx_{MEALS_TABLE}_user_date ON {MEALS_TABLE}(user_email, date)",
    f"CREATE INDEX IF NOT EXISTS idx_{REFLECTIONS_TABLE}_user_type ON {REFLECTIONS_TABLE}(user_email, type)",
]


async def init_db():
    engine = get_engine()
    async with engine.begin() as conn:
        for statement in SCHEMA:
            await conn.execute(sql_text(statement))
