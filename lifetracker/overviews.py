"""Period summaries over diary, habit, nutrition and goal records.

Every function takes plain records as returned by the repositories and an
inclusive ``start``/``end`` date range, and returns JSON-ready dicts.
"""
from __future__ import annotations

import calendar
from datetime import date

import pandas as pd

from lifetracker.core.dates import parse_day

DIARY_METRICS = ["mood", "energy", "stress", "sleep"]


def period_bounds(year: int, month: int | None = None) -> tuple[date, date]:
    if month is None:
        return date(year, 1, 1), date(year, 12, 31)
    if not 1 <= month <= 12:
        raise ValueError("Month must be between 1 and 12")
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


def _in_period(df: pd.DataFrame, start: date, end: date) -> pd.DataFrame:
    if df.empty:
        return df
    df = df.copy()
    df["date"] = df["date"].map(parse_day)
    df = df[df["date"].notna()]
    return df[(df["date"] >= start) & (df["date"] <= end)].sort_values("date")


def _percent(part, whole) -> int:
    return int(round(part / whole * 100)) if whole else 0


def habit_overview(habits: list[dict], logs: dict, start: date, end: date) -> dict:
    rows = []
    for day, day_log in (logs or {}).items():
        for habit_id, entry in (day_log or {}).items():
            completed = entry.get("completed") if isinstance(entry, dict) else bool(entry)
            rows.append({"date": day, "habit_id": str(habit_id), "completed": bool(completed)})
    df = _in_period(pd.DataFrame(rows, columns=["date", "habit_id", "completed"]), start, end)
    logged_days = int(df["date"].nunique()) if not df.empty else 0
    done = df[df["completed"]].groupby("habit_id")["date"].nunique() if not df.empty else pd.Series(dtype=int)

    items = []
    for habit in habits:
        completed_days = int(done.get(habit["id"], 0))
        items.append(
            {
                "id": habit["id"],
                "name": habit["name"],
                "completed_days": completed_days,
                "percentage": _percent(completed_days, logged_days),
            }
        )
    return {
        "start": start.isoformat(),
        "end": end.isoformat(),
        "logged_days": logged_days,
        "habits": items,
    }


def nutrition_overview(meals: list[dict], start: date, end: date, target_kcal: int) -> dict:
    df = _in_period(pd.DataFrame(meals, columns=["date", "type", "name", "kcal"]), start, end)
    if df.empty:
        return {
            "start": start.isoformat(),
            "end": end.isoformat(),
            "days": 0,
            "total_meals": 0,
            "total_kcal": 0,
            "avg_kcal_per_day": 0,
            "percentage_of_target": 0,
            "target_kcal": target_kcal,
            "per_day": [],
            "by_type": [],
        }
    df["kcal"] = pd.to_numeric(df["kcal"], errors="coerce").fillna(0).astype(int)
    df["type"] = df["type"].fillna("Other")

    per_day = df.groupby("date")["kcal"].sum()
    days = len(per_day)
    total_kcal = int(per_day.sum())
    by_type = df.groupby("type")["kcal"].agg(["count", "mean"]).reset_index()
    return {
        "start": start.isoformat(),
        "end": end.isoformat(),
        "days": days,
        "total_meals": int(len(df)),
        "total_kcal": total_kcal,
        "avg_kcal_per_day": int(round(total_kcal / days)),
        "percentage_of_target": _percent(total_kcal, target_kcal * days),
        "target_kcal": target_kcal,
        "per_day": [
            {"date": day.isoformat(), "kcal": int(kcal), "percentage": _percent(kcal, target_kcal)}
            for day, kcal in per_day.items()
        ],
        "by_type": [
            {"type": row["type"], "count": int(row["count"]), "avg_kcal": int(round(row["mean"]))}
            for _, row in by_type.iterrows()
        ],
    }


def goal_overview(goals: list[dict]) -> dict:
    items = []
    for goal in goals:
        milestones = goal.get("milestones") or []
        done = sum(1 for item in milestones if item.get("completed"))
        items.append(
            {
                "id": goal.get("id"),
                "title": goal.get("title"),
                "completed": bool(goal.get("completed")),
                "deadline": goal.get("deadline"),
                "milestones_done": done,
                "milestones_total": len(milestones),
                "progress": _percent(done, len(milestones)),
            }
        )
    completed = sum(1 for item in items if item["completed"])
    return {
        "total": len(items),
        "completed": completed,
        "active": len(items) - completed,
        "goals": items,
    }


def diary_overview(entries: list[dict], start: date, end: date, top_tags: int = 10) -> dict:
    df = _in_period(pd.DataFrame(entries, columns=["date", *DIARY_METRICS, "tags"]), start, end)
    if df.empty:
        return {
            "start": start.isoformat(),
            "end": end.isoformat(),
            "days": 0,
            "entries": 0,
            "averages": {metric: None for metric in DIARY_METRICS},
            "tags": [],
        }
    averages = {}
    for metric in DIARY_METRICS:
        values = pd.to_numeric(df[metric], errors="coerce").dropna()
        averages[metric] = round(float(values.mean()), 1) if not values.empty else None
    tags = df["tags"].map(lambda value: value if isinstance(value, list) else []).explode().dropna()
    counts = tags.value_counts().head(top_tags)
    return {
        "start": start.isoformat(),
        "end": end.isoformat(),
        "days": int(df["date"].nunique()),
        "entries": int(len(df)),
        "averages": averages,
        "tags": [{"tag": str(tag), "count": int(count)} for tag, count in counts.items()],
    }
