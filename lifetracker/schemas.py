from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from lifetracker.core.models import Recurrence


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RecurrencePayload(CamelModel):
    type: Literal["none", "daily", "weekly", "monthly", "yearly"] = "none"
    interval: Optional[int] = Field(None, ge=1)
    end_date: Optional[dt.date] = None

    def to_recurrence(self) -> Recurrence | None:
        if self.type == "none":
            return None
        return Recurrence(type=self.type, interval=self.interval or 1, end_date=self.end_date)


class EventCreate(CamelModel):
    title: str
    date: dt.date
    start_time: Optional[str] = Field(None, pattern=r"^\d{2}:\d{2}$")
    end_time: Optional[str] = Field(None, pattern=r"^\d{2}:\d{2}$")
    recurrence: Optional[RecurrencePayload] = None
    color: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None


class EventPatch(CamelModel):
    title: Optional[str] = None
    date: Optional[dt.date] = None
    start_time: Optional[str] = Field(None, pattern=r"^\d{2}:\d{2}$")
    end_time: Optional[str] = Field(None, pattern=r"^\d{2}:\d{2}$")
    recurrence: Optional[RecurrencePayload] = None
    color: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None


class DiaryEntryCreate(CamelModel):
    date: dt.date
    content: str = ""
    mood: Optional[int] = Field(None, ge=1, le=10)
    energy: Optional[int] = Field(None, ge=1, le=10)
    stress: Optional[int] = Field(None, ge=1, le=10)
    sleep: Optional[int] = Field(None, ge=1, le=10)
    sport: Optional[Dict[str, Any]] = None
    tags: List[str] = Field(default_factory=list)


class DiaryEntryPatch(CamelModel):
    content: Optional[str] = None
    mood: Optional[int] = Field(None, ge=1, le=10)
    energy: Optional[int] = Field(None, ge=1, le=10)
    stress: Optional[int] = Field(None, ge=1, le=10)
    sleep: Optional[int] = Field(None, ge=1, le=10)
    sport: Optional[Dict[str, Any]] = None
    tags: Optional[List[str]] = None


class DaySummaryPayload(CamelModel):
    summary: str = ""


class HabitCreate(CamelModel):
    name: str
    icon: Optional[str] = None
    color: Optional[str] = None
    frequency: str = "daily"
    weekly_goal: int = Field(7, ge=1, le=7)


class HabitPatch(CamelModel):
    name: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    frequency: Optional[str] = None
    weekly_goal: Optional[int] = Field(None, ge=1, le=7)
    active: Optional[bool] = None


class HabitLogPayload(CamelModel):
    habit_id: str
    date: dt.date
    completed: bool = True
    duration: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None


class Milestone(CamelModel):
    title: str
    completed: bool = False


class GoalCreate(CamelModel):
    title: str
    description: Optional[str] = None
    deadline: Optional[dt.date] = None
    completed: bool = False
    milestones: List[Milestone] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)


class GoalPatch(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    deadline: Optional[dt.date] = None
    completed: Optional[bool] = None
    milestones: Optional[List[Milestone]] = None
    tags: Optional[List[str]] = None


class ReflectionAnswers(CamelModel):
    gratitude: Optional[Any] = None
    highlights: Optional[Any] = None
    challenges: Optional[Any] = None
    learnings: Optional[Any] = None
    tomorrow: Optional[Any] = None
    wins: Optional[Any] = None
    habits: Optional[Any] = None
    next_week_focus: Optional[Any] = None
    achievements: Optional[Any] = None
    growth_areas: Optional[Any] = None
    next_month_goals: Optional[Any] = None
    overall: Optional[Any] = None


class ReflectionCreate(ReflectionAnswers):
    type: Literal["daily", "weekly", "monthly"]
    date: dt.date


class ReflectionPatch(ReflectionAnswers):
    date: Optional[dt.date] = None


class MealCreate(CamelModel):
    date: dt.date
    type: str = "Lunch"
    name: str
    amount: Optional[float] = None
    unit: Optional[str] = None
    kcal: int = Field(0, ge=0)
    notes: Optional[str] = None


class MealPatch(CamelModel):
    type: Optional[str] = None
    name: Optional[str] = None
    amount: Optional[float] = None
    unit: Optional[str] = None
    kcal: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None


class CategoryCreate(CamelModel):
    name: str
    color: Optional[str] = None
    icon: Optional[str] = None


class CollectionItemCreate(CamelModel):
    title: str
    description: Optional[str] = None
    url: Optional[str] = None
    category_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class CollectionItemPatch(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    category_id: Optional[str] = None
    tags: Optional[List[str]] = None


class IdeaCreate(CamelModel):
    title: str
    description: Optional[str] = None
    category_id: Optional[str] = None
    status: str = "backlog"
    tags: List[str] = Field(default_factory=list)


class IdeaPatch(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[str] = None
    status: Optional[str] = None
    tags: Optional[List[str]] = None


class PreferencesPatch(CamelModel):
    notifications_enabled: Optional[bool] = None
    target_kcal: Optional[int] = Field(None, gt=0)
    theme: Optional[str] = None


class MigrationImport(CamelModel):
    source: Literal["local", "document"] = "local"
    data: Dict[str, Any]
    force: bool = False
