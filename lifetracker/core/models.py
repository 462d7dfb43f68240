from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Optional


@dataclass
class Recurrence:
    type: str = "none"
    interval: Optional[int] = 1
    end_date: Optional[date] = None

    @property
    def is_recurring(self) -> bool:
        return bool(self.type) and self.type != "none"


@dataclass
class Event:
    id: str
    title: str
    date: date
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    recurrence: Optional[Recurrence] = None
    color: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)
