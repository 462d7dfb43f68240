from __future__ import annotations

import logging
import threading
from datetime import date, timedelta

from lifetracker.core.models import Event
from lifetracker.core.recurrence import events_on

logger = logging.getLogger(__name__)


def format_body(event: Event, day: date) -> str:
    body = f"Date: {day.strftime('%d-%m-%Y')}"
    if event.start_time:
        body += f" at {event.start_time}"
    if event.location:
        body += f"\nLocation: {event.location}"
    return body


class ReminderTracker:
    """Announces tomorrow's occurrences once per (event, occurrence date)."""

    def __init__(self):
        self._announced: set[tuple[str, str]] = set()
        self._lock = threading.Lock()

    def due(self, events: list[Event], today: date) -> list[dict]:
        tomorrow = today + timedelta(days=1)
        reminders = []
        with self._lock:
            self._prune(tomorrow)
            for event in events_on(events, tomorrow):
                key = (str(event.id), tomorrow.isoformat())
                if key in self._announced:
                    continue
                self._announced.add(key)
                reminders.append(
                    {
                        "event_id": event.id,
                        "date": tomorrow.isoformat(),
                        "title": event.title,
                        "body": format_body(event, tomorrow),
                    }
                )
        if reminders:
            logger.info("Announcing %s reminder(s) for %s", len(reminders), tomorrow.isoformat())
        return reminders

    def _prune(self, day: date) -> None:
        cutoff = day.isoformat()
        self._announced = {key for key in self._announced if key[1] >= cutoff}


class ReminderRegistry:
    def __init__(self):
        self._trackers: dict[str, ReminderTracker] = {}
        self._lock = threading.Lock()

    def for_user(self, user_email: str) -> ReminderTracker:
        with self._lock:
            tracker = self._trackers.get(user_email)
            if tracker is None:
                tracker = ReminderTracker()
                self._trackers[user_email] = tracker
            return tracker
