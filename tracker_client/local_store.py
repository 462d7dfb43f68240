"""File-backed store holding the local-storage backup document.

The document keeps the exact shape of the browser backup so it can be
exported, re-imported and migrated with ``tracker_client.migrate``.
"""
from __future__ import annotations

import json
import logging
import threading
from datetime import datetime
from pathlib import Path
from uuid import uuid4

from lifetracker.adapters import local_storage
from lifetracker.adapters.snapshot import DEFAULT_TARGET_KCAL

logger = logging.getLogger(__name__)

SIZE_WARNING_KB = 4096
SAVE_DELAY_SECONDS = 0.5


def _category(name, color, icon) -> dict:
    return {"id": uuid4().hex, "name": name, "color": color, "icon": icon}


def _habit(name, icon, color, weekly_goal=7) -> dict:
    return {
        "id": uuid4().hex,
        "name": name,
        "icon": icon,
        "color": color,
        "frequency": "daily",
        "weeklyGoal": weekly_goal,
        "active": True,
        "createdAt": datetime.utcnow().isoformat(),
    }


def initial_data() -> dict:
    return {
        "version": local_storage.STORAGE_VERSION,
        "settings": {"theme": "system", "notificationsEnabled": False, "defaultView": "dashboard"},
        "dagboek": {},
        "verzameling": {
            "items": [],
            "categories": [
                _category("Websites", "#3B82F6", "globe"),
                _category("Articles", "#10B981", "file-text"),
                _category("Videos", "#EF4444", "video"),
                _category("Books", "#8B5CF6", "book"),
                _category("Podcasts", "#EC4899", "mic"),
                _category("Other", "#6B7280", "folder"),
            ],
        },
        "ideeen": {
            "items": [],
            "categories": [
                _category("Projects", "#3B82F6", "briefcase"),
                _category("Business", "#F59E0B", "trending-up"),
                _category("Other", "#6B7280", "folder"),
            ],
        },
        "kalender": {"events": []},
        "gewoontes": {
            "habits": [
                _habit("Read a book", "book-open", "#10B981"),
                _habit("Exercise", "dumbbell", "#EF4444", weekly_goal=4),
                _habit("Meditate", "brain", "#14B8A6"),
            ],
            "logs": {},
        },
        "doelen": {"goals": []},
        "reflecties": {"daily": {}, "weekly": [], "monthly": []},
        "voeding": {"meals": {}, "targetKcal": DEFAULT_TARGET_KCAL},
    }


class Debouncer:
    """Runs the latest scheduled call once no new call arrived for ``delay`` seconds."""

    def __init__(self, func, delay: float = SAVE_DELAY_SECONDS):
        self._func = func
        self._delay = delay
        self._timer: threading.Timer | None = None
        self._pending = None
        self._lock = threading.Lock()

    def schedule(self, *args) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = args
            self._timer = threading.Timer(self._delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def _fire(self) -> None:
        with self._lock:
            args, self._pending, self._timer = self._pending, None, None
        if args is not None:
            self._func(*args)

    def flush(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            args, self._pending, self._timer = self._pending, None, None
        if args is not None:
            self._func(*args)

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = None
            self._timer = None

    @property
    def pending(self) -> bool:
        return self._pending is not None


class LocalStore:
    def __init__(self, path, delay: float = SAVE_DELAY_SECONDS):
        self.path = Path(path)
        self._debouncer = Debouncer(self.save, delay)

    def load(self) -> dict:
        if not self.path.exists():
            data = initial_data()
            self.save(data)
            return data
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.exception("Failed to read %s, starting from initial data", self.path)
            return initial_data()

        changed = False
        if data.get("version") != local_storage.STORAGE_VERSION:
            data["version"] = local_storage.STORAGE_VERSION
            changed = True
        if not data.get("voeding"):
            data["voeding"] = {"meals": {}, "targetKcal": DEFAULT_TARGET_KCAL}
            changed = True
        if changed:
            self.save(data)
        return data

    def save(self, data: dict) -> bool:
        text = json.dumps(data, ensure_ascii=False)
        size_kb = round(len(text.encode("utf-8")) / 1024)
        try:
            self.path.write_text(text, encoding="utf-8")
        except OSError:
            logger.exception("Failed to write %s", self.path)
            return False
        if size_kb > SIZE_WARNING_KB:
            logger.warning("Storage usage: %sKB. Consider exporting and removing old entries.", size_kb)
        return True

    def save_later(self, data: dict) -> None:
        self._debouncer.schedule(data)

    def flush(self) -> None:
        self._debouncer.flush()

    def size_kb(self) -> int:
        if not self.path.exists():
            return 0
        return round(self.path.stat().st_size / 1024)

    def export_json(self) -> str:
        return json.dumps(self.load(), ensure_ascii=False, indent=2)

    def import_json(self, text: str) -> dict:
        data = json.loads(text)
        local_storage.load(data)
        self._debouncer.cancel()
        self.save(data)
        return data

    def clear(self) -> None:
        self._debouncer.cancel()
        if self.path.exists():
            self.path.unlink()
