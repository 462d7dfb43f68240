from __future__ import annotations

import os
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


def _build_session():
    session = requests.Session()
    retry = Retry(
        total=2,
        backoff_factor=0.5,
        status_forcelist=(502, 503, 504),
        allowed_methods=("GET", "POST", "PUT", "PATCH", "DELETE"),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry, pool_connections=10, pool_maxsize=10)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class ApiClient:
    def __init__(self, user_email: str, base_url: str | None = None, token: str | None = None, session=None):
        self.user_email = user_email
        self.base_url = (base_url or os.getenv("API_BASE_URL") or "").rstrip("/")
        self.token = token or os.getenv("BACKEND_SESSION_SECRET") or ""
        self.session = session or _build_session()

    def is_enabled(self) -> bool:
        return bool(self.base_url and self.token)

    def request(self, method: str, path: str, params: dict | None = None, json: dict | None = None, timeout: int = 10) -> Any:
        if not self.base_url:
            raise RuntimeError("API_BASE_URL not configured")
        if not self.token:
            raise RuntimeError("BACKEND_SESSION_SECRET not configured")
        if not self.user_email:
            raise RuntimeError("Missing user email for API request")
        headers = {
            "X-User-Email": self.user_email,
            "X-Backend-Token": self.token,
        }
        url = f"{self.base_url}{path}"
        response = self.session.request(method, url, params=params, json=json, headers=headers, timeout=timeout)
        if not response.ok:
            try:
                detail = response.json()
            except ValueError:
                detail = response.text
            raise RuntimeError(f"API error {response.status_code} {response.reason}: {detail}")
        if response.status_code == 204:
            return None
        return response.json()

    def events_on(self, day: str) -> list[dict]:
        return self.request("GET", f"/v1/calendar/day/{day}").get("items", [])

    def dashboard(self, day: str | None = None) -> dict:
        return self.request("GET", "/v1/dashboard", params={"day": day} if day else None)

    def migration_status(self) -> dict:
        return self.request("GET", "/v1/migration/status")

    def import_backup(self, data: dict, source: str = "local", force: bool = False) -> dict:
        return self.request(
            "POST",
            "/v1/migration/import",
            json={"source": source, "data": data, "force": force},
            timeout=120,
        )

    def export_backup(self) -> dict:
        return self.request("GET", "/v1/export", timeout=60)
