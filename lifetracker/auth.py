from __future__ import annotations

import secrets

from fastapi import Header, HTTPException

from lifetracker.settings import Settings, get_settings


def _check_token(settings: Settings, token: str | None) -> None:
    expected = settings.backend_session_secret
    if not token or not secrets.compare_digest(token.encode(), expected.encode()):
        raise HTTPException(status_code=401, detail="Invalid backend token")


def normalize_email(raw: str | None) -> str:
    email = (raw or "").strip().lower()
    local, _, domain = email.partition("@")
    if not local or "." not in domain:
        raise HTTPException(status_code=401, detail="Missing or invalid user email")
    return email


async def require_user_email(
    x_user_email: str | None = Header(default=None, alias="X-User-Email"),
    x_backend_token: str | None = Header(default=None, alias="X-Backend-Token"),
) -> str:
    """Every tracker row is scoped by the email this returns."""
    settings = get_settings()
    _check_token(settings, x_backend_token)
    email = normalize_email(x_user_email)
    if settings.allowed_emails and email not in settings.allowed_emails:
        raise HTTPException(status_code=403, detail="User not allowed")
    return email
