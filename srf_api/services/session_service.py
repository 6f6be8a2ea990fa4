"""Admin session tokens: issue, validate and drop. Kept in process memory."""
from __future__ import annotations

import secrets
import threading
import time
from typing import Dict, Optional

from fastapi import Request, Response

from srf_api.core.config import get_settings

SESSION_COOKIE_NAME = "admin_session"


class SessionStore:
    def __init__(self, ttl_seconds: int) -> None:
        self.ttl_seconds = ttl_seconds
        self._sessions: Dict[str, tuple[str, float]] = {}
        self._lock = threading.Lock()

    def issue(self, admin_id: str) -> str:
        token = secrets.token_urlsafe(32)
        expires_at = time.time() + self.ttl_seconds
        with self._lock:
            self._purge_expired()
            self._sessions[token] = (admin_id, expires_at)
        return token

    def lookup(self, token: Optional[str]) -> Optional[str]:
        """Return the admin id bound to a live token, if any."""
        if not token:
            return None
        with self._lock:
            entry = self._sessions.get(token)
            if not entry:
                return None
            admin_id, expires_at = entry
            if expires_at < time.time():
                del self._sessions[token]
                return None
            return admin_id

    def revoke(self, token: Optional[str]) -> None:
        if not token:
            return
        with self._lock:
            self._sessions.pop(token, None)

    def _purge_expired(self) -> None:
        now = time.time()
        for tok in [t for t, (_, exp) in self._sessions.items() if exp < now]:
            del self._sessions[tok]


def token_from_request(request: Request) -> Optional[str]:
    auth = request.headers.get("authorization") or ""
    scheme, _, value = auth.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return request.cookies.get(SESSION_COOKIE_NAME)


def set_session_cookie(response: Response, token: str, max_age: int) -> None:
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        httponly=True,
        secure=get_settings().app_env == "prod",
        samesite="strict",
        max_age=max_age,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
