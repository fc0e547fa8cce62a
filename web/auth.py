"""Shared-password authentication and cookie sessions for staff."""
from __future__ import annotations

import hashlib
import secrets
from datetime import datetime, timedelta
from threading import Lock
from typing import Dict, Optional

from web.config import get_settings


SESSION_COOKIE_NAME = "session_token"


def _hash_password(password: str) -> str:
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


class SessionRegistry:
    """In-memory session tokens mapped to their expiry time."""

    def __init__(self):
        self._expiries: Dict[str, datetime] = {}
        self._lock = Lock()

    def issue(self, lifetime: timedelta) -> str:
        token = secrets.token_urlsafe(32)
        with self._lock:
            self._expiries[token] = datetime.utcnow() + lifetime
        return token

    def is_active(self, token: Optional[str]) -> bool:
        if not token:
            return False
        with self._lock:
            expiry = self._expiries.get(token)
            if expiry is None:
                return False
            if expiry < datetime.utcnow():
                del self._expiries[token]
                return False
            return True

    def revoke(self, token: Optional[str]) -> None:
        if not token:
            return
        with self._lock:
            self._expiries.pop(token, None)

    def purge_expired(self) -> int:
        now = datetime.utcnow()
        with self._lock:
            expired = [token for token, expiry in self._expiries.items() if expiry < now]
            for token in expired:
                del self._expiries[token]
        return len(expired)


sessions = SessionRegistry()


def verify_password(password: str) -> bool:
    """Return True if the supplied password matches the configured staff password."""
    if not password:
        return False
    expected_hash = _hash_password(get_settings().STAFF_PASSWORD)
    return secrets.compare_digest(expected_hash, _hash_password(password))


def create_session() -> str:
    """Issue a session token valid for the configured number of hours."""
    return sessions.issue(timedelta(hours=get_settings().SESSION_DURATION_HOURS))


def validate_session(token: Optional[str]) -> bool:
    return sessions.is_active(token)


def invalidate_session(token: Optional[str]) -> None:
    sessions.revoke(token)


def cleanup_expired_sessions() -> int:
    return sessions.purge_expired()
