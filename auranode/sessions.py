"""In-memory session handling for signed-in customers."""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from .models import PanelUser


@dataclass(frozen=True)
class Session:
    """An authenticated browser session bound to one panel user."""

    session_id: str
    user: PanelUser


@dataclass
class _SessionRecord:
    user: PanelUser
    expires_at: datetime


class SessionStore:
    """Map session identifiers to the panel user snapshot taken at login."""

    def __init__(self, *, ttl: timedelta = timedelta(hours=8)) -> None:
        self._ttl = ttl
        self._sessions: Dict[str, _SessionRecord] = {}

    @property
    def cookie_max_age(self) -> int:
        return int(self._ttl.total_seconds())

    def new_session_id(self) -> str:
        return secrets.token_urlsafe(32)

    def get(self, session_id: Optional[str]) -> Optional[PanelUser]:
        if not session_id:
            return None
        now = self._now()
        record = self._sessions.get(session_id)
        if record is None:
            return None
        if record.expires_at <= now:
            self._sessions.pop(session_id, None)
            return None
        record.expires_at = now + self._ttl
        return record.user

    def set(self, session_id: str, user: PanelUser) -> None:
        now = self._now()
        self._sessions = {
            key: record for key, record in self._sessions.items() if record.expires_at > now
        }
        self._sessions[session_id] = _SessionRecord(user=user, expires_at=now + self._ttl)

    def destroy(self, session_id: Optional[str]) -> None:
        if session_id:
            self._sessions.pop(session_id, None)

    def load(self, session_id: Optional[str]) -> Optional[Session]:
        user = self.get(session_id)
        if user is None or session_id is None:
            return None
        return Session(session_id=session_id, user=user)

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)


__all__ = ["Session", "SessionStore"]
