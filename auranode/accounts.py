"""Registration, login, logout and dashboard flows.

The functions here never touch HTTP objects. They take explicit inputs and a
:class:`~auranode.sessions.SessionStore`, and return an :class:`Outcome`
describing which page to redirect to and which one-time message to show.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from .models import PanelServer
from .panel import PanelClient
from .sessions import Session, SessionStore
from .validation import RegistrationInput, validate_registration

logger = logging.getLogger("auranode.accounts")

REGISTERED = "Registration successful! You can now log in."
LOGGED_IN = "You are now logged in."
NO_ACCOUNT = "No account found with that email."
LOGIN_REQUIRED = "Please log in to view that resource."


@dataclass(frozen=True)
class Flash:
    category: str
    message: str

    @classmethod
    def success(cls, message: str) -> "Flash":
        return cls("success", message)

    @classmethod
    def error(cls, message: str) -> "Flash":
        return cls("error", message)


@dataclass(frozen=True)
class Outcome:
    """Where to send the browser next, and what to tell it."""

    redirect_to: str
    flash: Optional[Flash] = None
    session: Optional[Session] = None
    clear_session: bool = False


@dataclass(frozen=True)
class ServerLink:
    """A panel server plus the URL the customer uses to manage it."""

    server: PanelServer
    panel_url: str

    @property
    def name(self) -> str:
        return self.server.name or self.server.identifier or self.server.uuid


def require_session(store: SessionStore, session_id: Optional[str]) -> Union[Session, Outcome]:
    """Return the caller's :class:`Session`, or a redirect to the login page."""
    session = store.load(session_id)
    if session is not None:
        return session
    return Outcome("show_login", Flash.error(LOGIN_REQUIRED))


class AccountFlow:
    """Drive account transitions against the panel and the session store."""

    def __init__(self, panel: PanelClient, store: SessionStore) -> None:
        self._panel = panel
        self._store = store

    async def register(self, data: RegistrationInput) -> Outcome:
        problem = validate_registration(data)
        if problem is not None:
            return Outcome("show_register", Flash.error(problem))

        result = await self._panel.create_user(
            data.email,
            data.username,
            data.first_name,
            data.last_name,
            data.password,
        )
        if not result.success:
            return Outcome("show_register", Flash.error(result.message))
        return Outcome("show_login", Flash.success(REGISTERED))

    async def login(self, email: str, *, previous_session_id: Optional[str] = None) -> Outcome:
        # Email lookup is the only proof of identity; the panel is not asked to check a password.
        if not email:
            return Outcome("show_login", Flash.error(NO_ACCOUNT))

        result = await self._panel.find_user_by_email(email)
        if not result.success:
            return Outcome("show_login", Flash.error(NO_ACCOUNT))

        user = result.value
        self._store.destroy(previous_session_id)
        session = Session(session_id=self._store.new_session_id(), user=user)
        self._store.set(session.session_id, user)
        logger.info("Panel user %s signed in", user.id)
        return Outcome("dashboard", Flash.success(LOGGED_IN), session=session)

    def logout(self, session_id: Optional[str]) -> Outcome:
        try:
            self._store.destroy(session_id)
        except Exception:
            logger.exception("Failed to destroy session during logout")
            return Outcome("dashboard")
        return Outcome("home", clear_session=True)

    async def dashboard(self, session: Session) -> List[ServerLink]:
        result = await self._panel.list_servers_for_user(session.user.id)
        if not result.success:
            return []
        return [
            ServerLink(server=server, panel_url=f"{self._panel.base_url}/server/{server.uuid}")
            for server in result.value
        ]


__all__ = [
    "AccountFlow",
    "Flash",
    "LOGIN_REQUIRED",
    "LOGGED_IN",
    "NO_ACCOUNT",
    "Outcome",
    "REGISTERED",
    "ServerLink",
    "require_session",
]
