"""Async client for the game panel's application API."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, List, Optional, TypeVar, Union

import httpx

from .config import Settings
from .models import PanelServer, PanelUser

logger = logging.getLogger("auranode.panel")

PANEL_ACCEPT_HEADER = "Application/vnd.pterodactyl.v1+json"

CREATE_USER_ERROR = "An unknown error occurred creating the user."
USER_NOT_FOUND = "User not found."
VERIFY_USER_ERROR = "Could not connect to the panel to verify user."
FETCH_SERVERS_ERROR = "Could not fetch server list."

T = TypeVar("T")


class FailureReason(str, Enum):
    """Why a panel call did not succeed."""

    REJECTED = "rejected"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class PanelSuccess(Generic[T]):
    value: T
    success: bool = field(default=True, init=False)


@dataclass(frozen=True)
class PanelFailure:
    """A failed panel call. ``cause`` is for logs only and never reaches a page."""

    message: str
    reason: FailureReason
    cause: Optional[BaseException] = field(default=None, compare=False, repr=False)
    success: bool = field(default=False, init=False)


PanelResult = Union[PanelSuccess[T], PanelFailure]


def _normalize_base_url(base_url: str) -> str:
    cleaned = (base_url or "").strip()
    if not cleaned:
        raise ValueError("Panel base URL must not be empty")
    return cleaned.rstrip("/")


def _extract_error_detail(response: httpx.Response, default: str) -> str:
    """Return the first ``errors[].detail`` from a panel error body."""
    try:
        payload = response.json()
    except ValueError:
        return default
    if isinstance(payload, dict):
        errors = payload.get("errors")
        if isinstance(errors, list) and errors:
            first = errors[0]
            if isinstance(first, dict):
                detail = first.get("detail")
                if isinstance(detail, str) and detail.strip():
                    return detail.strip()
    return default


class PanelClient:
    """Translate account intents into panel REST calls.

    Every operation returns a :data:`PanelResult`; transport errors, error
    statuses and malformed bodies are converted into :class:`PanelFailure`
    instead of being raised.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = _normalize_base_url(base_url)
        api_key = (api_key or "").strip()
        if not api_key:
            raise ValueError("Panel API key must not be empty")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Accept": PANEL_ACCEPT_HEADER,
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "PanelClient":
        kwargs.setdefault("timeout", settings.panel_timeout)
        return cls(settings.panel_url, settings.panel_api_key, **kwargs)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        await self._client.aclose()

    async def create_user(
        self,
        email: str,
        username: str,
        first_name: str,
        last_name: str,
        password: str,
    ) -> PanelResult[PanelUser]:
        payload = {
            "email": email,
            "username": username,
            "first_name": first_name,
            "last_name": last_name,
            "password": password,
        }
        try:
            response = await self._client.post("/api/application/users", json=payload)
            response.raise_for_status()
            user = PanelUser.from_resource(response.json())
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            if status_code >= 500:
                logger.warning(
                    "Panel returned %s while creating user %s", status_code, username, exc_info=exc
                )
                return PanelFailure(CREATE_USER_ERROR, FailureReason.UNAVAILABLE, cause=exc)
            message = _extract_error_detail(exc.response, CREATE_USER_ERROR)
            logger.info("Panel rejected new user %s: %s", username, message)
            return PanelFailure(message, FailureReason.REJECTED, cause=exc)
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
            logger.warning("Failed to create panel user %s", username, exc_info=exc)
            return PanelFailure(CREATE_USER_ERROR, FailureReason.UNAVAILABLE, cause=exc)

        logger.info("Created panel user %s (id %s)", user.username, user.id)
        return PanelSuccess(user)

    async def find_user_by_email(self, email: str) -> PanelResult[PanelUser]:
        try:
            response = await self._client.get(
                "/api/application/users",
                params={"filter[email]": email},
            )
            response.raise_for_status()
            matches = response.json()["data"]
            if not isinstance(matches, list):
                raise TypeError("user collection is not a list")
            user = PanelUser.from_resource(matches[0]) if matches else None
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
            logger.warning("Panel user lookup failed", exc_info=exc)
            return PanelFailure(VERIFY_USER_ERROR, FailureReason.UNAVAILABLE, cause=exc)

        if user is None:
            logger.info("No panel user matches the submitted email")
            return PanelFailure(USER_NOT_FOUND, FailureReason.NOT_FOUND)
        return PanelSuccess(user)

    async def list_servers_for_user(self, user_id: int) -> PanelResult[List[PanelServer]]:
        try:
            response = await self._client.get(
                f"/api/application/users/{int(user_id)}",
                params={"include": "servers"},
            )
            response.raise_for_status()
            related = response.json()["attributes"]["relationships"]["servers"]["data"]
            servers = [PanelServer.from_resource(item) for item in related]
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
            logger.warning("Error fetching servers for user %s", user_id, exc_info=exc)
            return PanelFailure(FETCH_SERVERS_ERROR, FailureReason.UNAVAILABLE, cause=exc)
        return PanelSuccess(servers)


__all__ = [
    "FailureReason",
    "PanelClient",
    "PanelFailure",
    "PanelResult",
    "PanelSuccess",
]
