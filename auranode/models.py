"""Panel records as seen by the web front end."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping


@dataclass(frozen=True)
class PanelUser:
    """A user account owned by the panel."""

    id: int
    email: str
    username: str
    first_name: str = ""
    last_name: str = ""

    @staticmethod
    def from_resource(resource: Mapping[str, Any]) -> "PanelUser":
        """Build a user from a panel ``{"object": "user", "attributes": {...}}`` resource."""
        attributes = resource["attributes"]
        return PanelUser(
            id=int(attributes["id"]),
            email=str(attributes.get("email") or ""),
            username=str(attributes.get("username") or ""),
            first_name=str(attributes.get("first_name") or ""),
            last_name=str(attributes.get("last_name") or ""),
        )

    @property
    def display_name(self) -> str:
        name = f"{self.first_name} {self.last_name}".strip()
        return name or self.username


@dataclass(frozen=True)
class PanelServer:
    """A game server owned by a panel user. Read-only here."""

    uuid: str
    identifier: str = ""
    name: str = ""
    description: str = ""
    suspended: bool = False
    limits: Dict[str, Any] = field(default_factory=dict, compare=False)

    @staticmethod
    def from_resource(resource: Mapping[str, Any]) -> "PanelServer":
        attributes = resource["attributes"]
        return PanelServer(
            uuid=str(attributes["uuid"]),
            identifier=str(attributes.get("identifier") or ""),
            name=str(attributes.get("name") or ""),
            description=str(attributes.get("description") or ""),
            suspended=bool(attributes.get("suspended", False)),
            limits=dict(attributes.get("limits") or {}),
        )


__all__ = ["PanelServer", "PanelUser"]
