"""Registration input checks that run before any panel call."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30

_USERNAME_CHARSET = re.compile(r"[A-Za-z0-9_.-]+")
_ALPHANUMERIC = re.compile(r"[A-Za-z0-9]")

MISSING_FIELDS = "Please fill in all fields."
USERNAME_LENGTH = (
    f"Username must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters."
)
USERNAME_CHARSET = (
    "Username contains invalid characters. "
    "Use only letters, numbers, dashes, underscores, and periods."
)
USERNAME_EDGES = "Username must start and end with a letter or number."


@dataclass(frozen=True)
class RegistrationInput:
    email: str
    username: str
    first_name: str
    last_name: str
    password: str = ""

    def __repr__(self) -> str:
        return (
            f"RegistrationInput(email={self.email!r}, username={self.username!r}, "
            f"first_name={self.first_name!r}, last_name={self.last_name!r}, password='***')"
        )


def validate_registration(data: RegistrationInput) -> Optional[str]:
    """Return the first failing rule's message, or ``None`` when ``data`` is acceptable."""

    required = (data.first_name, data.last_name, data.username, data.email, data.password)
    if not all(required):
        return MISSING_FIELDS

    username = data.username
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        return USERNAME_LENGTH
    if not _USERNAME_CHARSET.fullmatch(username):
        return USERNAME_CHARSET
    if not (_ALPHANUMERIC.fullmatch(username[0]) and _ALPHANUMERIC.fullmatch(username[-1])):
        return USERNAME_EDGES
    return None


__all__ = [
    "MISSING_FIELDS",
    "RegistrationInput",
    "USERNAME_CHARSET",
    "USERNAME_EDGES",
    "USERNAME_LENGTH",
    "validate_registration",
]
