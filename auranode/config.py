"""Runtime configuration for the AuraNode web front end."""
from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_PORT = 3000
DEFAULT_PANEL_TIMEOUT = 10.0
DEFAULT_SESSION_TTL_HOURS = 8


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, read once at start-up."""

    panel_url: str
    panel_api_key: str
    session_secret: str
    port: int = DEFAULT_PORT
    panel_timeout: float = DEFAULT_PANEL_TIMEOUT
    session_ttl: timedelta = timedelta(hours=DEFAULT_SESSION_TTL_HOURS)
    secure_cookies: bool = False
    plans_file: Optional[Path] = None


def _env_flag(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _require(env: Mapping[str, str], name: str) -> str:
    value = (env.get(name) or "").strip()
    if not value:
        raise RuntimeError(f"{name} must be configured to run the AuraNode web front end")
    return value


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build :class:`Settings` from environment variables."""
    if env is None:
        env = os.environ

    try:
        port = int(env.get("PORT") or DEFAULT_PORT)
        timeout = float(env.get("PANEL_TIMEOUT") or DEFAULT_PANEL_TIMEOUT)
        ttl_hours = float(env.get("SESSION_TTL_HOURS") or DEFAULT_SESSION_TTL_HOURS)
    except ValueError as exc:
        raise RuntimeError(f"Invalid numeric configuration value: {exc}") from exc

    plans_file = env.get("AURANODE_PLANS_FILE")

    return Settings(
        panel_url=_require(env, "PTERO_URL"),
        panel_api_key=_require(env, "PTERO_API_KEY"),
        session_secret=_require(env, "SESSION_SECRET"),
        port=port,
        panel_timeout=timeout,
        session_ttl=timedelta(hours=ttl_hours),
        secure_cookies=_env_flag(env.get("SESSION_SECURE")),
        plans_file=Path(plans_file).expanduser().resolve(strict=False) if plans_file else None,
    )


__all__ = ["DEFAULT_PORT", "Settings", "load_settings"]
