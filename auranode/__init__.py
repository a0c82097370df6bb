"""AuraNode game hosting website and customer account area."""

from __future__ import annotations

from typing import Any

from .config import Settings, load_settings


def create_app(*args: Any, **kwargs: Any):
    """Factory function that returns the web application."""

    from .web import create_app as _create_app

    return _create_app(*args, **kwargs)


__all__ = [
    "Settings",
    "load_settings",
    "create_app",
]
