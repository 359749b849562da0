"""Environment variable loaders for settings."""

from __future__ import annotations

import os


def optional_env_var(name: str) -> str | None:
    """Return the stripped variable, or None when it is unset or blank."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def split_env_list(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())
