"""Settings error definitions."""

from __future__ import annotations


class SettingsError(RuntimeError):
    """Raised when settings values are invalid."""
