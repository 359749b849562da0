"""Application settings helpers."""

from __future__ import annotations

from .engine import DEFAULT_PRUNED_PREFIXES, EngineConfig, get_engine_config
from .errors import SettingsError
from .logging import LoggingConfig, get_logging_config

__all__ = [
    "DEFAULT_PRUNED_PREFIXES",
    "EngineConfig",
    "LoggingConfig",
    "SettingsError",
    "get_engine_config",
    "get_logging_config",
]
