"""Logging settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .env import optional_env_var
from .errors import SettingsError


@dataclass(frozen=True)
class LoggingConfig:
    level: int = logging.INFO


def get_logging_config() -> LoggingConfig:
    name = optional_env_var("METAMERGE_LOG_LEVEL")
    if name is None:
        return LoggingConfig()
    level = logging.getLevelNamesMapping().get(name.upper())
    if level is None:
        raise SettingsError(f"Unknown log level: {name}")
    return LoggingConfig(level=level)
