from __future__ import annotations

import logging

import pytest

from metamerge.common import configure_logging
from metamerge.config import (
    DEFAULT_PRUNED_PREFIXES,
    SettingsError,
    get_engine_config,
    get_logging_config,
)
from metamerge.domain.model import CONVENTION_RESTRICTED_NAMES


def test_engine_config_defaults() -> None:
    config = get_engine_config()

    assert config.pruned_prefixes == DEFAULT_PRUNED_PREFIXES
    assert config.convention_restricted == CONVENTION_RESTRICTED_NAMES


def test_engine_config_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("METAMERGE_PRUNED_PREFIXES", "com.vendor,  org.legacy ,")
    monkeypatch.setenv("METAMERGE_CONVENTION_RESTRICTED", "value,id")

    config = get_engine_config()

    assert config.pruned_prefixes == ("com.vendor", "org.legacy")
    assert config.convention_restricted == frozenset({"value", "id"})


def test_logging_config_parses_level_names(monkeypatch: pytest.MonkeyPatch) -> None:
    assert get_logging_config().level == logging.INFO

    monkeypatch.setenv("METAMERGE_LOG_LEVEL", "debug")
    assert get_logging_config().level == logging.DEBUG


def test_logging_config_rejects_unknown_levels(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("METAMERGE_LOG_LEVEL", "chatty")

    with pytest.raises(SettingsError, match="Unknown log level: chatty"):
        get_logging_config()


def test_configure_logging_sets_root_level() -> None:
    root = logging.getLogger()
    previous_level = root.level
    previous_handlers = list(root.handlers)
    try:
        configure_logging(level=logging.WARNING, force=True)
        assert root.level == logging.WARNING
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
        for handler in previous_handlers:
            root.addHandler(handler)
        root.setLevel(previous_level)
