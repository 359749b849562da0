from __future__ import annotations

import pytest

from metamerge.adapters.filters import NO_PRUNING, PrefixPruneFilter, platform_filter
from metamerge.config import EngineConfig


def test_prefix_filter_matches_whole_segments() -> None:
    prune = PrefixPruneFilter.of(["com.example.internal"])

    assert prune.should_skip("com.example.internal")
    assert prune.should_skip("com.example.internal.Hidden")
    assert not prune.should_skip("com.example.internals.Visible")
    assert not prune.should_skip("com.example.Visible")


def test_prefixes_are_cleaned_and_comparable() -> None:
    prune = PrefixPruneFilter.of([" typing. ", "builtins", "", "typing"])

    assert prune.prefixes == ("builtins", "typing")
    assert prune == PrefixPruneFilter.of(["typing", "builtins"])
    assert hash(prune) == hash(PrefixPruneFilter.of(["typing", "builtins"]))


def test_no_pruning_keeps_everything() -> None:
    assert not NO_PRUNING.should_skip("metamerge.alias_for")
    assert str(NO_PRUNING) == "Packages prune filter: (none)"


def test_platform_filter_uses_engine_config() -> None:
    prune = platform_filter(EngineConfig(pruned_prefixes=("com.vendor",)))

    assert prune.should_skip("com.vendor.Thing")
    assert not prune.should_skip("metamerge.repeatable")


def test_platform_filter_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("METAMERGE_PRUNED_PREFIXES", "com.vendor, org.legacy")

    prune = platform_filter()

    assert prune.prefixes == ("com.vendor", "org.legacy")
