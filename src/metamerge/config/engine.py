"""Merge engine settings."""

from __future__ import annotations

from dataclasses import dataclass

from metamerge.domain.model import CONVENTION_RESTRICTED_NAMES

from .env import optional_env_var, split_env_list

DEFAULT_PRUNED_PREFIXES = ("builtins", "typing", "metamerge")


@dataclass(frozen=True)
class EngineConfig:
    """Declaration types kept out of graphs and names never convention-mapped."""

    pruned_prefixes: tuple[str, ...] = DEFAULT_PRUNED_PREFIXES
    convention_restricted: frozenset[str] = CONVENTION_RESTRICTED_NAMES


def get_engine_config() -> EngineConfig:
    prefixes = optional_env_var("METAMERGE_PRUNED_PREFIXES")
    restricted = optional_env_var("METAMERGE_CONVENTION_RESTRICTED")
    return EngineConfig(
        pruned_prefixes=split_env_list(prefixes) if prefixes else DEFAULT_PRUNED_PREFIXES,
        convention_restricted=(
            frozenset(split_env_list(restricted)) if restricted else CONVENTION_RESTRICTED_NAMES
        ),
    )
