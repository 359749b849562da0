"""Prune filters keeping platform declaration types out of mapping graphs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from metamerge.config import get_engine_config

if TYPE_CHECKING:
    from collections.abc import Iterable

    from metamerge.config import EngineConfig


@dataclass(frozen=True, slots=True)
class PrefixPruneFilter:
    """Skip type ids equal to a prefix or nested below it (``prefix.``)."""

    prefixes: tuple[str, ...]

    @classmethod
    def of(cls, prefixes: Iterable[str]) -> PrefixPruneFilter:
        cleaned = (prefix.strip().rstrip(".") for prefix in prefixes)
        return cls(tuple(sorted({prefix for prefix in cleaned if prefix})))

    def should_skip(self, type_id: str) -> bool:
        return any(
            type_id == prefix or type_id.startswith(f"{prefix}.") for prefix in self.prefixes
        )

    def __str__(self) -> str:
        return f"Packages prune filter: {', '.join(self.prefixes) or '(none)'}"


NO_PRUNING = PrefixPruneFilter(())


def platform_filter(config: EngineConfig | None = None) -> PrefixPruneFilter:
    """Filter for the configured platform prefixes."""
    config = config or get_engine_config()
    return PrefixPruneFilter.of(config.pruned_prefixes)


__all__ = ["NO_PRUNING", "PrefixPruneFilter", "platform_filter"]
