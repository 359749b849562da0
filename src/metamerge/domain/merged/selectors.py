"""Strategies picking one view when a lookup matches several."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .base import MergedView


@runtime_checkable
class MergedSelector(Protocol):
    def is_best_candidate(self, view: MergedView) -> bool:
        """Whether ``view`` cannot be beaten, so the search may stop."""
        ...

    def select(self, existing: MergedView, candidate: MergedView) -> MergedView: ...


@dataclass(frozen=True, slots=True)
class Nearest:
    """Lowest depth wins; the earlier view wins ties."""

    def is_best_candidate(self, view: MergedView) -> bool:
        return view.depth == 0

    def select(self, existing: MergedView, candidate: MergedView) -> MergedView:
        return candidate if candidate.depth < existing.depth else existing


@dataclass(frozen=True, slots=True)
class FirstDirectlyDeclared:
    """The first directly declared view wins, otherwise the earliest one."""

    def is_best_candidate(self, view: MergedView) -> bool:
        return view.depth == 0

    def select(self, existing: MergedView, candidate: MergedView) -> MergedView:
        if existing.depth > 0 and candidate.depth == 0:
            return candidate
        return existing


NEAREST = Nearest()
FIRST_DIRECTLY_DECLARED = FirstDirectlyDeclared()


def nearest() -> MergedSelector:
    return NEAREST


def first_directly_declared() -> MergedSelector:
    return FIRST_DIRECTLY_DECLARED


__all__ = [
    "FIRST_DIRECTLY_DECLARED",
    "NEAREST",
    "FirstDirectlyDeclared",
    "MergedSelector",
    "Nearest",
    "first_directly_declared",
    "nearest",
]
