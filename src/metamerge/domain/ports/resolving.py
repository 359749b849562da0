"""Ports the mapping graph builder consumes to discover declaration types."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from metamerge.domain.model import DeclarationType, LiteralPayload, MetaDeclaration


@runtime_checkable
class TypeResolver(Protocol):
    """Resolve declaration type identifiers into descriptors.

    Implementations raise ``UnresolvableTypeError`` for identifiers they cannot
    resolve so the builder can prune the branch instead of aborting.
    """

    def resolve(self, type_id: str) -> DeclarationType: ...


@runtime_checkable
class PruneFilter(Protocol):
    """Decide which declaration types stay out of mapping graphs.

    Filters take part in graph cache keys and must therefore be hashable.
    """

    def should_skip(self, type_id: str) -> bool: ...


@runtime_checkable
class ContainerExpander(Protocol):
    """Expand one declared meta-declaration into its effective items.

    A repeated-declaration container expands into one item per contained
    declaration; anything else expands into itself. Expanders take part in
    graph cache keys and must therefore be hashable.
    """

    def expand(
        self,
        item: MetaDeclaration,
        resolver: TypeResolver,
    ) -> Iterable[tuple[DeclarationType, LiteralPayload]]: ...


__all__ = ["ContainerExpander", "PruneFilter", "TypeResolver"]
