"""Graph caching and the resolution context views are built against."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from metamerge.domain.model import CONVENTION_RESTRICTED_NAMES

from .builder import MappingGraphBuilder

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable

    from metamerge.domain.model import DeclarationType
    from metamerge.domain.ports import ContainerExpander, PruneFilter, TypeResolver

    from .node import MappingGraph, MappingNode

log = getLogger(__name__)


class GraphCache:
    """Published mapping graphs keyed by resolution context, filter and root type.

    Two callers racing on the same key may both build; the first graph published
    wins and the other is discarded. Only frozen graphs are ever published.
    """

    def __init__(self) -> None:
        self._graphs: dict[Hashable, MappingGraph] = {}

    def get_or_build(self, key: Hashable, build: Callable[[], MappingGraph]) -> MappingGraph:
        graph = self._graphs.get(key)
        if graph is not None:
            return graph
        built = build()
        published = self._graphs.setdefault(key, built)
        if published is not built:
            log.debug("Discarding duplicate mapping graph for %r", key)
        return published

    def clear(self) -> None:
        self._graphs.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._graphs

    def __len__(self) -> int:
        return len(self._graphs)


@dataclass(frozen=True, slots=True)
class KeepRoot:
    """Context filter that never skips ``root``.

    Used for graphs whose root type the context itself would prune; everything
    below the root is still filtered.
    """

    prune: PruneFilter
    root: str

    def should_skip(self, type_id: str) -> bool:
        return type_id != self.root and self.prune.should_skip(type_id)


@dataclass(frozen=True, slots=True)
class MappingContext:
    """Everything needed to build, cache and look up mapping graphs."""

    resolver: TypeResolver
    containers: ContainerExpander
    prune: PruneFilter
    convention_restricted: frozenset[str] = CONVENTION_RESTRICTED_NAMES
    cache: GraphCache = field(default_factory=GraphCache, compare=False, hash=False)

    def resolve(self, type_id: str) -> DeclarationType:
        return self.resolver.resolve(type_id)

    def graph_for(self, declaration: DeclarationType | str) -> MappingGraph:
        root = self.resolve(declaration) if isinstance(declaration, str) else declaration
        return self._graph(root, self.prune)

    def root_node(self, declaration: DeclarationType | str) -> MappingNode:
        """Root node for a declaration, even when the context's filter prunes it."""
        root = self.resolve(declaration) if isinstance(declaration, str) else declaration
        graph = self._graph(root, self.prune)
        if graph.root is None:
            graph = self._graph(root, KeepRoot(self.prune, root.type_id))
        node = graph.root
        if node is None:
            raise RuntimeError(f"Mapping graph for [{root.type_id}] has no root")
        return node

    def _graph(self, root: DeclarationType, prune: PruneFilter) -> MappingGraph:
        key = (self.resolver, self.containers, prune, root.type_id)
        return self.cache.get_or_build(
            key,
            lambda: MappingGraphBuilder(self.resolver, self.containers, prune).build(root),
        )


__all__ = ["GraphCache", "KeepRoot", "MappingContext"]
