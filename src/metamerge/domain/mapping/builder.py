"""Mapping graph construction.

Building runs in phases: breadth-first discovery of meta-declarations, alias
linking, mirror grouping and finally freezing every node. Discovery problems prune
the affected branch; alias and mirror problems raise ``ConfigurationError`` and
abort the build for the whole root type.
"""

from __future__ import annotations

from collections import deque
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from metamerge.domain.errors import ConfigurationError, UnresolvableTypeError

from .alias import AliasDescriptor
from .node import MappingGraph, MappingNode, MirrorGroup, Reference

if TYPE_CHECKING:
    from metamerge.domain.model import DeclarationType, MetaDeclaration
    from metamerge.domain.ports import ContainerExpander, PruneFilter, TypeResolver

log = getLogger(__name__)


class BuildPhase(StrEnum):
    DISCOVERY = "discovery"
    ALIAS_LINKING = "alias_linking"
    MIRROR_GROUPING = "mirror_grouping"
    FROZEN = "frozen"


class MappingGraphBuilder:
    """Build the mapping graph for one root declaration type."""

    def __init__(
        self,
        resolver: TypeResolver,
        containers: ContainerExpander,
        prune: PruneFilter,
    ) -> None:
        self._resolver = resolver
        self._containers = containers
        self._prune = prune
        self.phase = BuildPhase.DISCOVERY

    def build(self, root: DeclarationType) -> MappingGraph:
        if self._prune.should_skip(root.type_id):
            log.debug("Root declaration [%s] is pruned; graph is empty", root.type_id)
            self.phase = BuildPhase.FROZEN
            return MappingGraph(root.type_id)

        self.phase = BuildPhase.DISCOVERY
        nodes = self._discover(root)

        self.phase = BuildPhase.ALIAS_LINKING
        pending = [(node, self._link_aliases(node, nodes)) for node in nodes]

        self.phase = BuildPhase.MIRROR_GROUPING
        for node, converging in pending:
            _group_mirrors(node, converging)

        for node in nodes:
            node.freeze()
        self.phase = BuildPhase.FROZEN
        log.debug("Built mapping graph for [%s] with %d node(s)", root.type_id, len(nodes))
        return MappingGraph(root.type_id, tuple(nodes))

    # Discovery

    def _discover(self, root: DeclarationType) -> list[MappingNode]:
        nodes: list[MappingNode] = []
        queue: deque[MappingNode] = deque([MappingNode(root)])
        while queue:
            node = queue.popleft()
            node.index = len(nodes)
            nodes.append(node)
            for item in node.declaration.meta:
                self._enqueue_meta(queue, node, item)
        return nodes

    def _enqueue_meta(
        self,
        queue: deque[MappingNode],
        parent: MappingNode,
        item: MetaDeclaration,
    ) -> None:
        if self._prune.should_skip(item.type_id):
            log.debug("Pruned meta-declaration [%s] on [%s]", item.type_id, parent.type_id)
            return
        try:
            expanded = list(self._containers.expand(item, self._resolver))
        except UnresolvableTypeError as exc:
            log.debug("Ignoring meta-declaration on [%s]: %s", parent.type_id, exc)
            return
        for declaration, payload in expanded:
            type_id = declaration.type_id
            if self._prune.should_skip(type_id):
                log.debug("Pruned meta-declaration [%s] on [%s]", type_id, parent.type_id)
                continue
            if parent.is_on_path(type_id):
                log.debug("Skipping [%s] already mapped on path to [%s]", type_id, parent.type_id)
                continue
            queue.append(MappingNode(declaration, parent=parent, payload=payload))

    # Alias linking

    def _link_aliases(
        self,
        node: MappingNode,
        nodes: list[MappingNode],
    ) -> dict[Reference, list[Reference]]:
        converging: dict[Reference, list[Reference]] = {}
        for slot in node.declaration:
            directive = slot.alias_directive
            if directive is None:
                continue
            source = Reference(node, slot)
            descriptor = AliasDescriptor.from_directive(node.type_id, slot.name, directive)
            target = _resolve_target(source, descriptor, nodes)
            _verify_alias(source, target)
            target.node.add_alias(target.name, source)
            ultimate = _ultimate_target(target, nodes)
            converging.setdefault(ultimate, []).append(source)
        return converging


def _group_mirrors(node: MappingNode, converging: dict[Reference, list[Reference]]) -> None:
    for ultimate, sources in converging.items():
        if len(sources) < 2:
            continue
        group = MirrorGroup(sources, ultimate)
        node.index_mirror_group(group)
        ultimate.node.attach_mirror_group(group)


def _find_target_node(
    source: MappingNode,
    type_id: str,
    nodes: list[MappingNode],
) -> MappingNode | None:
    # Nodes are in breadth-first order, so the first hit is the nearest one.
    for candidate in nodes[source.index :]:
        if candidate.type_id == type_id and candidate.is_descendant_of(source):
            return candidate
    return None


def _resolve_target(
    source: Reference,
    descriptor: AliasDescriptor,
    nodes: list[MappingNode],
) -> Reference:
    target_node = _find_target_node(source.node, descriptor.declaration, nodes)
    if target_node is None:
        raise ConfigurationError(
            f"Alias directive on {source} declares an alias for {descriptor} "
            "which is not meta-present."
        )
    target_slot = target_node.declaration.slot(descriptor.attribute)
    if target_slot is None:
        if descriptor.declaration == source.type_id:
            raise ConfigurationError(
                f"Alias directive on {source} declares an alias for "
                f"'{descriptor.attribute}' which is not present."
            )
        raise ConfigurationError(
            f"{source.capitalized()} is declared as an alias for nonexistent {descriptor}."
        )
    return Reference(target_node, target_slot)


def _verify_alias(source: Reference, target: Reference) -> None:
    if source.is_same_declaration(target):
        directive = target.slot.alias_directive
        if directive is None:
            raise ConfigurationError(
                f"{target.capitalized()} must be declared as an alias for '{source.name}'."
            )
        mirror = AliasDescriptor.from_directive(target.type_id, target.name, directive)
        if not mirror.points_at(source.type_id, source.name):
            raise ConfigurationError(
                f"{target.capitalized()} must be declared as an alias for "
                f"'{source.name}', not {mirror}."
            )
    if not target.slot.shape.accepts_alias_from(source.slot.shape):
        raise ConfigurationError(
            f"Misconfigured aliases: {source} and {target} must declare the same shape "
            f"(got '{source.slot.shape}' and '{target.slot.shape}')."
        )


def _ultimate_target(target: Reference, nodes: list[MappingNode]) -> Reference:
    current = target
    while True:
        directive = current.slot.alias_directive
        if directive is None:
            return current
        descriptor = AliasDescriptor.from_directive(current.type_id, current.name, directive)
        following = _resolve_target(current, descriptor, nodes)
        if following.is_same_declaration(current):
            return current if current.name < following.name else following
        current = following


__all__ = ["BuildPhase", "MappingGraphBuilder"]
