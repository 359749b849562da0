"""Mapping graph nodes, attribute references and mirror groups."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from metamerge.domain.errors import ConfigurationError
from metamerge.domain.model import LiteralPayload, same_value

from .alias import describe

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping, Sequence

    from metamerge.domain.model import AttributeSlot, DeclarationType


@dataclass(frozen=True, slots=True, eq=False)
class Reference:
    """Pointer to one attribute slot in one mapping node.

    References compare by declaration type id and attribute name.
    """

    node: MappingNode
    slot: AttributeSlot

    @property
    def type_id(self) -> str:
        return self.node.type_id

    @property
    def name(self) -> str:
        return self.slot.name

    def is_same_declaration(self, other: Reference | None) -> bool:
        return other is not None and other.type_id == self.type_id

    def capitalized(self) -> str:
        text = str(self)
        return text[:1].upper() + text[1:]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Reference):
            return NotImplemented
        return self.type_id == other.type_id and self.name == other.name

    def __hash__(self) -> int:
        return hash((self.type_id, self.name))

    def __str__(self) -> str:
        return describe(self.type_id, self.name)


class MirrorGroup:
    """Attributes of one node that must always carry the same effective value."""

    __slots__ = ("_references", "ultimate_target")

    def __init__(self, references: Sequence[Reference], ultimate_target: Reference) -> None:
        unique = tuple(dict.fromkeys(references))
        if len(unique) < 2:
            raise ValueError("Mirror groups must contain more than one reference")
        source = unique[0]
        for mirror in unique[1:]:
            if source.slot.default is None or mirror.slot.default is None:
                raise ConfigurationError(
                    f"Misconfigured aliases: {mirror} and {source} must declare "
                    "default values."
                )
            if not same_value(source.slot.default, mirror.slot.default):
                raise ConfigurationError(
                    f"Misconfigured aliases: {mirror} and {source} must declare the "
                    "same default value."
                )
        self._references = unique
        self.ultimate_target = ultimate_target

    @property
    def references(self) -> tuple[Reference, ...]:
        return self._references

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(reference.name for reference in self._references)

    @property
    def node(self) -> MappingNode:
        return self._references[0].node

    def __iter__(self) -> Iterator[Reference]:
        return iter(self._references)

    def __len__(self) -> int:
        return len(self._references)

    def __contains__(self, reference: object) -> bool:
        return reference in self._references

    def __repr__(self) -> str:
        return f"MirrorGroup([{', '.join(str(ref) for ref in self._references)}])"


@dataclass(slots=True, eq=False)
class MappingNode:
    """One occurrence of a declaration type within a mapping graph.

    ``payload`` holds the literal attributes captured where this node was found as
    a meta-declaration of its parent (empty at the root). Alias and mirror state is
    only writable until the owning graph is frozen.
    """

    declaration: DeclarationType
    parent: MappingNode | None = None
    payload: LiteralPayload = field(default_factory=lambda: LiteralPayload.EMPTY)
    index: int = 0
    depth: int = field(init=False)
    _aliases: dict[str, Reference] = field(default_factory=dict[str, Reference], repr=False)
    _mirror_groups: list[MirrorGroup] = field(default_factory=list[MirrorGroup], repr=False)
    _mirrors_by_name: dict[str, MirrorGroup] = field(
        default_factory=dict[str, MirrorGroup], repr=False
    )
    _frozen: bool = field(default=False, repr=False)

    def __post_init__(self) -> None:
        self.depth = 0 if self.parent is None else self.parent.depth + 1

    @property
    def type_id(self) -> str:
        return self.declaration.type_id

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def frozen(self) -> bool:
        return self._frozen

    def ancestors(self) -> Iterator[MappingNode]:
        """Yield the parent chain, nearest first."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def is_on_path(self, type_id: str) -> bool:
        """Whether ``type_id`` appears on the root-to-this-node path (this node included)."""
        if self.type_id == type_id:
            return True
        return any(ancestor.type_id == type_id for ancestor in self.ancestors())

    def is_descendant_of(self, other: MappingNode) -> bool:
        return other is self or any(ancestor is other for ancestor in self.ancestors())

    def reference(self, name: str) -> Reference:
        return Reference(self, self.declaration.require_slot(name))

    # Aliases: target attribute on this node -> the source attribute feeding it.

    @property
    def aliases(self) -> Mapping[str, Reference]:
        return MappingProxyType(self._aliases)

    def alias_for(self, name: str) -> Reference | None:
        return self._aliases.get(name)

    def add_alias(self, name: str, source: Reference) -> None:
        self._ensure_mutable()
        self.declaration.require_slot(name)
        self._aliases.setdefault(name, source)

    # Mirror groups: owned by the ultimate target's node, indexed on the member node.

    @property
    def mirror_groups(self) -> tuple[MirrorGroup, ...]:
        return tuple(self._mirror_groups)

    @property
    def has_mirrors(self) -> bool:
        return bool(self._mirrors_by_name)

    def mirror_group_for(self, name: str) -> MirrorGroup | None:
        return self._mirrors_by_name.get(name)

    def attach_mirror_group(self, group: MirrorGroup) -> None:
        self._ensure_mutable()
        self._mirror_groups.append(group)

    def index_mirror_group(self, group: MirrorGroup) -> None:
        self._ensure_mutable()
        for reference in group:
            if reference.node is not self:
                raise ValueError(f"Invalid mirror group reference: {reference}")
            aliased = self._aliases.get(reference.name)
            if aliased is not None and aliased.node is self:
                del self._aliases[reference.name]
            self._mirrors_by_name[reference.name] = group

    def freeze(self) -> None:
        self._frozen = True

    def _ensure_mutable(self) -> None:
        if self._frozen:
            raise RuntimeError(f"Mapping node for [{self.type_id}] is frozen")

    def __repr__(self) -> str:
        return f"MappingNode({self.type_id!r}, depth={self.depth}, index={self.index})"


@dataclass(frozen=True, slots=True)
class MappingGraph:
    """All nodes reachable from one root declaration type, in discovery order."""

    root_type_id: str
    nodes: tuple[MappingNode, ...] = ()
    _first_by_type: dict[str, MappingNode] = field(
        init=False, repr=False, compare=False, hash=False
    )

    def __post_init__(self) -> None:
        first_by_type: dict[str, MappingNode] = {}
        for node in self.nodes:
            first_by_type.setdefault(node.type_id, node)
        object.__setattr__(self, "_first_by_type", first_by_type)

    @property
    def root(self) -> MappingNode | None:
        return self.nodes[0] if self.nodes else None

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def get(self, type_id: str) -> MappingNode | None:
        return self._first_by_type.get(type_id)

    def contains(self, type_id: str) -> bool:
        return type_id in self._first_by_type

    def __iter__(self) -> Iterator[MappingNode]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)
