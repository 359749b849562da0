"""Views bound to one mapping node and one literal payload."""

from __future__ import annotations

from typing import TYPE_CHECKING

from metamerge.domain.model import LiteralPayload, ValueKind, record_items

from .base import MergedView
from .resolver import resolve_attribute
from .synthesized import DEFAULT_RECORDS, SynthesizedRecord

if TYPE_CHECKING:
    from collections.abc import Hashable, Mapping

    from metamerge.domain.mapping import MappingContext, MappingNode, Reference
    from metamerge.domain.model import AttributeSlot, DeclarationType, RawValue

    from .base import AttributePredicate
    from .synthesized import RecordFactory


class TypeMappedView(MergedView):
    """A present merged view.

    The payload is the instantiation payload for a root node and the captured
    meta-declaration payload for any other node; parent views share the root's
    instantiation payload.
    """

    __slots__ = (
        "_aggregate_index",
        "_attribute_filter",
        "_context",
        "_mirror_choices",
        "_node",
        "_non_merged",
        "_parent",
        "_payload",
        "_records",
        "_source",
    )

    def __init__(
        self,
        node: MappingNode,
        payload: LiteralPayload,
        *,
        context: MappingContext,
        parent: TypeMappedView | None = None,
        source: object | None = None,
        aggregate_index: int = 0,
        non_merged: bool = False,
        attribute_filter: AttributePredicate | None = None,
        records: RecordFactory = DEFAULT_RECORDS,
        mirror_choices: dict[Hashable, Reference | None] | None = None,
    ) -> None:
        super().__init__()
        if (parent is None) != node.is_root:
            raise ValueError(f"View parent does not match mapping node [{node.type_id}]")
        self._node = node
        self._payload = payload
        self._context = context
        self._parent = parent
        self._source = source
        self._aggregate_index = aggregate_index
        self._non_merged = non_merged
        self._attribute_filter = attribute_filter
        self._records = records
        self._mirror_choices = {} if mirror_choices is None else mirror_choices

    # MergedView

    @property
    def type_id(self) -> str:
        return self._node.type_id

    @property
    def is_present(self) -> bool:
        return True

    @property
    def depth(self) -> int:
        return self._node.depth

    @property
    def aggregate_index(self) -> int:
        return self._aggregate_index

    @property
    def source(self) -> object | None:
        return self._source

    @property
    def parent(self) -> TypeMappedView | None:
        return self._parent

    @property
    def node(self) -> MappingNode:
        return self._node

    @property
    def payload(self) -> LiteralPayload:
        return self._payload

    @property
    def context(self) -> MappingContext:
        return self._context

    def filter_attributes(self, predicate: AttributePredicate) -> TypeMappedView:
        current = self._attribute_filter
        combined = predicate if current is None else _both(current, predicate)
        return self._copy(non_merged=self._non_merged, attribute_filter=combined)

    def with_non_merged_attributes(self) -> TypeMappedView:
        return self._copy(non_merged=True, attribute_filter=self._attribute_filter)

    def _copy(
        self,
        *,
        non_merged: bool,
        attribute_filter: AttributePredicate | None,
    ) -> TypeMappedView:
        return TypeMappedView(
            self._node,
            self._payload,
            context=self._context,
            parent=self._parent,
            source=self._source,
            aggregate_index=self._aggregate_index,
            non_merged=non_merged,
            attribute_filter=attribute_filter,
            records=self._records,
            mirror_choices=self._mirror_choices,
        )

    def _declaration(self) -> DeclarationType:
        return self._node.declaration

    def _attribute_value(self, name: str) -> RawValue | None:
        return resolve_attribute(self, name, merged=not self._non_merged)

    def _is_filtered(self, name: str) -> bool:
        return self._attribute_filter is not None and not self._attribute_filter(name)

    def nested_for(self, slot: AttributeSlot, payload: LiteralPayload) -> TypeMappedView:
        type_id = slot.shape.type_id
        if type_id is None:
            raise ValueError(f"Attribute '{slot.name}' is not a nested declaration")
        return TypeMappedView(
            self._context.root_node(type_id),
            payload,
            context=self._context,
            source=self._source,
            aggregate_index=self._aggregate_index,
            records=self._records,
        )

    def _create_synthesized(self) -> object:
        origin = self._payload.origin
        if self._can_reuse(origin):
            return origin
        values: dict[str, object] = {}
        for slot in self._node.declaration:
            value = self.find(slot.name)
            if value is not None:
                values[slot.name] = value
        return self._records.create(self.type_id, values)

    def _can_reuse(self, origin: object | None) -> bool:
        if not isinstance(origin, SynthesizedRecord) or self._attribute_filter is not None:
            return False
        if origin.__type_id__ != self.type_id:
            return False
        names = tuple(name for name, _ in record_items(origin))
        return names == self._node.declaration.attribute_names and is_trivial(
            self._node, self._context
        )

    # Resolution frame

    @property
    def parent_frame(self) -> TypeMappedView | None:
        return self._parent

    def literal(self, name: str) -> RawValue | None:
        return self._payload.get(name)

    def restricts_convention(self, name: str) -> bool:
        return name in self._context.convention_restricted

    def memoized_mirror(self, key: Hashable) -> tuple[bool, Reference | None]:
        if key in self._mirror_choices:
            return True, self._mirror_choices[key]
        return False, None

    def remember_mirror(self, key: Hashable, choice: Reference | None) -> None:
        self._mirror_choices[key] = choice

    def __repr__(self) -> str:
        return f"TypeMappedView({self.type_id!r}, depth={self.depth})"


def _both(first: AttributePredicate, second: AttributePredicate) -> AttributePredicate:
    return lambda name: first(name) and second(name)


def is_trivial(
    node: MappingNode,
    context: MappingContext,
    _seen: frozenset[str] = frozenset(),
) -> bool:
    """Whether views of ``node`` can hand back a ready-made record unchanged.

    A trivial node is a root without aliases or mirrors whose nested declaration
    types are trivial as well.
    """
    if not node.is_root or node.aliases or node.has_mirrors or node.mirror_groups:
        return False
    seen = _seen | {node.type_id}
    for slot in node.declaration:
        if slot.shape.kind is not ValueKind.NESTED or slot.shape.type_id in seen:
            continue
        nested_type = slot.shape.type_id
        if nested_type is None or not is_trivial(context.root_node(nested_type), context, seen):
            return False
    return True


def view_of(
    type_id: str,
    attributes: Mapping[str, object] | None = None,
    *,
    context: MappingContext,
    source: object | None = None,
) -> TypeMappedView:
    """Build a root view for ``type_id`` from plain attribute values."""
    payload = attributes if isinstance(attributes, LiteralPayload) else LiteralPayload(attributes)
    return TypeMappedView(context.root_node(type_id), payload, context=context, source=source)


def view_of_record(
    record: SynthesizedRecord,
    *,
    context: MappingContext,
    source: object | None = None,
) -> TypeMappedView:
    """Wrap an existing synthesized record; synthesizing a trivial view returns it."""
    return view_of(
        record.__type_id__,
        LiteralPayload.from_record(record),
        context=context,
        source=source,
    )


__all__ = ["TypeMappedView", "is_trivial", "view_of", "view_of_record"]
