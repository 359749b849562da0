"""Attribute resolution for one mapped view.

Precedence, evaluated per call:

1. mirror linkage: every member of a mirror group reads the one member whose own
   value differs from its default;
2. merged mode: an alias declared on an ancestor;
3. merged mode: the parent's same-named attribute (convention), except for
   convention-restricted names;
4. the literal written at this node's position;
5. the slot default;
6. promotion of a scalar into a one-element array for array slots.

Non-merged mode skips steps 2 and 3.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from metamerge.domain.errors import ConfigurationError
from metamerge.domain.model import same_value

from .synthesized import render_value

if TYPE_CHECKING:
    from collections.abc import Hashable

    from metamerge.domain.mapping import MappingNode, MirrorGroup, Reference
    from metamerge.domain.model import AttributeSlot, RawValue


class ResolutionFrame(Protocol):
    """What the resolver needs from a view: its node, parents and literals."""

    @property
    def node(self) -> MappingNode: ...

    @property
    def parent_frame(self) -> ResolutionFrame | None: ...

    @property
    def source(self) -> object | None: ...

    def literal(self, name: str) -> RawValue | None: ...

    def restricts_convention(self, name: str) -> bool: ...

    def memoized_mirror(self, key: Hashable) -> tuple[bool, Reference | None]: ...

    def remember_mirror(self, key: Hashable, choice: Reference | None) -> None: ...


def resolve_attribute(frame: ResolutionFrame, name: str, *, merged: bool) -> RawValue | None:
    """Resolve the effective literal value of ``name`` at ``frame``."""
    node = frame.node
    slot = node.declaration.slot(name)
    lookup_name = name
    group = node.mirror_group_for(name)
    if group is not None:
        in_use = mirror_in_use(frame, group, merged=merged)
        if in_use is not None:
            lookup_name = in_use.name
    value = _resolve_unmirrored(frame, lookup_name, merged=merged)
    return promote(value, slot)


def mirror_in_use(frame: ResolutionFrame, group: MirrorGroup, *, merged: bool) -> Reference | None:
    """Return the group member whose value every member reads, or None when all default."""
    key = (group, merged)
    found, choice = frame.memoized_mirror(key)
    if found:
        return choice
    choice = _choose_mirror(frame, group, merged=merged)
    frame.remember_mirror(key, choice)
    return choice


def _choose_mirror(frame: ResolutionFrame, group: MirrorGroup, *, merged: bool) -> Reference | None:
    result: Reference | None = None
    last_value: RawValue | None = None
    for candidate in group:
        value = _resolve_unmirrored(frame, candidate.name, merged=merged)
        if value is None or same_value(value, candidate.slot.default):
            continue
        if result is not None:
            _check_mirror_candidate(frame, candidate, result, value, last_value)
        result = candidate
        last_value = value
    return result


def _check_mirror_candidate(
    frame: ResolutionFrame,
    candidate: Reference,
    result: Reference,
    value: RawValue,
    last_value: RawValue | None,
) -> None:
    if same_value(value, last_value) or _is_shadow(frame.node, candidate, result, last_value):
        return
    on = f" declared on {frame.source}" if frame.source is not None else ""
    raise ConfigurationError(
        f"Different mirror values for declaration [{result.type_id}]{on}, attribute "
        f"'{result.name}' and its alias '{candidate.name}' are declared with values of "
        f"[{_display(last_value)}] and [{_display(value)}]."
    )


def _is_shadow(
    node: MappingNode,
    candidate: Reference,
    result: Reference,
    last_value: RawValue | None,
) -> bool:
    if node.alias_for(candidate.name) is None:
        return False
    return same_value(last_value, node.payload.get(result.name))


def _display(value: object) -> str:
    if isinstance(value, str):
        return value
    return render_value(value)


def _resolve_unmirrored(frame: ResolutionFrame, name: str, *, merged: bool) -> RawValue | None:
    node = frame.node
    slot = node.declaration.slot(name)
    value: RawValue | None = None
    parent = frame.parent_frame
    if merged and parent is not None:
        value = _from_alias(frame, name)
        if value is None and _is_convention_mapped(frame, name, parent):
            value = resolve_attribute(parent, name, merged=True)
    if value is None:
        value = frame.literal(name)
    if value is None and slot is not None:
        value = slot.default
    return promote(value, slot)


def _from_alias(frame: ResolutionFrame, name: str) -> RawValue | None:
    alias = frame.node.alias_for(name)
    if alias is None:
        return None
    ancestor = find_ancestor(frame, alias.node)
    if ancestor is None:
        return None
    return resolve_attribute(ancestor, alias.name, merged=True)


def _is_convention_mapped(frame: ResolutionFrame, name: str, parent: ResolutionFrame) -> bool:
    if frame.restricts_convention(name):
        return False
    return parent.node.declaration.has_slot(name)


def find_ancestor(frame: ResolutionFrame, node: MappingNode) -> ResolutionFrame | None:
    candidate = frame.parent_frame
    while candidate is not None:
        if candidate.node is node:
            return candidate
        candidate = candidate.parent_frame
    return None


def promote(value: RawValue | None, slot: AttributeSlot | None) -> RawValue | None:
    if value is None or slot is None or not slot.shape.array or isinstance(value, tuple):
        return value
    return (value,)


__all__ = ["ResolutionFrame", "find_ancestor", "mirror_in_use", "promote", "resolve_attribute"]
