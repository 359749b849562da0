"""Adapt resolved raw values into caller-requested Python types."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Protocol

from metamerge.domain.errors import TypeMismatchError
from metamerge.domain.model import EnumRef, LiteralPayload, TypeRef

from .synthesized import SynthesizedRecord

if TYPE_CHECKING:
    from metamerge.domain.model import AttributeSlot, RawElement, RawValue


class NestedFactory(Protocol):
    """Turn a nested metadata bag into a view and into its synthesized form."""

    def view(self, slot: AttributeSlot, payload: LiteralPayload) -> object: ...

    def synthesize(self, slot: AttributeSlot, payload: LiteralPayload) -> object: ...

    def is_view_type(self, requested: type) -> bool: ...


def adapt(
    value: RawValue,
    slot: AttributeSlot,
    requested: type = object,
    *,
    nested: NestedFactory,
) -> object:
    """Adapt ``value`` declared by ``slot`` to ``requested``.

    Arrays adapt element by element and come back as tuples; ``requested`` then
    names the element type (``tuple`` is accepted as "any element").
    """
    if isinstance(value, tuple):
        element_type = object if requested is tuple else requested
        return tuple(_adapt_element(element, slot, element_type, nested) for element in value)
    if requested is tuple:
        raise _mismatch(slot, requested)
    return _adapt_element(value, slot, requested, nested)


def _adapt_element(
    value: RawElement,
    slot: AttributeSlot,
    requested: type,
    nested: NestedFactory,
) -> object:
    if isinstance(value, TypeRef):
        return _adapt_type_ref(value, slot, requested)
    if isinstance(value, EnumRef):
        return _adapt_enum_ref(value, slot, requested)
    if isinstance(value, LiteralPayload):
        return _adapt_payload(value, slot, requested, nested)
    if requested is object or isinstance(value, requested):
        return value
    if requested is float and isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    raise _mismatch(slot, requested)


def _adapt_type_ref(value: TypeRef, slot: AttributeSlot, requested: type) -> object:
    if requested is object or requested is TypeRef:
        return value
    if requested is str:
        return value.type_id
    if requested is type:
        return value.load()
    raise _mismatch(slot, requested)


def _adapt_enum_ref(value: EnumRef, slot: AttributeSlot, requested: type) -> object:
    if requested is object or requested is EnumRef:
        return value
    if requested is str:
        return value.member
    if issubclass(requested, Enum):
        try:
            return requested[value.member]
        except KeyError as exc:
            raise TypeMismatchError(
                f"Enum {requested.__name__} has no member '{value.member}' for "
                f"attribute '{slot.name}' declared as '{slot.shape}'"
            ) from exc
    raise _mismatch(slot, requested)


def _adapt_payload(
    value: LiteralPayload,
    slot: AttributeSlot,
    requested: type,
    nested: NestedFactory,
) -> object:
    if nested.is_view_type(requested):
        return nested.view(slot, value)
    if requested is object:
        return nested.synthesize(slot, value)
    record_type = requested.__type_id__ if issubclass(requested, SynthesizedRecord) else None
    if record_type is not None and record_type in ("", slot.shape.type_id):
        return nested.synthesize(slot, value)
    raise _mismatch(slot, requested)


def _mismatch(slot: AttributeSlot, requested: type) -> TypeMismatchError:
    return TypeMismatchError(
        f"Attribute '{slot.name}' declared as '{slot.shape}' cannot be adapted to "
        f"{requested.__name__}"
    )


__all__ = ["NestedFactory", "adapt"]
