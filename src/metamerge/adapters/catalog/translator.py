"""Translate catalog models into declaration descriptors.

JSON carries no type information beyond strings, numbers, lists and objects, so
values are converted guided by the declared shape: ``type`` strings become
``TypeRef``, ``enum`` strings become ``EnumRef``, ``nested`` objects become literal
payloads and lists become tuples. Values whose shape is unknown keep their JSON
form (objects still become payloads and lists tuples).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from metamerge.domain.model import (
    AttributeSlot,
    DeclarationType,
    EnumRef,
    LiteralPayload,
    MetaDeclaration,
    TypeRef,
    ValueKind,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from pydantic import JsonValue

    from metamerge.domain.model import AttributeShape, RawElement, RawValue

    from .schema import AttributeModel, DeclarationModel, MetaDeclarationModel

type ShapeLookup = Callable[[str], Mapping[str, AttributeShape] | None]


def translate_declaration(model: DeclarationModel, shapes_for: ShapeLookup) -> DeclarationType:
    return DeclarationType(
        model.type,
        meta=tuple(translate_meta(meta, shapes_for) for meta in model.meta),
        slots=tuple(translate_attribute(attribute, shapes_for) for attribute in model.attributes),
    )


def translate_attribute(model: AttributeModel, shapes_for: ShapeLookup) -> AttributeSlot:
    shape = model.parsed_shape
    default = None if model.default is None else translate_value(model.default, shape, shapes_for)
    return AttributeSlot(
        model.name,
        shape,
        default=default,
        meta=tuple(translate_meta(meta, shapes_for) for meta in model.meta),
    )


def translate_meta(model: MetaDeclarationModel, shapes_for: ShapeLookup) -> MetaDeclaration:
    return MetaDeclaration(model.type, translate_payload(model.attributes, model.type, shapes_for))


def translate_payload(
    attributes: Mapping[str, JsonValue],
    type_id: str | None,
    shapes_for: ShapeLookup,
) -> LiteralPayload:
    shapes = shapes_for(type_id) if type_id is not None else None
    return LiteralPayload(
        {
            name: translate_value(value, shapes.get(name) if shapes else None, shapes_for)
            for name, value in attributes.items()
        }
    )


def translate_value(
    value: JsonValue,
    shape: AttributeShape | None,
    shapes_for: ShapeLookup,
) -> RawValue:
    if isinstance(value, list):
        element_shape = shape.element() if shape is not None else None
        return tuple(_translate_element(item, element_shape, shapes_for) for item in value)
    return _translate_element(value, shape.element() if shape is not None else None, shapes_for)


def _translate_element(
    value: JsonValue,
    shape: AttributeShape | None,
    shapes_for: ShapeLookup,
) -> RawElement:
    if value is None:
        raise ValueError("Catalog values must not be null")
    if isinstance(value, list):
        raise ValueError("Nested arrays are not supported attribute values")
    if isinstance(value, dict):
        nested = shape is not None and shape.kind is ValueKind.NESTED
        return translate_payload(value, shape.type_id if nested else None, shapes_for)
    if shape is None:
        return value
    if shape.kind is ValueKind.TYPE and isinstance(value, str):
        return TypeRef(value)
    if shape.kind is ValueKind.ENUM and isinstance(value, str) and shape.type_id is not None:
        return EnumRef(shape.type_id, value)
    if shape.kind is ValueKind.FLOAT and isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    return value


__all__ = [
    "translate_attribute",
    "translate_declaration",
    "translate_meta",
    "translate_payload",
    "translate_value",
]
