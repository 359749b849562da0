"""Declared attribute shapes.

A shape is a value kind, an ``array`` flag and, for enum and nested kinds, the
identifier of the enum or declaration type. Shapes have a compact text form used by
catalogs and error messages::

    text
    int[]
    enum<com.example.Color>
    nested<com.example.Marker>[]
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .enums import ValueKind

_SHAPE_PATTERN = re.compile(
    r"^(?P<kind>[a-z]+)(?:<(?P<type_id>[^<>\s]+)>)?(?P<array>\[\])?$",
)


@dataclass(frozen=True, slots=True)
class AttributeShape:
    kind: ValueKind
    array: bool = False
    type_id: str | None = None

    def __post_init__(self) -> None:
        if self.kind.needs_type_id and not self.type_id:
            raise ValueError(f"Shape kind '{self.kind}' requires a type id")
        if not self.kind.needs_type_id and self.type_id is not None:
            raise ValueError(f"Shape kind '{self.kind}' does not take a type id")

    @classmethod
    def parse(cls, text: str) -> AttributeShape:
        match = _SHAPE_PATTERN.match(text.strip())
        if match is None:
            raise ValueError(f"Invalid attribute shape: {text!r}")
        try:
            kind = ValueKind(match["kind"])
        except ValueError as exc:
            raise ValueError(f"Unknown value kind in attribute shape: {text!r}") from exc
        return cls(kind=kind, array=match["array"] is not None, type_id=match["type_id"])

    @classmethod
    def scalar(cls, kind: ValueKind) -> AttributeShape:
        return cls(kind=kind)

    @classmethod
    def nested(cls, type_id: str, *, array: bool = False) -> AttributeShape:
        return cls(kind=ValueKind.NESTED, array=array, type_id=type_id)

    @classmethod
    def enum(cls, type_id: str, *, array: bool = False) -> AttributeShape:
        return cls(kind=ValueKind.ENUM, array=array, type_id=type_id)

    def element(self) -> AttributeShape:
        """Return the component shape (``self`` when not an array)."""
        if not self.array:
            return self
        return AttributeShape(kind=self.kind, type_id=self.type_id)

    def array_of(self) -> AttributeShape:
        return AttributeShape(kind=self.kind, array=True, type_id=self.type_id)

    def accepts_alias_from(self, source: AttributeShape) -> bool:
        """Whether an alias declared with ``source`` may target this shape."""
        return source == self or (self.array and source == self.element())

    def __str__(self) -> str:
        text = str(self.kind)
        if self.type_id is not None:
            text = f"{text}<{self.type_id}>"
        return f"{text}[]" if self.array else text


TEXT = AttributeShape(ValueKind.TEXT)
TYPE = AttributeShape(ValueKind.TYPE)
