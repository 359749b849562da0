"""Value kinds an attribute shape can declare."""

from __future__ import annotations

from enum import StrEnum


class ValueKind(StrEnum):
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    TEXT = "text"
    TYPE = "type"
    ENUM = "enum"
    NESTED = "nested"

    @property
    def needs_type_id(self) -> bool:
        return self in (ValueKind.ENUM, ValueKind.NESTED)


class DictOption(StrEnum):
    """Options controlling ``MergedView.as_dict`` output."""

    TYPE_TO_TEXT = "type_to_text"
    NESTED_TO_DICT = "nested_to_dict"
