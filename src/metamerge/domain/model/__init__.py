"""Declaration model: shapes, raw values and declaration descriptors."""

from __future__ import annotations

from .declarations import (
    ALIAS_FOR,
    CONVENTION_RESTRICTED_NAMES,
    MARKER_DECLARATIONS,
    REPEATABLE,
    AttributeSlot,
    DeclarationType,
    MetaDeclaration,
)
from .enums import DictOption, ValueKind
from .records import SynthesizedRecord, record_items
from .shapes import AttributeShape
from .values import (
    EnumRef,
    LiteralPayload,
    RawElement,
    RawValue,
    Scalar,
    TypeRef,
    is_zero_length_array,
    normalize_value,
    same_value,
)

__all__ = [
    "ALIAS_FOR",
    "CONVENTION_RESTRICTED_NAMES",
    "MARKER_DECLARATIONS",
    "REPEATABLE",
    "AttributeShape",
    "AttributeSlot",
    "DeclarationType",
    "DictOption",
    "EnumRef",
    "LiteralPayload",
    "MetaDeclaration",
    "RawElement",
    "RawValue",
    "Scalar",
    "SynthesizedRecord",
    "TypeRef",
    "ValueKind",
    "is_zero_length_array",
    "normalize_value",
    "record_items",
    "same_value",
]
