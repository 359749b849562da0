"""Raw attribute values as they appear in literal payloads and defaults.

The set of raw values is closed: ``bool``, ``int``, ``float``, ``str``,
``TypeRef``, ``EnumRef``, ``LiteralPayload`` (a nested metadata bag) and tuples of
each. An empty tuple is a zero-length array whose element shape is unknown until a
caller asks for one.
"""

from __future__ import annotations

import builtins
import importlib
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, ClassVar

from metamerge.domain.errors import UnresolvableTypeError

from .records import SynthesizedRecord, record_items

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass(frozen=True, slots=True)
class TypeRef:
    """Reference to a type by its dotted identifier."""

    type_id: str

    def __post_init__(self) -> None:
        if not self.type_id or not self.type_id.strip():
            raise ValueError("TypeRef requires a non-empty type id")

    @classmethod
    def from_type(cls, value: type) -> TypeRef:
        if value.__module__ == "builtins":
            return cls(value.__qualname__)
        return cls(f"{value.__module__}.{value.__qualname__}")

    def load(self) -> type:
        """Import and return the referenced class."""
        parts = self.type_id.split(".")
        if len(parts) == 1:
            candidate = getattr(builtins, self.type_id, None)
            if isinstance(candidate, type):
                return candidate
            raise UnresolvableTypeError(self.type_id, "not a builtin type")
        for split in range(len(parts) - 1, 0, -1):
            try:
                target: object = importlib.import_module(".".join(parts[:split]))
            except ImportError:
                continue
            try:
                for part in parts[split:]:
                    target = getattr(target, part)
            except AttributeError as exc:
                raise UnresolvableTypeError(self.type_id, str(exc)) from exc
            if isinstance(target, type):
                return target
            raise UnresolvableTypeError(self.type_id, "not a class")
        raise UnresolvableTypeError(self.type_id, "module not importable")

    def __str__(self) -> str:
        return self.type_id


@dataclass(frozen=True, slots=True)
class EnumRef:
    """Reference to an enum member by enum type identifier and member name."""

    enum_type: str
    member: str

    def __post_init__(self) -> None:
        if not self.enum_type:
            raise ValueError("EnumRef requires an enum type")
        if not self.member:
            raise ValueError("EnumRef requires a member name")

    @classmethod
    def from_enum(cls, value: Enum) -> EnumRef:
        enum_type = type(value)
        return cls(f"{enum_type.__module__}.{enum_type.__qualname__}", value.name)

    def __str__(self) -> str:
        return self.member


class LiteralPayload(Mapping[str, "RawValue"]):
    """Immutable ``name -> raw value`` bag written at one use site.

    ``origin`` optionally holds the synthesized record this payload was derived
    from, so trivial views can hand it back unchanged.
    """

    __slots__ = ("_values", "origin")

    EMPTY: ClassVar[LiteralPayload]

    def __init__(
        self,
        values: Mapping[str, object] | Iterable[tuple[str, object]] | None = None,
        *,
        origin: object | None = None,
    ) -> None:
        items = dict(values or {})
        self._values: Mapping[str, RawValue] = MappingProxyType(
            {name: normalize_value(value) for name, value in items.items()}
        )
        self.origin = origin

    @classmethod
    def of(cls, **values: object) -> LiteralPayload:
        return cls(values)

    @classmethod
    def from_record(cls, record: object) -> LiteralPayload:
        if not isinstance(record, SynthesizedRecord):
            raise TypeError(f"Expected a synthesized record, got {type(record).__name__}")
        return cls(record_items(record), origin=record)

    def __getitem__(self, name: str) -> RawValue:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __hash__(self) -> int:
        return hash(frozenset(self._values.items()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        return dict(self._values) == dict(other.items())

    def __repr__(self) -> str:
        inner = ", ".join(f"{name}={value!r}" for name, value in self._values.items())
        return f"LiteralPayload({inner})"


LiteralPayload.EMPTY = LiteralPayload()


type Scalar = bool | int | float | str
type RawElement = Scalar | TypeRef | EnumRef | LiteralPayload
type RawValue = RawElement | tuple[RawElement, ...]


def normalize_value(value: object) -> RawValue:
    """Coerce Python-native values into the closed raw value set."""
    if isinstance(value, (LiteralPayload, TypeRef, EnumRef)):
        return value
    if isinstance(value, Enum):
        return EnumRef.from_enum(value)
    if isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, type):
        return TypeRef.from_type(value)
    if isinstance(value, Mapping):
        return LiteralPayload(value)
    if isinstance(value, (list, tuple)):
        return tuple(_normalize_element(element) for element in value)
    if isinstance(value, SynthesizedRecord):
        return LiteralPayload.from_record(value)
    raise TypeError(f"Unsupported attribute value type: {type(value).__name__}")


def _normalize_element(value: object) -> RawElement:
    normalized = normalize_value(value)
    if isinstance(normalized, tuple):
        raise TypeError("Nested arrays are not supported attribute values")
    return normalized


def is_zero_length_array(value: object) -> bool:
    return isinstance(value, tuple) and len(value) == 0


def same_value(left: object, right: object) -> bool:
    """Null-safe equality treating any two zero-length arrays as equal."""
    if left is None or right is None:
        return left is right
    if is_zero_length_array(left) and is_zero_length_array(right):
        return True
    return left == right
