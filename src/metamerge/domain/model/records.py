"""Base class of synthesized records.

Attribute values live in a private slot and are reached through attribute access
or ``record[name]``. Any attribute name works that way, keywords included; names
shadowed by a record member (``_items`` or a dunder) stay reachable by subscript.
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from collections.abc import Mapping


class SynthesizedRecord:
    """Immutable attribute record of one declaration type."""

    __slots__ = ("_items",)

    __type_id__: ClassVar[str] = ""
    __attribute_names__: ClassVar[tuple[str, ...]] = ()

    _items: tuple[tuple[str, object], ...]

    def __init__(self, values: Mapping[str, object]) -> None:
        names = type(self).__attribute_names__
        unexpected = [name for name in values if name not in names]
        missing = [name for name in names if name not in values]
        if unexpected or missing:
            raise TypeError(
                f"Record [{self.__type_id__}] expects attributes {list(names)}, "
                f"got {list(values)}"
            )
        object.__setattr__(self, "_items", tuple((name, values[name]) for name in names))

    def __getattr__(self, name: str) -> object:
        if name != "_items":
            for key, value in self._items:
                if key == name:
                    return value
        raise AttributeError(f"Record [{self.__type_id__}] has no attribute {name!r}")

    def __getitem__(self, name: str) -> object:
        for key, value in self._items:
            if key == name:
                return value
        raise KeyError(name)

    def __setattr__(self, name: str, value: object) -> None:
        raise FrozenInstanceError(f"cannot assign to field {name!r}")

    def __delattr__(self, name: str) -> None:
        raise FrozenInstanceError(f"cannot delete field {name!r}")

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, SynthesizedRecord):
            return NotImplemented
        return self.__type_id__ == other.__type_id__ and self._items == other._items

    def __hash__(self) -> int:
        result = 0
        for name, value in self._items:
            result += (127 * hash(name)) ^ hash(value)
        return result

    def __dir__(self) -> list[str]:
        return sorted({*object.__dir__(self), *type(self).__attribute_names__})


def record_items(record: SynthesizedRecord) -> tuple[tuple[str, object], ...]:
    """Attribute names and values of ``record`` in declaration order."""
    return record._items  # noqa: SLF001


__all__ = ["SynthesizedRecord", "record_items"]
