"""Synthesized records and canonical text rendering.

A record class is generated once per declaration type and attribute-name set.
Records compare equal when they carry the same type id and equal attribute values,
whichever factory generated their classes.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, cast

from metamerge.domain.model import EnumRef, SynthesizedRecord, TypeRef, record_items

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


def _canonical_repr(record: SynthesizedRecord) -> str:
    return render(record.__type_id__, record_items(record))


class RecordFactory:
    """Generate and cache record classes per (type id, attribute names)."""

    def __init__(self) -> None:
        self._classes: dict[tuple[str, tuple[str, ...]], type[SynthesizedRecord]] = {}

    def record_class(self, type_id: str, names: tuple[str, ...]) -> type[SynthesizedRecord]:
        key = (type_id, names)
        record_class = self._classes.get(key)
        if record_class is None:
            namespace = {
                "__slots__": (),
                "__type_id__": type_id,
                "__attribute_names__": names,
                "__repr__": _canonical_repr,
            }
            record_class = cast(
                "type[SynthesizedRecord]",
                type(type_id.rsplit(".", 1)[-1], (SynthesizedRecord,), namespace),
            )
            record_class = self._classes.setdefault(key, record_class)
        return record_class

    def create(self, type_id: str, values: Mapping[str, object]) -> SynthesizedRecord:
        record_class = self.record_class(type_id, tuple(values))
        return record_class(values)

    def __len__(self) -> int:
        return len(self._classes)


DEFAULT_RECORDS = RecordFactory()


def render_value(value: object) -> str:
    if isinstance(value, str):
        return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'
    if isinstance(value, tuple):
        return "[" + ", ".join(render_value(element) for element in value) + "]"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, type):
        return TypeRef.from_type(value).type_id
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (TypeRef, EnumRef)):
        return str(value)
    if isinstance(value, SynthesizedRecord):
        return _canonical_repr(value)
    return str(value)


def render(type_id: str, items: Iterable[tuple[str, object]]) -> str:
    inner = ", ".join(f"{name}={render_value(value)}" for name, value in items)
    return f"{type_id}({inner})"


__all__ = [
    "DEFAULT_RECORDS",
    "RecordFactory",
    "SynthesizedRecord",
    "render",
    "render_value",
]
