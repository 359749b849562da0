"""Immutable declaration descriptors supplied by type resolvers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from metamerge.domain.errors import AttributeNotFoundError

from .shapes import TEXT, TYPE
from .values import LiteralPayload, normalize_value

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .shapes import AttributeShape
    from .values import RawValue

# Marker declaration types understood by the engine itself.
ALIAS_FOR = "metamerge.alias_for"
REPEATABLE = "metamerge.repeatable"

CONVENTION_RESTRICTED_NAMES = frozenset({"value"})


@dataclass(frozen=True, slots=True)
class MetaDeclaration:
    """One declared metadata item: a type id and the literal payload written with it."""

    type_id: str
    payload: LiteralPayload = field(default_factory=lambda: LiteralPayload.EMPTY)

    @classmethod
    def of(cls, type_id: str, **attributes: object) -> MetaDeclaration:
        return cls(type_id, LiteralPayload(attributes))

    def __str__(self) -> str:
        if not self.payload:
            return f"@{self.type_id}"
        inner = ", ".join(f"{name}={value!r}" for name, value in self.payload.items())
        return f"@{self.type_id}({inner})"


def _find_meta(
    declarations: tuple[MetaDeclaration, ...], type_id: str
) -> MetaDeclaration | None:
    for candidate in declarations:
        if candidate.type_id == type_id:
            return candidate
    return None


@dataclass(frozen=True, slots=True)
class AttributeSlot:
    name: str
    shape: AttributeShape
    default: RawValue | None = None
    meta: tuple[MetaDeclaration, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Attribute slots require a name")
        if self.default is not None:
            object.__setattr__(self, "default", normalize_value(self.default))
        object.__setattr__(self, "meta", tuple(self.meta))

    def find_meta(self, type_id: str) -> MetaDeclaration | None:
        return _find_meta(self.meta, type_id)

    @property
    def alias_directive(self) -> MetaDeclaration | None:
        return self.find_meta(ALIAS_FOR)


@dataclass(frozen=True, slots=True)
class DeclarationType:
    """A metadata declaration type: its meta-declarations and attribute slots."""

    type_id: str
    meta: tuple[MetaDeclaration, ...] = ()
    slots: tuple[AttributeSlot, ...] = ()
    _slots_by_name: dict[str, AttributeSlot] = field(
        init=False, repr=False, compare=False, hash=False
    )

    def __post_init__(self) -> None:
        if not self.type_id:
            raise ValueError("Declaration types require a type id")
        object.__setattr__(self, "meta", tuple(self.meta))
        object.__setattr__(self, "slots", tuple(self.slots))
        by_name: dict[str, AttributeSlot] = {}
        for slot in self.slots:
            if slot.name in by_name:
                raise ValueError(
                    f"Duplicate attribute '{slot.name}' in declaration [{self.type_id}]"
                )
            by_name[slot.name] = slot
        object.__setattr__(self, "_slots_by_name", by_name)

    @property
    def attribute_names(self) -> tuple[str, ...]:
        return tuple(self._slots_by_name)

    def slot(self, name: str) -> AttributeSlot | None:
        return self._slots_by_name.get(name)

    def require_slot(self, name: str) -> AttributeSlot:
        slot = self._slots_by_name.get(name)
        if slot is None:
            raise AttributeNotFoundError(
                f"No attribute named '{name}' present in declaration [{self.type_id}]"
            )
        return slot

    def has_slot(self, name: str) -> bool:
        return name in self._slots_by_name

    def find_meta(self, type_id: str) -> MetaDeclaration | None:
        return _find_meta(self.meta, type_id)

    def __iter__(self) -> Iterator[AttributeSlot]:
        return iter(self.slots)


MARKER_DECLARATIONS: dict[str, DeclarationType] = {
    ALIAS_FOR: DeclarationType(
        ALIAS_FOR,
        slots=(
            AttributeSlot("declaration", TEXT, default=""),
            AttributeSlot("attribute", TEXT, default=""),
            AttributeSlot("value", TEXT, default=""),
        ),
    ),
    REPEATABLE: DeclarationType(REPEATABLE, slots=(AttributeSlot("value", TYPE),)),
}
