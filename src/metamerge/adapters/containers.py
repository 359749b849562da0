"""Repeatable container expansion.

A container is a declaration type whose single ``value`` attribute holds an array
of repeated declarations. Expanding a declared container yields one item per
contained declaration; anything else expands into itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from metamerge.domain.errors import ConfigurationError
from metamerge.domain.model import REPEATABLE, LiteralPayload, TypeRef, ValueKind

if TYPE_CHECKING:
    from collections.abc import Iterator

    from metamerge.domain.model import DeclarationType, MetaDeclaration
    from metamerge.domain.ports import TypeResolver

_VALUE = "value"


@dataclass(frozen=True, slots=True)
class RepeatableContainers:
    """Chain of container lookups, each link falling back to ``parent``.

    Instances compare by value so they can take part in graph cache keys.
    """

    parent: RepeatableContainers | None = None

    def and_(
        self,
        repeatable: DeclarationType,
        container: DeclarationType | None = None,
        *,
        resolver: TypeResolver | None = None,
    ) -> RepeatableContainers:
        """Register ``container`` as holding ``repeatable``.

        Without an explicit container, the one named by the repeatable's
        ``metamerge.repeatable`` marker is resolved through ``resolver``.
        """
        if container is None:
            container = _marked_container(repeatable, resolver)
        return ExplicitRepeatableContainers(self, repeatable.type_id, container.type_id).validated(
            repeatable, container
        )

    def expand(
        self,
        item: MetaDeclaration,
        resolver: TypeResolver,
    ) -> Iterator[tuple[DeclarationType, LiteralPayload]]:
        declaration = resolver.resolve(item.type_id)
        repeatable_id = self.find_repeatable(declaration, item.payload, resolver)
        if repeatable_id is None:
            yield declaration, item.payload
            return
        repeatable = resolver.resolve(repeatable_id)
        contained = item.payload.get(_VALUE, ())
        for payload in contained if isinstance(contained, tuple) else (contained,):
            if isinstance(payload, LiteralPayload):
                yield repeatable, payload

    def find_repeatable(
        self,
        declaration: DeclarationType,
        payload: LiteralPayload,
        resolver: TypeResolver,
    ) -> str | None:
        """Type id of the repeatable held by ``declaration``, if it is a container."""
        if self.parent is None:
            return None
        return self.parent.find_repeatable(declaration, payload, resolver)


@dataclass(frozen=True, slots=True)
class StandardRepeatableContainers(RepeatableContainers):
    """Detect containers by convention.

    The container declares exactly one attribute, ``value``, shaped as an array of
    nested declarations whose type carries the ``metamerge.repeatable`` marker.
    """

    def find_repeatable(
        self,
        declaration: DeclarationType,
        payload: LiteralPayload,
        resolver: TypeResolver,
    ) -> str | None:
        if declaration.attribute_names != (_VALUE,):
            return RepeatableContainers.find_repeatable(self, declaration, payload, resolver)
        shape = declaration.require_slot(_VALUE).shape
        if shape.kind is not ValueKind.NESTED or not shape.array or shape.type_id is None:
            return RepeatableContainers.find_repeatable(self, declaration, payload, resolver)
        if not isinstance(payload.get(_VALUE), tuple):
            return RepeatableContainers.find_repeatable(self, declaration, payload, resolver)
        repeatable = resolver.resolve(shape.type_id)
        if repeatable.find_meta(REPEATABLE) is not None:
            return repeatable.type_id
        return RepeatableContainers.find_repeatable(self, declaration, payload, resolver)


@dataclass(frozen=True, slots=True)
class ExplicitRepeatableContainers(RepeatableContainers):
    """One registered (repeatable, container) pair."""

    repeatable: str = ""
    container: str = ""

    def validated(
        self,
        repeatable: DeclarationType,
        container: DeclarationType,
    ) -> ExplicitRepeatableContainers:
        slot = container.slot(_VALUE)
        shape = slot.shape if slot is not None else None
        if (
            shape is None
            or shape.kind is not ValueKind.NESTED
            or not shape.array
            or shape.type_id != repeatable.type_id
        ):
            raise ConfigurationError(
                f"Container type [{container.type_id}] must declare a 'value' attribute "
                f"for an array of type [{repeatable.type_id}]"
            )
        return self

    def find_repeatable(
        self,
        declaration: DeclarationType,
        payload: LiteralPayload,
        resolver: TypeResolver,
    ) -> str | None:
        if declaration.type_id == self.container:
            return self.repeatable
        return RepeatableContainers.find_repeatable(self, declaration, payload, resolver)


_STANDARD = StandardRepeatableContainers()
_NONE = RepeatableContainers()


def standard_repeatables() -> RepeatableContainers:
    return _STANDARD


def no_repeatables() -> RepeatableContainers:
    return _NONE


def _marked_container(
    repeatable: DeclarationType,
    resolver: TypeResolver | None,
) -> DeclarationType:
    marker = repeatable.find_meta(REPEATABLE)
    target = marker.payload.get(_VALUE) if marker is not None else None
    if isinstance(target, TypeRef):
        target = target.type_id
    if not isinstance(target, str) or not target:
        raise ConfigurationError(
            f"Declaration type [{repeatable.type_id}] must carry a {REPEATABLE} marker "
            "naming its container"
        )
    if resolver is None:
        raise ValueError(f"A resolver is required to look up container [{target}]")
    return resolver.resolve(target)


def repeatables_of(
    repeatable: DeclarationType,
    container: DeclarationType | None = None,
    *,
    resolver: TypeResolver | None = None,
) -> RepeatableContainers:
    """Containers knowing only the explicitly registered pair."""
    return _NONE.and_(repeatable, container, resolver=resolver)


__all__ = [
    "ExplicitRepeatableContainers",
    "RepeatableContainers",
    "StandardRepeatableContainers",
    "no_repeatables",
    "repeatables_of",
    "standard_repeatables",
]
