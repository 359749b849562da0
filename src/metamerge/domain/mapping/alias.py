"""Alias directive parsing.

An alias directive is a ``metamerge.alias_for`` meta-declaration placed on an
attribute slot. Its payload may name the target ``declaration`` (a type reference or
dotted text) and the target attribute through ``attribute`` or its shorthand
``value``. Missing parts default to the source's own declaration type and
attribute name.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from metamerge.domain.errors import ConfigurationError
from metamerge.domain.model import ALIAS_FOR, TypeRef

if TYPE_CHECKING:
    from metamerge.domain.model import MetaDeclaration


def describe(type_id: str, attribute: str) -> str:
    return f"attribute '{attribute}' in declaration [{type_id}]"


def _text(payload_value: object) -> str | None:
    if isinstance(payload_value, str) and payload_value.strip():
        return payload_value.strip()
    return None


@dataclass(frozen=True, slots=True)
class AliasDescriptor:
    """Target of one alias directive, with its defaults already applied."""

    declaration: str
    attribute: str

    @classmethod
    def from_directive(
        cls,
        source_type: str,
        source_attribute: str,
        directive: MetaDeclaration,
    ) -> AliasDescriptor:
        if directive.type_id != ALIAS_FOR:
            raise ValueError(f"Not an alias directive: {directive.type_id}")
        source = describe(source_type, source_attribute)
        descriptor = cls(
            declaration=_deduce_declaration(source_type, directive),
            attribute=_deduce_attribute(source, source_attribute, directive),
        )
        if descriptor.declaration == source_type and descriptor.attribute == source_attribute:
            raise ConfigurationError(
                f"Alias directive on {source} points to itself. Specify 'declaration' "
                "to point to a same-named attribute on a meta-declaration."
            )
        return descriptor

    def points_at(self, type_id: str, attribute: str) -> bool:
        return self.declaration == type_id and self.attribute == attribute

    def __str__(self) -> str:
        return describe(self.declaration, self.attribute)


def _deduce_declaration(source_type: str, directive: MetaDeclaration) -> str:
    target = directive.payload.get("declaration")
    if isinstance(target, TypeRef):
        return target.type_id
    return _text(target) or source_type


def _deduce_attribute(source: str, source_attribute: str, directive: MetaDeclaration) -> str:
    attribute = _text(directive.payload.get("attribute"))
    shorthand = _text(directive.payload.get("value"))
    if attribute is not None and shorthand is not None and attribute != shorthand:
        raise ConfigurationError(
            f"In alias directive declared on {source}, attribute 'attribute' and its "
            f"alias 'value' are present with values of '{attribute}' and '{shorthand}', "
            "but only one is permitted."
        )
    return attribute or shorthand or source_attribute
