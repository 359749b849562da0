"""JSON declaration catalog adapter."""

from __future__ import annotations

from .resolver import CatalogTypeResolver
from .schema import (
    AttributeModel,
    CatalogBaseModel,
    CatalogDocument,
    DeclarationModel,
    MetaDeclarationModel,
)
from .translator import (
    translate_attribute,
    translate_declaration,
    translate_meta,
    translate_payload,
    translate_value,
)

__all__ = [
    "AttributeModel",
    "CatalogBaseModel",
    "CatalogDocument",
    "CatalogTypeResolver",
    "DeclarationModel",
    "MetaDeclarationModel",
    "translate_attribute",
    "translate_declaration",
    "translate_meta",
    "translate_payload",
    "translate_value",
]
