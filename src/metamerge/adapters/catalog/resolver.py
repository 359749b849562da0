"""Type resolver backed by a JSON declaration catalog."""

from __future__ import annotations

import json
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from metamerge.domain.errors import ConfigurationError, UnresolvableTypeError
from metamerge.domain.model import MARKER_DECLARATIONS, DeclarationType

from .schema import CatalogDocument, DeclarationModel
from .translator import translate_declaration

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from metamerge.domain.model import AttributeShape

log = getLogger(__name__)


class CatalogTypeResolver:
    """Resolve declaration types registered from catalog documents or directly.

    Catalog models are translated on first resolution; the engine's marker
    declarations are always known.
    """

    def __init__(self, declarations: Iterable[DeclarationType | DeclarationModel] = ()) -> None:
        self._models: dict[str, DeclarationModel] = {}
        self._resolved: dict[str, DeclarationType] = dict(MARKER_DECLARATIONS)
        for declaration in declarations:
            self.register(declaration)

    @classmethod
    def from_document(cls, document: CatalogDocument | Mapping[str, object]) -> CatalogTypeResolver:
        if not isinstance(document, CatalogDocument):
            try:
                document = CatalogDocument.model_validate(document)
            except ValidationError as exc:
                raise ConfigurationError(f"Invalid declaration catalog: {exc}") from exc
        return cls(document.declarations)

    @classmethod
    def from_path(cls, path: str | Path) -> CatalogTypeResolver:
        catalog_path = Path(path)
        try:
            raw = json.loads(catalog_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Catalog {catalog_path} is not valid JSON: {exc}") from exc
        resolver = cls.from_document(raw)
        log.info("Loaded %d declaration types from %s", len(resolver._models), catalog_path)
        return resolver

    def register(self, declaration: DeclarationType | DeclarationModel) -> None:
        if isinstance(declaration, DeclarationType):
            type_id = declaration.type_id
        else:
            type_id = declaration.type
        if type_id in self._models or type_id in self._resolved:
            raise ConfigurationError(f"Declaration type [{type_id}] is already registered")
        if isinstance(declaration, DeclarationType):
            self._resolved[type_id] = declaration
        else:
            self._models[type_id] = declaration

    def resolve(self, type_id: str) -> DeclarationType:
        resolved = self._resolved.get(type_id)
        if resolved is not None:
            return resolved
        model = self._models.get(type_id)
        if model is None:
            raise UnresolvableTypeError(type_id, "not present in catalog")
        try:
            resolved = translate_declaration(model, self.shapes_for)
        except ValueError as exc:
            raise UnresolvableTypeError(type_id, str(exc)) from exc
        return self._resolved.setdefault(type_id, resolved)

    def shapes_for(self, type_id: str) -> dict[str, AttributeShape] | None:
        """Attribute shapes of a known type, without translating its values."""
        resolved = self._resolved.get(type_id)
        if resolved is not None:
            return {slot.name: slot.shape for slot in resolved}
        model = self._models.get(type_id)
        if model is None:
            return None
        return {attribute.name: attribute.parsed_shape for attribute in model.attributes}

    @property
    def type_ids(self) -> tuple[str, ...]:
        return tuple(sorted({*self._models, *self._resolved}))

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._models or type_id in self._resolved

    def __iter__(self) -> Iterator[str]:
        return iter(self.type_ids)


__all__ = ["CatalogTypeResolver"]
