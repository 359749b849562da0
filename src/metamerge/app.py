"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from metamerge.adapters.catalog import CatalogTypeResolver, translate_payload
from metamerge.adapters.containers import standard_repeatables
from metamerge.adapters.filters import platform_filter
from metamerge.config import get_engine_config
from metamerge.domain.mapping import MappingContext
from metamerge.domain.merged import MergedMetadata
from metamerge.domain.model import MetaDeclaration

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from pydantic import JsonValue

    from metamerge.config import EngineConfig
    from metamerge.domain.ports import ContainerExpander, PruneFilter, TypeResolver


log = getLogger(__name__)


def create_context(
    resolver: TypeResolver,
    *,
    containers: ContainerExpander | None = None,
    prune: PruneFilter | None = None,
    config: EngineConfig | None = None,
) -> MappingContext:
    """Resolution context using the configured defaults for anything not given."""
    config = config or get_engine_config()
    return MappingContext(
        resolver=resolver,
        containers=containers if containers is not None else standard_repeatables(),
        prune=prune if prune is not None else platform_filter(config),
        convention_restricted=config.convention_restricted,
    )


@dataclass(frozen=True, slots=True)
class InspectResult:
    type_id: str
    rendered: tuple[str, ...]

    @property
    def found(self) -> bool:
        return bool(self.rendered)


def inspect_declaration(
    catalog: str | Path,
    type_id: str,
    attributes: Mapping[str, JsonValue] | None = None,
    *,
    find: str | None = None,
    all_views: bool = False,
    config: EngineConfig | None = None,
) -> InspectResult:
    """Declare ``type_id`` once and render the merged view(s) of ``find``.

    ``find`` defaults to the declared type itself. With ``all_views`` every view
    of the type is rendered in lookup order, otherwise only the nearest one.
    """
    resolver = CatalogTypeResolver.from_path(catalog)
    context = create_context(resolver, config=config)
    payload = translate_payload(attributes or {}, type_id, resolver.shapes_for)
    merged = MergedMetadata.from_declared(
        [MetaDeclaration(type_id, payload)],
        context=context,
        source=str(catalog),
    )
    wanted = find or type_id
    if all_views:
        rendered = tuple(str(view) for view in merged.get_all(wanted))
    else:
        view = merged.get(wanted)
        rendered = (str(view),) if view.is_present else ()
    log.debug("Inspected %s for [%s]: %d view(s)", type_id, wanted, len(rendered))
    return InspectResult(wanted, rendered)


__all__ = ["InspectResult", "create_context", "inspect_declaration"]
