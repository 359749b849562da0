"""Lookup facade over the merged views of one or more aggregates.

An aggregate is one independent search root, e.g. one declaration site among
several overriding ones. Iteration interleaves aggregates by depth: every depth-0
view of every aggregate comes before any depth-1 view. Ties keep aggregate order,
then declaration order, then discovery order.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from metamerge.domain.errors import UnresolvableTypeError

from .missing import MISSING
from .selectors import NEAREST
from .view import TypeMappedView

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from metamerge.domain.mapping import MappingContext
    from metamerge.domain.model import DeclarationType, LiteralPayload, MetaDeclaration

    from .base import MergedView
    from .selectors import MergedSelector

log = getLogger(__name__)


type ViewPredicate = Callable[[MergedView], bool]


@dataclass(frozen=True, slots=True)
class Aggregate:
    """Metadata declared at one search root."""

    index: int
    declared: tuple[MetaDeclaration, ...]
    source: object | None = None


class MergedMetadata:
    """Presence checks, lookups and streaming over merged views."""

    def __init__(self, aggregates: Iterable[Aggregate], *, context: MappingContext) -> None:
        self._aggregates = tuple(aggregates)
        self._context = context
        self._views: tuple[TypeMappedView, ...] | None = None
        self._ordered: tuple[TypeMappedView, ...] | None = None
        self._all_by_type: dict[str, tuple[TypeMappedView, ...]] = {}

    @classmethod
    def from_declared(
        cls,
        declared: Iterable[MetaDeclaration],
        *,
        context: MappingContext,
        source: object | None = None,
    ) -> MergedMetadata:
        return cls([Aggregate(0, tuple(declared), source)], context=context)

    @classmethod
    def from_aggregates(
        cls,
        aggregates: Iterable[Iterable[MetaDeclaration]],
        *,
        context: MappingContext,
        sources: Iterable[object | None] | None = None,
    ) -> MergedMetadata:
        declared = [tuple(items) for items in aggregates]
        source_list = list(sources) if sources is not None else [None] * len(declared)
        if len(source_list) != len(declared):
            raise ValueError("Expected one source per aggregate")
        return cls(
            [
                Aggregate(index, items, source)
                for index, (items, source) in enumerate(zip(declared, source_list, strict=True))
            ],
            context=context,
        )

    @property
    def aggregates(self) -> tuple[Aggregate, ...]:
        return self._aggregates

    def is_present(self, type_id: str) -> bool:
        return any(view.type_id == type_id for view in self._all_views())

    def is_directly_present(self, type_id: str) -> bool:
        return any(view.type_id == type_id and view.depth == 0 for view in self._all_views())

    def get(
        self,
        type_id: str,
        predicate: ViewPredicate | None = None,
        selector: MergedSelector = NEAREST,
    ) -> MergedView:
        """Return the selected view of ``type_id``, or the missing view."""
        result: MergedView | None = None
        for view in self._all_views():
            if view.type_id != type_id or (predicate is not None and not predicate(view)):
                continue
            result = view if result is None else selector.select(result, view)
            if selector.is_best_candidate(result):
                break
        return MISSING if result is None else result

    def get_all(self, type_id: str) -> tuple[TypeMappedView, ...]:
        cached = self._all_by_type.get(type_id)
        if cached is None:
            cached = tuple(view for view in self._ordered_views() if view.type_id == type_id)
            self._all_by_type[type_id] = cached
        return cached

    def stream(self, type_id: str | None = None) -> Iterator[TypeMappedView]:
        for view in self._ordered_views():
            if type_id is None or view.type_id == type_id:
                yield view

    def __iter__(self) -> Iterator[TypeMappedView]:
        return self.stream()

    def __len__(self) -> int:
        return len(self._all_views())

    # Internals

    def _ordered_views(self) -> tuple[TypeMappedView, ...]:
        ordered = self._ordered
        if ordered is None:
            ordered = tuple(sorted(self._all_views(), key=lambda view: view.depth))
            self._ordered = ordered
        return ordered

    def _all_views(self) -> tuple[TypeMappedView, ...]:
        views = self._views
        if views is None:
            collected: list[TypeMappedView] = []
            for aggregate in self._aggregates:
                for item in aggregate.declared:
                    for declaration, payload in self._expand(item):
                        collected.extend(self._views_for(aggregate, declaration, payload))
            views = tuple(collected)
            self._views = views
        return views

    def _expand(self, item: MetaDeclaration) -> list[tuple[DeclarationType, LiteralPayload]]:
        prune = self._context.prune
        if prune.should_skip(item.type_id):
            return []
        try:
            expanded = list(self._context.containers.expand(item, self._context.resolver))
        except UnresolvableTypeError as exc:
            log.debug("Ignoring declared metadata: %s", exc)
            return []
        return [
            (declaration, payload)
            for declaration, payload in expanded
            if not prune.should_skip(declaration.type_id)
        ]

    def _views_for(
        self,
        aggregate: Aggregate,
        declaration: DeclarationType,
        payload: LiteralPayload,
    ) -> list[TypeMappedView]:
        graph = self._context.graph_for(declaration)
        by_node: dict[int, TypeMappedView] = {}
        views: list[TypeMappedView] = []
        for node in graph:
            parent = by_node[id(node.parent)] if node.parent is not None else None
            view = TypeMappedView(
                node,
                payload if node.is_root else node.payload,
                context=self._context,
                parent=parent,
                source=aggregate.source,
                aggregate_index=aggregate.index,
            )
            by_node[id(node)] = view
            views.append(view)
        return views


__all__ = ["Aggregate", "MergedMetadata", "ViewPredicate"]
