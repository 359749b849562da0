from __future__ import annotations

import logging

import pytest

from metamerge.adapters.filters import PrefixPruneFilter
from metamerge.domain.errors import ConfigurationError, UnresolvableTypeError
from metamerge.domain.mapping import GraphCache, MappingGraph
from tests.helpers.declarations import (
    FakeTypeResolver,
    alias_for,
    attr,
    declaration,
    make_context,
    meta,
)

COMPONENT = declaration("com.example.Component", attr("name"))
SERVICE = declaration(
    "com.example.Service",
    attr("name", alias=alias_for("com.example.Component")),
    meta=[meta("com.example.Component")],
)


def test_graph_is_built_once_per_root_type() -> None:
    context = make_context(SERVICE, COMPONENT)

    first = context.graph_for("com.example.Service")
    second = context.graph_for(SERVICE)

    assert first is second
    assert len(context.cache) == 1


def test_graphs_are_keyed_by_prune_filter() -> None:
    resolver = FakeTypeResolver([SERVICE, COMPONENT])
    keep = make_context(resolver=resolver)
    pruned = make_context(resolver=resolver, prune=PrefixPruneFilter.of(["com.example"]))

    assert len(keep.graph_for(SERVICE)) == 2
    assert pruned.graph_for(SERVICE).is_empty


def test_root_node_survives_pruning_of_its_own_type() -> None:
    context = make_context(
        SERVICE, COMPONENT, prune=PrefixPruneFilter.of(["com.example.Service"])
    )

    node = context.root_node("com.example.Service")

    assert node.type_id == "com.example.Service"
    assert node.is_root
    assert context.graph_for(SERVICE).is_empty


def test_pruned_root_still_prunes_its_meta_declarations(
    caplog: pytest.LogCaptureFixture,
) -> None:
    vendor = declaration(
        "com.vendor.Tagged",
        attr("label"),
        meta=[meta("com.vendor.Internal"), meta("com.example.Component")],
    )
    resolver = FakeTypeResolver([vendor, declaration("com.vendor.Internal"), COMPONENT])
    context = make_context(resolver=resolver, prune=PrefixPruneFilter.of(["com.vendor"]))

    with caplog.at_level(logging.DEBUG, logger="metamerge.domain.mapping.builder"):
        node = context.root_node("com.vendor.Tagged")

    assert node.type_id == "com.vendor.Tagged"
    assert "com.vendor.Internal" not in resolver.calls
    assert resolver.calls["com.example.Component"] == 1
    assert "Pruned meta-declaration [com.vendor.Internal] on [com.vendor.Tagged]" in caplog.text


def test_failed_build_is_not_cached() -> None:
    broken = declaration(
        "com.example.Broken",
        attr("name", alias=alias_for("com.example.Component")),
    )
    context = make_context(broken, COMPONENT)

    for _ in range(2):
        with pytest.raises(ConfigurationError):
            context.graph_for("com.example.Broken")
    assert len(context.cache) == 0


def test_unknown_root_type_raises() -> None:
    context = make_context()

    with pytest.raises(UnresolvableTypeError, match="com.example.Nope"):
        context.graph_for("com.example.Nope")


def test_cache_keeps_first_published_graph(caplog: pytest.LogCaptureFixture) -> None:
    cache = GraphCache()
    published = MappingGraph("com.example.Service")
    racing = MappingGraph("com.example.Service")

    def build_racing() -> MappingGraph:
        # Another caller publishes while this one is still building.
        cache.get_or_build("key", lambda: published)
        return racing

    with caplog.at_level(logging.DEBUG, logger="metamerge.domain.mapping.cache"):
        result = cache.get_or_build("key", build_racing)

    assert result is published
    assert "Discarding duplicate mapping graph" in caplog.text
    assert "key" in cache
    cache.clear()
    assert len(cache) == 0
