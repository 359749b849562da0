from __future__ import annotations

import dataclasses

import pytest

from metamerge.domain.errors import ConfigurationError
from metamerge.domain.merged import MergedMetadata, view_of
from tests.helpers.declarations import alias_for, attr, declaration, make_context, meta

COMPONENT = declaration("com.example.Component", attr("name"), attr("value"))
SERVICE = declaration(
    "com.example.Service",
    attr("name", alias=alias_for("com.example.Component")),
    meta=[meta("com.example.Component")],
)
MIRRORED = declaration(
    "com.example.Mirrored",
    attr("a", alias=alias_for(attribute="b")),
    attr("b", alias=alias_for(attribute="a")),
)


def test_default_applies_without_literal() -> None:
    root = declaration("com.example.Root", attr("value", default="x"))
    context = make_context(root)

    assert view_of("com.example.Root", {}, context=context).get("value") == "x"


def test_alias_from_ancestor_overrides_meta_attribute() -> None:
    context = make_context(SERVICE, COMPONENT)
    merged = MergedMetadata.from_declared(
        [meta("com.example.Service", name="test")], context=context
    )

    component = merged.get("com.example.Component")

    assert component.depth == 1
    assert component.get("name") == "test"
    assert component.with_non_merged_attributes().get("name") == ""


def test_mirror_member_reads_the_non_default_value() -> None:
    context = make_context(MIRRORED)

    view = view_of("com.example.Mirrored", {"a": "X"}, context=context)

    assert view.get("b") == "X"
    assert view.get("a") == "X"
    assert view_of("com.example.Mirrored", {"b": "Y"}, context=context).get("a") == "Y"


def test_mirror_members_with_equal_values_are_accepted() -> None:
    context = make_context(MIRRORED)

    assert view_of("com.example.Mirrored", {"a": "X", "b": "X"}, context=context).get("a") == "X"


def test_conflicting_mirror_values_fail() -> None:
    context = make_context(MIRRORED)
    view = view_of(
        "com.example.Mirrored",
        {"a": "X", "b": "Y"},
        context=context,
        source="com.example.Site",
    )

    with pytest.raises(ConfigurationError) as excinfo:
        view.get("b")

    message = str(excinfo.value)
    assert "declaration [com.example.Mirrored] declared on com.example.Site" in message
    assert "attribute 'a' and its alias 'b'" in message
    assert "values of [X] and [Y]" in message


def test_mirror_linkage_holds_in_non_merged_mode() -> None:
    context = make_context(MIRRORED)

    view = view_of("com.example.Mirrored", {"a": "X"}, context=context)

    assert view.with_non_merged_attributes().get("b") == "X"


def test_scalar_is_promoted_for_array_slot() -> None:
    root = declaration("com.example.Tagged", attr("items", "text[]", ()))
    context = make_context(root)

    view = view_of("com.example.Tagged", {"items": "solo"}, context=context)

    assert view.get("items") == ("solo",)
    assert view.payload["items"] == "solo"
    assert view_of("com.example.Tagged", {}, context=context).get("items") == ()


def test_nearest_occurrence_wins_across_aggregates() -> None:
    target = declaration("com.example.Target", attr("label"))
    middle = declaration("com.example.Middle", meta=[meta("com.example.Target", label="deep")])
    outer = declaration("com.example.Outer", meta=[meta("com.example.Middle")])
    near = declaration("com.example.Near", meta=[meta("com.example.Target", label="near")])
    context = make_context(target, middle, outer, near)

    merged = MergedMetadata.from_aggregates(
        [[meta("com.example.Outer")], [meta("com.example.Near")]],
        context=context,
    )

    found = merged.get("com.example.Target")
    assert found.depth == 1
    assert found.aggregate_index == 1
    assert found.get("label") == "near"


def test_convention_maps_same_named_attributes_except_value() -> None:
    site = declaration(
        "com.example.Site",
        attr("name"),
        attr("value"),
        meta=[meta("com.example.Component", value="meta-value")],
    )
    context = make_context(site, COMPONENT)
    merged = MergedMetadata.from_declared(
        [meta("com.example.Site", name="svc", value="site-value")],
        context=context,
    )

    component = merged.get("com.example.Component")

    assert component.get("name") == "svc"
    assert component.get("value") == "meta-value"


def test_convention_restricted_names_are_configurable() -> None:
    site = declaration(
        "com.example.Site",
        attr("value"),
        meta=[meta("com.example.Component", value="meta-value")],
    )
    context = dataclasses.replace(
        make_context(site, COMPONENT),
        convention_restricted=frozenset(),
    )
    merged = MergedMetadata.from_declared(
        [meta("com.example.Site", value="site-value")], context=context
    )

    assert merged.get("com.example.Component").get("value") == "site-value"


def test_meta_literal_applies_when_nothing_overrides_it() -> None:
    site = declaration("com.example.Site", meta=[meta("com.example.Component", name="fixed")])
    context = make_context(site, COMPONENT)
    merged = MergedMetadata.from_declared([meta("com.example.Site")], context=context)

    assert merged.get("com.example.Component").get("name") == "fixed"


def test_alias_chain_resolves_like_its_ultimate_target() -> None:
    inner = declaration("com.example.Inner", attr("y"))
    middle = declaration(
        "com.example.Middle",
        attr("x", alias=alias_for("com.example.Inner", "y")),
        meta=[meta("com.example.Inner")],
    )
    outer = declaration(
        "com.example.Outer",
        attr("a", alias=alias_for("com.example.Middle", "x")),
        meta=[meta("com.example.Middle")],
    )
    context = make_context(outer, middle, inner)
    merged = MergedMetadata.from_declared([meta("com.example.Outer", a="deep")], context=context)

    through_aliases = merged.get("com.example.Inner").get("y")
    direct = view_of("com.example.Inner", {"y": "deep"}, context=context).get("y")

    assert through_aliases == direct == "deep"
    assert merged.get("com.example.Middle").get("x") == "deep"


def test_explicit_mirrors_through_meta_declaration() -> None:
    site = declaration(
        "com.example.Site",
        attr("a", alias=alias_for("com.example.Component", "name")),
        attr("b", alias=alias_for("com.example.Component", "name")),
        meta=[meta("com.example.Component")],
    )
    context = make_context(site, COMPONENT)
    merged = MergedMetadata.from_declared([meta("com.example.Site", b="B")], context=context)

    root = merged.get("com.example.Site")
    assert root.get("a") == "B"
    assert merged.get("com.example.Component").get("name") == "B"


def test_aliased_override_shadows_meta_literal_of_mirror() -> None:
    pair = declaration(
        "com.example.Pair",
        attr("p", alias=alias_for(attribute="q")),
        attr("q", alias=alias_for(attribute="p")),
    )
    site = declaration(
        "com.example.Site",
        attr("z", alias=alias_for("com.example.Pair", "q")),
        meta=[meta("com.example.Pair", p="P")],
    )
    context = make_context(site, pair)

    overridden = MergedMetadata.from_declared([meta("com.example.Site", z="Z")], context=context)
    untouched = MergedMetadata.from_declared([meta("com.example.Site")], context=context)

    assert overridden.get("com.example.Pair").get("p") == "Z"
    assert overridden.get("com.example.Pair").get("q") == "Z"
    assert untouched.get("com.example.Pair").get("q") == "P"


def test_resolution_is_idempotent() -> None:
    context = make_context(SERVICE, COMPONENT)
    merged = MergedMetadata.from_declared(
        [meta("com.example.Service", name="test")], context=context
    )
    component = merged.get("com.example.Component")

    assert component.get("name") == component.get("name")
    assert component.synthesize() is component.synthesize()
