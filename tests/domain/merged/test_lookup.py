from __future__ import annotations

import pytest

from metamerge.domain.errors import MissingMetadataError
from metamerge.domain.merged import (
    FIRST_DIRECTLY_DECLARED,
    MISSING,
    MergedMetadata,
    first_directly_declared,
    nearest,
)
from tests.helpers.declarations import attr, declaration, make_context, meta

LABEL = declaration("com.example.Label", attr("text"))
GROUP = declaration(
    "com.example.Group",
    attr("name"),
    meta=[meta("com.example.Label", text="from-group")],
)
WRAPPER = declaration("com.example.Wrapper", meta=[meta("com.example.Group", name="wrapped")])


def _merged(*aggregates: list[str], sources: list[object] | None = None) -> MergedMetadata:
    context = make_context(LABEL, GROUP, WRAPPER)
    return MergedMetadata.from_aggregates(
        [[meta(type_id) for type_id in items] for items in aggregates],
        context=context,
        sources=sources,
    )


def test_presence_checks() -> None:
    merged = _merged(["com.example.Wrapper"])

    assert merged.is_present("com.example.Label")
    assert not merged.is_directly_present("com.example.Label")
    assert merged.is_directly_present("com.example.Wrapper")
    assert not merged.is_present("com.example.Unknown")
    assert len(merged) == 3


def test_iteration_orders_by_depth_then_aggregate() -> None:
    merged = _merged(["com.example.Wrapper"], ["com.example.Group", "com.example.Label"])

    ordered = [(view.type_id, view.depth, view.aggregate_index) for view in merged]

    assert ordered == [
        ("com.example.Wrapper", 0, 0),
        ("com.example.Group", 0, 1),
        ("com.example.Label", 0, 1),
        ("com.example.Group", 1, 0),
        ("com.example.Label", 1, 1),
        ("com.example.Label", 2, 0),
    ]


def test_get_all_and_stream_filter_by_type() -> None:
    merged = _merged(["com.example.Wrapper"], ["com.example.Group"])

    labels = merged.get_all("com.example.Label")

    assert [view.depth for view in labels] == [1, 2]
    assert merged.get_all("com.example.Label") is labels
    assert [view.get("text") for view in merged.stream("com.example.Label")] == [
        "from-group",
        "from-group",
    ]


def test_get_uses_nearest_by_default() -> None:
    merged = _merged(["com.example.Wrapper"], ["com.example.Group"])

    group = merged.get("com.example.Group")

    assert group.depth == 0
    assert group.aggregate_index == 1
    assert group.get("name") == ""


def test_get_with_predicate() -> None:
    merged = _merged(["com.example.Wrapper"], ["com.example.Group"])

    wrapped = merged.get("com.example.Group", lambda view: view.get("name") == "wrapped")

    assert wrapped.depth == 1
    assert wrapped.parent is not None
    assert wrapped.parent.type_id == "com.example.Wrapper"


def test_first_directly_declared_selector() -> None:
    merged = _merged(["com.example.Wrapper"], ["com.example.Label"])

    direct = merged.get("com.example.Label", selector=FIRST_DIRECTLY_DECLARED)

    assert direct.is_directly_present
    assert first_directly_declared() is FIRST_DIRECTLY_DECLARED
    assert nearest().select(direct, merged.get_all("com.example.Label")[1]) is direct


def test_get_returns_missing_view() -> None:
    merged = _merged(["com.example.Label"])

    missing = merged.get("com.example.Unknown")

    assert missing is MISSING
    assert not missing.is_present
    assert missing.depth == -1
    assert missing.find("text") is None
    with pytest.raises(MissingMetadataError):
        missing.get("text")
    with pytest.raises(MissingMetadataError):
        missing.synthesize()
    with pytest.raises(MissingMetadataError):
        missing.as_dict()
    assert missing.synthesize_if(lambda _: True) is None
    assert missing.filter_default_values() is missing
    assert str(missing) == "(missing)"


def test_sources_are_attached_to_views() -> None:
    merged = _merged(["com.example.Label"], ["com.example.Group"], sources=["first", "second"])

    assert merged.get("com.example.Group").source == "second"
    assert [view.source for view in merged.get_all("com.example.Label")] == ["first", "second"]


def test_sources_must_match_aggregates() -> None:
    with pytest.raises(ValueError, match="one source per aggregate"):
        _merged(["com.example.Label"], sources=["first", "second"])


def test_unresolvable_and_pruned_declarations_are_ignored() -> None:
    context = make_context(LABEL)
    merged = MergedMetadata.from_declared(
        [meta("com.example.Unknown"), meta("metamerge.repeatable"), meta("com.example.Label")],
        context=context,
    )

    assert [view.type_id for view in merged] == ["com.example.Label"]


def test_repeated_declarations_expand_from_container() -> None:
    schedule = declaration(
        "com.example.Schedule",
        attr("cron"),
        meta=[meta("metamerge.repeatable", value="com.example.Schedules")],
    )
    schedules = declaration(
        "com.example.Schedules",
        attr("value", "nested<com.example.Schedule>[]", None),
    )
    context = make_context(schedule, schedules)
    merged = MergedMetadata.from_declared(
        [meta("com.example.Schedules", value=[{"cron": "@daily"}, {"cron": "@hourly"}])],
        context=context,
    )

    assert [view.get("cron") for view in merged.get_all("com.example.Schedule")] == [
        "@daily",
        "@hourly",
    ]
    assert not merged.is_present("com.example.Schedules")
