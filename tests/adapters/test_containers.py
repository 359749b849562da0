from __future__ import annotations

import pytest

from metamerge.adapters.containers import (
    ExplicitRepeatableContainers,
    no_repeatables,
    repeatables_of,
    standard_repeatables,
)
from metamerge.domain.errors import ConfigurationError
from metamerge.domain.model import LiteralPayload
from tests.helpers.declarations import FakeTypeResolver, attr, declaration, meta

SCHEDULE = declaration(
    "com.example.Schedule",
    attr("cron"),
    meta=[meta("metamerge.repeatable", value="com.example.Schedules")],
)
SCHEDULES = declaration(
    "com.example.Schedules",
    attr("value", "nested<com.example.Schedule>[]", None),
)
NOTE = declaration("com.example.Note", attr("text"))
NOTES = declaration("com.example.Notes", attr("value", "nested<com.example.Note>[]", None))

RESOLVER = FakeTypeResolver([SCHEDULE, SCHEDULES, NOTE, NOTES])

DAILY = LiteralPayload.of(cron="@daily")
HOURLY = LiteralPayload.of(cron="@hourly")


def test_standard_containers_expand_marked_repeatables() -> None:
    item = meta("com.example.Schedules", value=[DAILY, HOURLY])

    expanded = list(standard_repeatables().expand(item, RESOLVER))

    assert expanded == [(SCHEDULE, DAILY), (SCHEDULE, HOURLY)]


def test_standard_containers_ignore_unmarked_arrays() -> None:
    item = meta("com.example.Notes", value=[{"text": "a"}])

    expanded = list(standard_repeatables().expand(item, RESOLVER))

    assert expanded == [(NOTES, item.payload)]


def test_non_container_expands_into_itself() -> None:
    item = meta("com.example.Schedule", cron="@daily")

    assert list(standard_repeatables().expand(item, RESOLVER)) == [(SCHEDULE, item.payload)]


def test_no_repeatables_never_expands() -> None:
    item = meta("com.example.Schedules", value=[DAILY])

    assert list(no_repeatables().expand(item, RESOLVER)) == [(SCHEDULES, item.payload)]


def test_explicit_registration_needs_no_marker() -> None:
    containers = repeatables_of(NOTE, NOTES)
    item = meta("com.example.Notes", value=[{"text": "a"}, {"text": "b"}])

    expanded = list(containers.expand(item, RESOLVER))

    assert [payload["text"] for _, payload in expanded] == ["a", "b"]
    assert isinstance(containers, ExplicitRepeatableContainers)


def test_explicit_registrations_chain() -> None:
    containers = standard_repeatables().and_(NOTE, NOTES)

    notes = list(containers.expand(meta("com.example.Notes", value=[{"text": "a"}]), RESOLVER))
    schedules = list(containers.expand(meta("com.example.Schedules", value=[DAILY]), RESOLVER))

    assert [item.type_id for item, _ in notes] == ["com.example.Note"]
    assert schedules == [(SCHEDULE, DAILY)]


def test_explicit_container_must_hold_array_of_repeatable() -> None:
    with pytest.raises(ConfigurationError, match="must declare a 'value' attribute"):
        repeatables_of(SCHEDULE, NOTES)


def test_explicit_container_defaults_to_marked_container() -> None:
    containers = repeatables_of(SCHEDULE, resolver=RESOLVER)
    item = meta("com.example.Schedules", value=[DAILY, HOURLY])

    assert containers == repeatables_of(SCHEDULE, SCHEDULES)
    assert list(containers.expand(item, RESOLVER)) == [(SCHEDULE, DAILY), (SCHEDULE, HOURLY)]


def test_container_lookup_requires_marker_and_resolver() -> None:
    with pytest.raises(ConfigurationError, match="must carry a metamerge.repeatable marker"):
        repeatables_of(NOTE, resolver=RESOLVER)
    with pytest.raises(ValueError, match="resolver is required"):
        repeatables_of(SCHEDULE)


def test_containers_are_hashable_values() -> None:
    assert repeatables_of(NOTE, NOTES) == repeatables_of(NOTE, NOTES)
    assert hash(standard_repeatables()) == hash(standard_repeatables())
    assert standard_repeatables() != no_repeatables()
