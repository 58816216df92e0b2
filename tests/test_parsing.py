from datetime import datetime, timedelta, timezone

import pytest

from metacat.core.errors import InvalidArgument
from metacat.core.models import RunState, SourceType
from metacat.core.parsing import (
    format_instant,
    millis_between,
    parse_enum,
    parse_instant,
    parse_string_map,
    parse_uri,
    parse_uuid,
)

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_parse_enum_is_case_sensitive():
    assert parse_enum(SourceType, "POSTGRESQL") is SourceType.POSTGRESQL
    with pytest.raises(InvalidArgument, match="expected one of"):
        parse_enum(SourceType, "postgresql")


@pytest.mark.parametrize(
    "value",
    [
        "postgresql://db:5432/app",
        "jdbc:postgresql://localhost:5432/orders",
        "file:///tmp/schema.avsc",
        "kafka://broker:9092",
    ],
)
def test_parse_uri_accepts_absolute_uris(value: str):
    assert parse_uri(value) == value


@pytest.mark.parametrize("value", ["", "   ", "/relative/path", "not a uri", None])
def test_parse_uri_rejects_malformed_values(value):
    with pytest.raises(InvalidArgument):
        parse_uri(value)


def test_parse_uuid_rejects_malformed_ids():
    with pytest.raises(InvalidArgument, match="Malformed run id"):
        parse_uuid("not-a-uuid")


def test_parse_instant_converts_offsets_to_utc():
    assert parse_instant("2024-01-01T00:00:00Z") == T0
    assert parse_instant("2024-01-01T02:00:00+02:00") == T0


def test_parse_instant_rejects_local_datetimes():
    with pytest.raises(InvalidArgument, match="UTC offset"):
        parse_instant("2024-01-01T00:00:00")


@pytest.mark.parametrize(
    "delta, expected",
    [
        (timedelta(0), "2024-01-01T00:00:00Z"),
        (timedelta(milliseconds=250), "2024-01-01T00:00:00.250Z"),
        (timedelta(microseconds=250_001), "2024-01-01T00:00:00.250001Z"),
    ],
)
def test_format_instant_prints_fraction_only_when_present(delta, expected):
    assert format_instant(T0 + delta) == expected


def test_format_instant_renders_in_utc():
    plus_two = timezone(timedelta(hours=2))
    assert format_instant(datetime(2024, 1, 1, 2, tzinfo=plus_two)) == (
        "2024-01-01T00:00:00Z"
    )


@pytest.mark.parametrize(
    "delta, expected",
    [
        (timedelta(milliseconds=1500), 1500),
        (timedelta(microseconds=1999), 1),
        (timedelta(microseconds=-1500), -1),
        (timedelta(days=1), 86_400_000),
    ],
)
def test_millis_between_truncates_toward_zero(delta, expected):
    assert millis_between(T0, T0 + delta) == expected


def test_parse_string_map_requires_string_values():
    assert parse_string_map(None, label="Run args") == {}
    with pytest.raises(InvalidArgument, match="Run args"):
        parse_string_map({"retries": 3}, label="Run args")


def test_run_state_transitions():
    assert RunState.NEW.can_transition_to(RunState.RUNNING)
    assert not RunState.NEW.can_transition_to(RunState.COMPLETED)
    assert RunState.RUNNING.can_transition_to(RunState.FAILED)
    assert RunState.ABORTED.is_terminal
    assert not any(RunState.COMPLETED.can_transition_to(s) for s in RunState)
