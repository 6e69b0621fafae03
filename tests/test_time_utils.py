"""Time helper tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from app.utils.time import next_after, parse_timestamp


def test_parse_timestamp_with_z_suffix() -> None:
    """ISO strings with a Z suffix should parse as UTC."""
    result = parse_timestamp("2026-02-07T10:30:00Z")
    assert result == datetime(2026, 2, 7, 10, 30, tzinfo=UTC)


def test_parse_timestamp_naive_value_is_utc() -> None:
    """Naive datetimes should be treated as UTC."""
    result = parse_timestamp(datetime(2026, 2, 7, 10, 30))
    assert result.tzinfo is UTC


def test_parse_timestamp_with_default() -> None:
    """Missing input should return default value when provided."""
    default = datetime(2026, 2, 1, tzinfo=UTC)
    assert parse_timestamp(None, default=default) == default
    assert parse_timestamp("", default=default) == default


def test_next_after_never_moves_backwards() -> None:
    """A candidate at or before the previous value should be bumped past it."""
    previous = datetime(2026, 2, 7, 12, 0, tzinfo=UTC)
    assert next_after(previous, previous - timedelta(hours=1)) > previous
    assert next_after(previous, previous) > previous


def test_next_after_keeps_later_candidate() -> None:
    """A later candidate should be returned unchanged."""
    previous = datetime(2026, 2, 7, 12, 0, tzinfo=UTC)
    later = previous + timedelta(seconds=5)
    assert next_after(previous, later) == later
