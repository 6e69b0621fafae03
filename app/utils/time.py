"""Time utility helpers."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

_TICK = timedelta(microseconds=1)


def now_utc() -> datetime:
    """Return current timezone-aware UTC datetime."""
    return datetime.now(tz=UTC)


def parse_timestamp(value: str | datetime | None, default: datetime | None = None) -> datetime:
    """Parse a stored timestamp into an aware datetime.

    Accepts ISO strings (with ``Z`` or offset suffixes) and datetimes. Naive
    values are assumed to be UTC. Missing values fall back to ``default`` or
    the current time.
    """
    if value is None or value == "":
        return default or now_utc()

    if isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        parsed = value

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def next_after(previous: datetime | None, candidate: datetime | None = None) -> datetime:
    """Return ``candidate`` (default: now), bumped past ``previous`` if needed.

    Keeps ``updated_at`` from moving backwards when the clock is skewed.
    """
    current = candidate or now_utc()
    if previous is not None and current <= previous:
        return previous + _TICK
    return current
