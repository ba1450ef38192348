"""Staleness policy for persisted records."""

from __future__ import annotations

from datetime import timedelta

from .codec import now_ms
from .models import CachedRecord


def record_age(record: CachedRecord, now: int | None = None) -> timedelta:
    """Age of a record relative to `now` (epoch millis, defaults to wall clock)."""
    current = now_ms() if now is None else now
    return timedelta(milliseconds=current - record.timestamp)


def is_usable(record: CachedRecord, max_age: timedelta | None, now: int | None = None) -> bool:
    """
    Decide whether a record may be served.

    Without a max age a record never goes stale; explicit removal is the
    only way to invalidate it. With a max age the record is usable while
    its age is at most `max_age`; strictly older is stale.

    Args:
        record: Persisted record
        max_age: Maximum age, or None for no expiry
        now: Current time in epoch milliseconds (defaults to wall clock)

    Returns:
        True if the record is usable
    """
    if max_age is None:
        return True
    return record_age(record, now) <= max_age
