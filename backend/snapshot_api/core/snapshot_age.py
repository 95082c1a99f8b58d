"""Snapshot Age — pure filtering of snapshot listings by creation time.

Invariants:
    - A snapshot qualifies iff (now - time_created) > days * 24 hours (strict)
    - Snapshots without time_created are skipped, never included
    - Input order is preserved (provider page order, no sort)
    - now is supplied by the caller and applied uniformly across all pages

Design Decisions:
    - Works on any object exposing name / id / time_created: the Azure SDK
      Snapshot model satisfies it, and tests use plain fakes
"""

from collections.abc import Iterable, Iterator
from datetime import datetime, timedelta, timezone
from typing import Any


def snapshot_age(time_created: datetime, now: datetime) -> timedelta:
    """Elapsed time since creation. Naive timestamps are treated as UTC."""
    if time_created.tzinfo is None:
        time_created = time_created.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now - time_created


def is_older_than(time_created: datetime, days: int, now: datetime) -> bool:
    """True iff the age in hours is strictly greater than days * 24.

    Compared as float hours: `days` may exceed what timedelta can hold.
    """
    age_hours = snapshot_age(time_created, now).total_seconds() / 3600
    return age_hours > days * 24


def filter_older_than(
    snapshots: Iterable[Any], days: int, now: datetime,
) -> Iterator[Any]:
    """Yield snapshots created strictly more than `days` days before `now`."""
    for snapshot in snapshots:
        created = getattr(snapshot, "time_created", None)
        if created is None:
            continue
        if is_older_than(created, days, now):
            yield snapshot
