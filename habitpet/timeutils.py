"""Time helpers shared by the decay and streak rules.

Every rule receives ``now`` explicitly. These helpers only compare instants
that were handed in; none of them reads the clock.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional


def as_aware(moment: datetime) -> datetime:
    """Return ``moment`` with a timezone, treating naive values as UTC."""

    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def elapsed_seconds(since: datetime, now: datetime) -> float:
    """Seconds between two instants, tolerant of naive/aware mixes."""

    return (as_aware(now) - as_aware(since)).total_seconds()


def elapsed_hours(since: datetime, now: datetime) -> float:
    return elapsed_seconds(since, now) / 3600.0


def whole_hours(since: datetime, now: datetime) -> int:
    """Completed hours between two instants (floored, never negative)."""

    return max(0, int(elapsed_seconds(since, now) // 3600))


def fallback(moment: Optional[datetime], default: datetime) -> datetime:
    """Return ``moment`` or ``default`` when the event never happened."""

    return moment if moment is not None else default


def calendar_day(moment: datetime, reference: datetime) -> date:
    """Calendar date of ``moment`` as seen in ``reference``'s timezone.

    When both values are naive they are compared as-is, so hosts that store
    local wall-clock times keep their own notion of "today".
    """

    if moment.tzinfo is None and reference.tzinfo is None:
        return moment.date()
    return as_aware(moment).astimezone(as_aware(reference).tzinfo).date()


def today(now: datetime) -> date:
    return calendar_day(now, now)


def yesterday(now: datetime) -> date:
    return today(now) - timedelta(days=1)
