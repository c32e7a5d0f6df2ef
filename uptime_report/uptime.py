"""Split an elapsed duration into whole days, hours and minutes."""

from __future__ import annotations

import datetime


def decompose(elapsed: datetime.timedelta) -> tuple[int, int, int]:
    """Return ``(days, hours, minutes)`` for a non-negative *elapsed*.

    Each component is floored; hours are 0-23 and minutes 0-59.
    Raises ValueError for a negative duration.
    """
    total_seconds = int(elapsed.total_seconds())
    if total_seconds < 0:
        raise ValueError(f"negative uptime ({elapsed}); boot time is in the future")
    days, remainder = divmod(total_seconds, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, _seconds = divmod(remainder, 60)
    return days, hours, minutes


def uptime_between(boot: datetime.datetime, now: datetime.datetime) -> tuple[int, int, int]:
    # Naive timestamps are taken as UTC
    if boot.tzinfo is None:
        boot = boot.replace(tzinfo=datetime.timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=datetime.timezone.utc)
    return decompose(now - boot)
