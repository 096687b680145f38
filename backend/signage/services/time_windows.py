"""Day-of-week / time-of-day window matching in a screen's local wall clock.

Days of week follow the persisted convention 0=Sunday .. 6=Saturday.
A window whose end is not after its start wraps past midnight.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

_logger = logging.getLogger("signage.time_windows")


@dataclass(frozen=True)
class TimeWindow:
    days_of_week: frozenset[int] | None = None
    start: time | None = None
    end: time | None = None
    start_date: date | None = None
    end_date: date | None = None

    @classmethod
    def build(
        cls,
        *,
        days_of_week: Iterable[int] | None = None,
        start: time | None = None,
        end: time | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> "TimeWindow":
        return cls(
            days_of_week=frozenset(days_of_week) if days_of_week is not None else None,
            start=start,
            end=end,
            start_date=start_date,
            end_date=end_date,
        )


@dataclass(frozen=True)
class LocalClock:
    instant: datetime
    date: date
    time: time
    day_of_week: int
    timezone: str


def day_of_week(value: date) -> int:
    return (value.weekday() + 1) % 7


def is_overnight(window: TimeWindow) -> bool:
    if window.start is None or window.end is None:
        return False
    return window.end <= window.start


def window_matches(
    now_time: time,
    now_dow: int,
    window: TimeWindow,
    *,
    now_date: date | None = None,
) -> bool:
    if now_date is not None:
        if window.start_date is not None and now_date < window.start_date:
            return False
        if window.end_date is not None and now_date > window.end_date:
            return False

    if window.days_of_week is not None and now_dow not in window.days_of_week:
        return False

    start = window.start
    end = window.end
    if start is None and end is None:
        return True
    if end is None:
        return now_time >= start
    if start is None:
        return now_time < end

    if end > start:
        return start <= now_time < end
    # Overnight. start == end lands here too and matches around the clock.
    return now_time >= start or now_time < end


def resolve_timezone(name: str | None, default: str = "UTC") -> ZoneInfo:
    candidate = (name or "").strip() or default
    try:
        return ZoneInfo(candidate)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        _logger.warning("unknown timezone=%r, falling back to %s", candidate, default)
        try:
            return ZoneInfo(default)
        except (ZoneInfoNotFoundError, ValueError, OSError):
            return ZoneInfo("UTC")


def local_clock(now: datetime, timezone_name: str | None, *, default: str = "UTC") -> LocalClock:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    zone = resolve_timezone(timezone_name, default)
    local = now.astimezone(zone)
    return LocalClock(
        instant=local,
        date=local.date(),
        time=local.time().replace(tzinfo=None),
        day_of_week=day_of_week(local.date()),
        timezone=zone.key,
    )


def clock_matches(clock: LocalClock, window: TimeWindow) -> bool:
    return window_matches(clock.time, clock.day_of_week, window, now_date=clock.date)
