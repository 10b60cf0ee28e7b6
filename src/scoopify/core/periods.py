"""Calendar arithmetic for report windows.

All boundaries are UTC. A period's ``end`` is the last representable
microsecond inside it, so ``start <= moment <= end`` is the membership test
used both here and in the aggregate queries.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone

_ONE_MICROSECOND = timedelta(microseconds=1)


def as_utc(moment: datetime) -> datetime:
    """Return ``moment`` as an aware UTC datetime; naive values are taken as UTC."""

    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class ReportPeriod:
    """Closed ``[start, end]`` interval of time."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError("period end precedes its start")

    def contains(self, moment: datetime) -> bool:
        return self.start <= as_utc(moment) <= self.end

    def to_dict(self) -> dict[str, str]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


def _midnight(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min, tzinfo=timezone.utc)


def week_period(now: datetime) -> ReportPeriod:
    """Monday 00:00 through Sunday 23:59:59.999999 of the week containing ``now``."""

    current = as_utc(now)
    start = _midnight(current) - timedelta(days=current.weekday())
    return ReportPeriod(start=start, end=start + timedelta(days=7) - _ONE_MICROSECOND)


def _first_of_next_month(start: datetime) -> datetime:
    if start.month == 12:
        return start.replace(year=start.year + 1, month=1)
    return start.replace(month=start.month + 1)


def month_period(now: datetime) -> ReportPeriod:
    """Calendar month containing ``now``."""

    start = _midnight(as_utc(now)).replace(day=1)
    return ReportPeriod(start=start, end=_first_of_next_month(start) - _ONE_MICROSECOND)


def previous_month_period(now: datetime) -> ReportPeriod:
    current = month_period(now)
    return month_period(current.start - _ONE_MICROSECOND)


def trailing_window(now: datetime, days: int) -> ReportPeriod:
    """The ``days`` days leading up to and including ``now``."""

    if days < 0:
        raise ValueError("days must be non-negative")
    end = as_utc(now)
    return ReportPeriod(start=end - timedelta(days=days), end=end)


def preceding_window(now: datetime, days: int) -> ReportPeriod:
    """The ``days`` days immediately before ``trailing_window(now, days)``."""

    recent = trailing_window(now, days)
    return ReportPeriod(start=recent.start - timedelta(days=days), end=recent.start - _ONE_MICROSECOND)


def recent_weeks(now: datetime, count: int) -> list[ReportPeriod]:
    """``count`` consecutive weeks ending with the current one, oldest first."""

    current = as_utc(now)
    return [week_period(current - timedelta(days=7 * offset)) for offset in range(count - 1, -1, -1)]


__all__ = [
    "ReportPeriod",
    "as_utc",
    "month_period",
    "preceding_window",
    "previous_month_period",
    "recent_weeks",
    "trailing_window",
    "utcnow",
    "week_period",
]
