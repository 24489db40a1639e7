# barberbook/core.py

"""Half-open time interval helpers used by availability and booking."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, List

from barberbook.errors import ValidationError


@dataclass(frozen=True, order=True)
class Interval:
    """[start, end) with start < end."""

    start: datetime
    end: datetime

    def __post_init__(self):
        if as_utc(self.start) >= as_utc(self.end):
            raise ValidationError("interval start must be before its end")

    @property
    def duration(self) -> timedelta:
        # absolute length, also across a DST change
        return as_utc(self.end) - as_utc(self.start)


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    # touching intervals do not overlap
    return a_start < b_end and b_start < a_end


def subtract(base: Iterable[Interval], cut: Iterable[Interval]) -> List[Interval]:
    """Remove every interval of ``cut`` from every interval of ``base``.

    Each cut is applied to the output of the previous one, so a single cut
    spanning several base intervals trims all of them. A cut strictly inside
    a base interval splits it in two.
    """
    out = list(base)
    for c in cut:
        remaining = []
        for b in out:
            if not overlaps(b.start, b.end, c.start, c.end):
                remaining.append(b)
                continue
            if c.start > b.start:
                remaining.append(Interval(b.start, c.start))
            if c.end < b.end:
                remaining.append(Interval(c.end, b.end))
        out = remaining
    return out


def contains(outer: Interval, inner: Interval) -> bool:
    return outer.start <= inner.start and inner.end <= outer.end


def covered_by_any(intervals: Iterable[Interval], inner: Interval) -> bool:
    return any(contains(i, inner) for i in intervals)


def tile(interval: Interval, step: timedelta) -> List[Interval]:
    """Split ``interval`` into back-to-back pieces of exactly ``step``.

    The last piece may end exactly at ``interval.end``; a remainder shorter
    than ``step`` is dropped.
    """
    if step <= timedelta(0):
        raise ValidationError("slot length must be positive")

    pieces = []
    current = interval.start
    while current + step <= interval.end:
        pieces.append(Interval(current, current + step))
        current += step
    return pieces


def sort_intervals(intervals: Iterable[Interval]) -> List[Interval]:
    return sorted(intervals, key=lambda i: i.start)


def as_utc(dt: datetime) -> datetime:
    """Aware UTC datetime.

    Timestamps are written and queried as aware UTC. Backends that drop the
    offset on read (SQLite) hand back naive values, which are UTC already.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def require_aware(dt: datetime, name: str) -> datetime:
    if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
        raise ValidationError(f"{name} must include a timezone offset")
    return dt
