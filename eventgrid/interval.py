# eventgrid/interval.py
from __future__ import annotations

import datetime as dt
from typing import Tuple

from .model import CalendarEvent
from .util.tz import MIN_MS, local_date, midnight_epoch_ms


def overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """Half-open interval overlap; touching endpoints do not overlap."""
    return a_start < b_end and b_start < a_end


def duration_min(start_ms: int, end_ms: int) -> float:
    return (int(end_ms) - int(start_ms)) / MIN_MS


def day_bounds(day: dt.date, tz: dt.tzinfo) -> Tuple[int, int]:
    """[midnight, next midnight) of `day` in `tz`, as epoch ms."""
    return midnight_epoch_ms(day, tz), midnight_epoch_ms(day + dt.timedelta(days=1), tz)


def touches_day(start_ms: int, end_ms: int, day_start_ms: int, day_end_ms: int) -> bool:
    # Zero-duration events at or after midnight belong to the day they sit in.
    if start_ms == end_ms:
        return day_start_ms <= start_ms < day_end_ms
    return overlaps(start_ms, end_ms, day_start_ms, day_end_ms)


def clip_to_day(event: CalendarEvent, day: dt.date, tz: dt.tzinfo) -> Tuple[int, int]:
    """Restrict the event to [day_start, next_day_start).

    An event that does not touch the day clips to an empty interval at the
    nearest day boundary.
    """
    day_start, day_end = day_bounds(day, tz)
    start = min(max(int(event.start_ms), day_start), day_end)
    end = max(min(int(event.end_ms), day_end), start)
    return start, end


def is_multi_day(event: CalendarEvent, tz: dt.tzinfo) -> bool:
    if event.all_day:
        return True
    return local_date(event.start_ms, tz) != local_date(event.end_ms, tz)


def spans_date(event: CalendarEvent, day: dt.date, tz: dt.tzinfo) -> bool:
    """True when `day` lies between the event's local start and end dates (inclusive)."""
    return local_date(event.start_ms, tz) <= day <= local_date(event.end_ms, tz)
