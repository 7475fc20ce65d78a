# eventgrid/snap.py
from __future__ import annotations

import datetime as dt

from .config import SNAP_MIN
from .util.tz import epoch_ms, local_datetime


def snap_minute(minute: float) -> int:
    """Quantise a minute value to the 15-minute grid.

    remainder < 7.5 rounds down, otherwise up (7 -> down, 8 -> up). Values
    already on the grid are returned unchanged.
    """
    r = float(minute) % SNAP_MIN
    if r < SNAP_MIN / 2:
        return int(round(float(minute) - r))
    return int(round(float(minute) + (SNAP_MIN - r)))


def wall_clock_ms(day: dt.date, minute: float, tz: dt.tzinfo) -> int:
    """Instant of the wall-clock time `minute` minutes after midnight of `day` in `tz`.

    Offsets outside [0, 1440) roll into the neighbouring days. Wall times
    skipped by a DST change resolve with the pre-transition offset.
    """
    naive = dt.datetime.combine(day, dt.time(0, 0)) + dt.timedelta(minutes=float(minute))
    return epoch_ms(naive, tz)


def snap_ms(ms: int, tz: dt.tzinfo) -> int:
    """Snap an instant to the grid of its local wall clock, carrying into the next hour/day."""
    local = local_datetime(ms, tz)
    minute = local.hour * 60 + local.minute + (local.second + local.microsecond / 1e6) / 60.0
    return snap_day_minute(local.date(), minute, tz)


def snap_day_minute(day: dt.date, minute: float, tz: dt.tzinfo) -> int:
    """Instant for a (possibly out-of-range) wall-clock minute of `day`, snapped."""
    return wall_clock_ms(day, snap_minute(minute), tz)
