# eventgrid/geometry.py
from __future__ import annotations

import datetime as dt
from typing import List, Sequence, Tuple

from .config import cfg_tzinfo, normalize_cfg
from .model import CalendarConfig, CalendarEvent, PositionedEvent
from .packing import pack_columns
from .util.tz import local_datetime


# Columns after the first are overflow lanes: 90% wide, shifted right by 10%
# per column, regardless of how many columns the day uses.
OVERFLOW_LANE_WIDTH = 0.9
OVERFLOW_LANE_STEP = 0.1


def hour_of(ms: int, day: dt.date, tz: dt.tzinfo) -> float:
    """Wall-clock hour of `ms` on `day` (hour + minute/60 + second/3600).

    Read from the local clock, not elapsed time, so rows stay on the hour grid
    across DST changes. The next midnight maps to 24.
    """
    local = local_datetime(ms, tz)
    days = (local.date() - day).days
    return days * 24 + local.hour + local.minute / 60.0 + (local.second + local.microsecond / 1e6) / 3600.0


def top_px(hour: float, start_hour: int, hour_height_px: float) -> float:
    return (hour - start_hour) * hour_height_px


def height_px(start_hour_of_event: float, end_hour_of_event: float, hour_height_px: float) -> float:
    return max(0.0, end_hour_of_event - start_hour_of_event) * hour_height_px


def column_width_fraction(column: int) -> float:
    return 1.0 if column == 0 else OVERFLOW_LANE_WIDTH


def column_left_fraction(column: int) -> float:
    return 0.0 if column == 0 else column * OVERFLOW_LANE_STEP


def position_day(
    day: dt.date,
    items: Sequence[Tuple[CalendarEvent, int, int]],
    cfg: CalendarConfig,
) -> Tuple[PositionedEvent, ...]:
    """Pack one day's clipped timed events into columns and map them to geometry.

    Output keeps packing order (start, longer first, id).
    """
    c = normalize_cfg(cfg)
    tz = cfg_tzinfo(c)
    start_hour = int(c["start_hour"])
    hh = c["hour_height_px"]
    base_z = int(c["base_z"])

    packed = pack_columns(items)
    out: List[PositionedEvent] = []
    for a in packed.assignments:
        s_hour = hour_of(a.start_ms, day, tz)
        e_hour = hour_of(a.end_ms, day, tz)
        out.append(
            PositionedEvent(
                event=a.event,
                day=day,
                column=a.column,
                column_count=packed.column_count,
                column_width_fraction=column_width_fraction(a.column),
                column_left_fraction=column_left_fraction(a.column),
                top_px=top_px(s_hour, start_hour, hh),
                height_px=height_px(s_hour, e_hour, hh),
                z_index=base_z + a.column,
                start_ms=a.start_ms,
                end_ms=a.end_ms,
            )
        )
    return tuple(out)


def minute_at_y(y_px: float, cfg: CalendarConfig) -> float:
    """Inverse of top_px: wall-clock minutes since midnight for a y offset in the time grid."""
    c = normalize_cfg(cfg)
    return int(c["start_hour"]) * 60 + (float(y_px) / float(c["hour_height_px"])) * 60.0


def y_at_minute(minute: float, cfg: CalendarConfig) -> float:
    c = normalize_cfg(cfg)
    return top_px(float(minute) / 60.0, int(c["start_hour"]), c["hour_height_px"])
