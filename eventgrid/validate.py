"""Event validation helpers (editor-facing).

The layout engine assumes end >= start for every event it sees; this module
is where incoming events are checked before they get there.
"""

from __future__ import annotations

import datetime as dt
from typing import Any, List, Optional, Sequence

from .config import cfg_tzinfo, normalize_cfg
from .model import EVENT_COLORS, CalendarConfig, CalendarEvent
from .util.tz import epoch_ms, local_datetime

UNTITLED = "(no title)"


class EventValidationError(ValueError):
    """Raised when one or more events fail validation."""

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) if self.errors else "invalid event")


def _require(cond: bool, msg: str, errs: List[str]) -> None:
    if not cond:
        errs.append(msg)


def validate_event_fields(
    *,
    start: dt.datetime,
    end: dt.datetime,
    all_day: bool,
    color: str = "sky",
    cfg: Optional[CalendarConfig] = None,
) -> List[str]:
    """Check edited fields; returns a list of error strings (empty when valid).

    Timed events must start and end within the visible hour range; the end
    bound is inclusive so an event may end exactly at end_hour.
    """
    c = normalize_cfg(cfg)
    errs: List[str] = []
    start_hour, end_hour = int(c["start_hour"]), int(c["end_hour"])

    if not all_day:
        for label, v in (("start", start), ("end", end)):
            hour = v.hour + v.minute / 60.0
            if v.date() > start.date() and v.hour == 0 and v.minute == 0 and end_hour == 24:
                hour = 24.0
            _require(
                start_hour <= hour <= end_hour,
                f"Selected {label} time must be between {start_hour}:00 and {end_hour}:00",
                errs,
            )

    _require(end >= start, "End date cannot be before start date", errs)
    _require(color in EVENT_COLORS, f"Unknown color: {color!r}", errs)
    return errs


def build_event(
    *,
    event_id: str,
    title: str,
    start: dt.datetime,
    end: dt.datetime,
    all_day: bool = False,
    color: str = "sky",
    description: Optional[str] = None,
    location: Optional[str] = None,
    cfg: Optional[CalendarConfig] = None,
) -> CalendarEvent:
    """Validate edited fields and build the event to propose to the store.

    All-day events are normalised to 00:00 on the start date through
    23:59:59.999 on the end date; an empty title becomes "(no title)".
    Raises EventValidationError.
    """
    c = normalize_cfg(cfg)
    tz = cfg_tzinfo(c)

    if all_day:
        start = dt.datetime.combine(start.date(), dt.time(0, 0))
        end = dt.datetime.combine(end.date(), dt.time(23, 59, 59, 999000))

    errs = validate_event_fields(start=start, end=end, all_day=all_day, color=color, cfg=c)
    if errs:
        raise EventValidationError(errs)

    return CalendarEvent(
        id=event_id,
        title=title if title.strip() else UNTITLED,
        start_ms=epoch_ms(start, tz),
        end_ms=epoch_ms(end, tz),
        all_day=bool(all_day),
        color=color,
        description=description or None,
        location=location or None,
    )


def validate_events(events: Sequence[Any], cfg: Optional[CalendarConfig] = None) -> List[str]:
    """Collection-level checks for events headed into the engine."""
    c = normalize_cfg(cfg)
    tz = cfg_tzinfo(c)
    errs: List[str] = []
    seen: set[str] = set()
    for i, ev in enumerate(events):
        if not isinstance(ev, CalendarEvent):
            errs.append(f"events[{i}] must be CalendarEvent")
            continue
        _require(bool(ev.id), f"events[{i}].id must be non-empty", errs)
        if ev.id in seen:
            errs.append(f"events[{i}]: duplicate id {ev.id!r}")
        seen.add(ev.id)
        _require(ev.end_ms >= ev.start_ms, f"events[{i}] ({ev.id}): end before start", errs)
        _require(ev.color in EVENT_COLORS, f"events[{i}] ({ev.id}): unknown color {ev.color!r}", errs)
        if ev.all_day:
            s = local_datetime(ev.start_ms, tz)
            _require(
                (s.hour, s.minute, s.second) == (0, 0, 0),
                f"events[{i}] ({ev.id}): all-day event must start at local midnight",
                errs,
            )
    return errs


def assert_valid_events(events: Sequence[Any], cfg: Optional[CalendarConfig] = None) -> None:
    errs = validate_events(events, cfg)
    if errs:
        raise EventValidationError(errs)


def time_options(cfg: Optional[CalendarConfig] = None) -> List[tuple[str, str]]:
    """(value, label) pairs in 15-minute steps across the visible hour range."""
    c = normalize_cfg(cfg)
    out: List[tuple[str, str]] = []
    for hour in range(int(c["start_hour"]), min(int(c["end_hour"]), 23) + 1):
        for minute in range(0, 60, 15):
            t = dt.time(hour, minute)
            label = f"{(hour % 12) or 12}:{minute:02d} {'AM' if hour < 12 else 'PM'}"
            out.append((t.strftime("%H:%M"), label))
    return out
