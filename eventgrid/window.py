# eventgrid/window.py
"""View windowing: which dates a view renders and which events belong to each date."""

from __future__ import annotations

import calendar
import datetime as dt
from typing import Iterable, List, Optional

from .config import normalize_cfg
from .interval import day_bounds, is_multi_day, spans_date, touches_day
from .model import VIEW_KINDS, CalendarConfig, CalendarEvent, ViewWindow
from .util.tz import local_date

_SHORTCUTS = {"m": "month", "w": "week", "d": "day", "a": "agenda"}


def _check_view(view: str) -> str:
    v = str(view or "").strip().lower()
    if v not in VIEW_KINDS:
        raise ValueError(f"Unknown view kind: {view!r} (expected one of {', '.join(VIEW_KINDS)})")
    return v


def week_start_of(day: dt.date, week_start: int) -> dt.date:
    """First date of the week containing `day`; week_start uses 0=Sunday."""
    sunday_based = (day.weekday() + 1) % 7
    return day - dt.timedelta(days=(sunday_based - int(week_start)) % 7)


def _date_range(start: dt.date, days: int) -> tuple[dt.date, ...]:
    return tuple(start + dt.timedelta(days=i) for i in range(days))


def build_view_window(anchor: dt.date, view: str, cfg: Optional[CalendarConfig] = None) -> ViewWindow:
    v = _check_view(view)
    c = normalize_cfg(cfg)
    week_start = int(c["week_start"])

    if v == "day":
        return ViewWindow(view=v, anchor=anchor, dates=(anchor,))

    if v == "week":
        return ViewWindow(view=v, anchor=anchor, dates=_date_range(week_start_of(anchor, week_start), 7))

    if v == "month":
        month_start = anchor.replace(day=1)
        month_end = anchor.replace(day=calendar.monthrange(anchor.year, anchor.month)[1])
        grid_start = week_start_of(month_start, week_start)
        grid_end = week_start_of(month_end, week_start) + dt.timedelta(days=6)
        dates = _date_range(grid_start, (grid_end - grid_start).days + 1)
        outside = frozenset(d for d in dates if (d.year, d.month) != (anchor.year, anchor.month))
        return ViewWindow(view=v, anchor=anchor, dates=dates, outside=outside)

    return ViewWindow(view=v, anchor=anchor, dates=_date_range(anchor, int(c["agenda_days"])))


# --- per-date selectors --------------------------------------------------------


def timed_events_for_day(events: Iterable[CalendarEvent], day: dt.date, tz: dt.tzinfo) -> List[CalendarEvent]:
    """Timed (non-all-day, single-day) events touching `day`; these go to column packing."""
    day_start, day_end = day_bounds(day, tz)
    out: List[CalendarEvent] = []
    for ev in events:
        if is_multi_day(ev, tz):
            continue
        if touches_day(ev.start_ms, ev.end_ms, day_start, day_end):
            out.append(ev)
    return out


def spanning_events_for_day(events: Iterable[CalendarEvent], day: dt.date, tz: dt.tzinfo) -> List[CalendarEvent]:
    """All-day and multi-day events touching `day`; these go to the all-day band."""
    return [ev for ev in events if is_multi_day(ev, tz) and spans_date(ev, day, tz)]


def events_starting_on_day(events: Iterable[CalendarEvent], day: dt.date, tz: dt.tzinfo) -> List[CalendarEvent]:
    out = [ev for ev in events if local_date(ev.start_ms, tz) == day]
    out.sort(key=lambda e: (e.start_ms, e.id))
    return out


def all_events_for_day(events: Iterable[CalendarEvent], day: dt.date, tz: dt.tzinfo) -> List[CalendarEvent]:
    return [ev for ev in events if spans_date(ev, day, tz)]


def agenda_events_for_day(events: Iterable[CalendarEvent], day: dt.date, tz: dt.tzinfo) -> List[CalendarEvent]:
    out = all_events_for_day(events, day, tz)
    out.sort(key=lambda e: (e.start_ms, e.id))
    return out


def sort_events(events: Iterable[CalendarEvent], tz: dt.tzinfo) -> List[CalendarEvent]:
    """Month-cell order: all-day/multi-day first, then by start, then id."""
    return sorted(events, key=lambda e: (0 if is_multi_day(e, tz) else 1, e.start_ms, e.id))


# --- navigation ----------------------------------------------------------------


def _add_months(d: dt.date, months: int) -> dt.date:
    idx = d.year * 12 + (d.month - 1) + int(months)
    y, m = divmod(idx, 12)
    last = calendar.monthrange(y, m + 1)[1]
    return dt.date(y, m + 1, min(d.day, last))


def shift_anchor(anchor: dt.date, view: str, step: int, cfg: Optional[CalendarConfig] = None) -> dt.date:
    """Move the anchor by `step` pages of the given view (negative = back)."""
    v = _check_view(view)
    if v == "month":
        return _add_months(anchor, step)
    if v == "week":
        return anchor + dt.timedelta(weeks=int(step))
    if v == "day":
        return anchor + dt.timedelta(days=int(step))
    c = normalize_cfg(cfg)
    return anchor + dt.timedelta(days=int(step) * int(c["agenda_days"]))


def _range_title(start: dt.date, end: dt.date) -> str:
    if (start.year, start.month) == (end.year, end.month):
        return f"{start:%B %Y}"
    return f"{start:%b} - {end:%b %Y}"


def view_title(anchor: dt.date, view: str, cfg: Optional[CalendarConfig] = None) -> str:
    v = _check_view(view)
    if v == "day":
        return f"{anchor:%B} {anchor.day}, {anchor.year}"
    if v == "month":
        return f"{anchor:%B %Y}"
    w = build_view_window(anchor, v, cfg)
    return _range_title(w.first, w.last)


def view_for_shortcut(key: str) -> Optional[str]:
    return _SHORTCUTS.get(str(key or "").lower())
