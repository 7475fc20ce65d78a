# eventgrid/layout.py
"""Layout pipeline: events -> view window -> column packing -> geometry -> render records.

Every stage is a pure function of (events, anchor, view, cfg, measured sizes,
now). The host re-runs build_view_layout when any of those change.
"""

from __future__ import annotations

import datetime as dt
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .config import cfg_tzinfo, normalize_cfg
from .geometry import position_day
from .interval import clip_to_day, day_bounds
from .model import (
    CalendarConfig,
    CalendarEvent,
    DayLayout,
    NowIndicator,
    PositionedEvent,
    SpanSegment,
    ViewLayout,
    ViewWindow,
)
from .now import compute_now_indicator
from .overflow import compute_overflow, visible_event_count
from .util.tz import local_date
from .window import (
    agenda_events_for_day,
    all_events_for_day,
    build_view_window,
    sort_events,
    spanning_events_for_day,
    timed_events_for_day,
)


def span_segments(
    events: Iterable[CalendarEvent],
    day: dt.date,
    window: ViewWindow,
    tz: dt.tzinfo,
) -> tuple[SpanSegment, ...]:
    """All-day band entries for one date.

    The title shows on the event's first day, or on the window's first date
    when the event started before the window.
    """
    out: List[SpanSegment] = []
    first_visible = day == window.first
    for ev in sort_events(spanning_events_for_day(events, day, tz), tz):
        start_d = local_date(ev.start_ms, tz)
        end_d = local_date(ev.end_ms, tz)
        is_first = day == start_d
        out.append(
            SpanSegment(
                event=ev,
                day=day,
                is_first_day=is_first,
                is_last_day=day == end_d,
                show_title=is_first or (first_visible and start_d < window.first),
            )
        )
    return tuple(out)


def positioned_events_for_day(
    events: Iterable[CalendarEvent],
    day: dt.date,
    cfg: CalendarConfig,
) -> tuple[PositionedEvent, ...]:
    tz = cfg_tzinfo(cfg)
    items = []
    for ev in timed_events_for_day(events, day, tz):
        start, end = clip_to_day(ev, day, tz)
        items.append((ev, start, end))
    return position_day(day, items, cfg)


def build_view_layout(
    events: Sequence[CalendarEvent],
    anchor: dt.date,
    view: str,
    cfg: Optional[CalendarConfig] = None,
    *,
    now_ms: Optional[int] = None,
    cell_content_px: Optional[float] = None,
) -> ViewLayout:
    """Compute render records for every date of the view.

    `cell_content_px` is the measured content height of a month cell; without
    it no overflow records are produced. `now_ms` drives the now indicator and
    today flags (omitted: nothing is today, indicator hidden).
    """
    c = normalize_cfg(cfg)
    tz = cfg_tzinfo(c)
    window = build_view_window(anchor, view, c)
    today = local_date(now_ms, tz) if now_ms is not None else None

    visible_count: Optional[int] = None
    if window.view == "month" and cell_content_px is not None:
        visible_count = visible_event_count(cell_content_px, c["event_height_px"], c["event_gap_px"])

    days: List[DayLayout] = []
    for day in window.dates:
        day_start, _ = day_bounds(day, tz)
        base = dict(day=day, day_start_ms=day_start, outside=day in window.outside, is_today=day == today)

        if window.view in ("day", "week"):
            days.append(
                DayLayout(
                    **base,
                    all_day=span_segments(events, day, window, tz),
                    timed=positioned_events_for_day(events, day, c),
                )
            )
        elif window.view == "month":
            cell = tuple(sort_events(all_events_for_day(events, day, tz), tz))
            overflow = compute_overflow(day, cell, visible_count) if visible_count is not None else None
            days.append(DayLayout(**base, agenda=cell, overflow=overflow))
        else:
            agenda = tuple(agenda_events_for_day(events, day, tz))
            if agenda:
                days.append(DayLayout(**base, agenda=agenda))

    if now_ms is None:
        now = NowIndicator(visible=False, day=None, top_px=0.0, fraction=0.0)
    else:
        now = compute_now_indicator(window, c, now_ms)

    return ViewLayout(window=window, days=tuple(days), now=now)


# --- renderer records ------------------------------------------------------------


def _event_ref(ev: CalendarEvent) -> Dict[str, Any]:
    return {"id": ev.id, "title": ev.title, "color": ev.color, "all_day": ev.all_day}


def layout_to_dict(layout: ViewLayout) -> Dict[str, Any]:
    w = layout.window
    days_out: List[Dict[str, Any]] = []
    for d in layout.days:
        rec: Dict[str, Any] = {
            "date": d.day.isoformat(),
            "day_start_ms": d.day_start_ms,
            "outside": d.outside,
            "is_today": d.is_today,
        }
        if w.view in ("day", "week"):
            rec["all_day"] = [
                {
                    **_event_ref(s.event),
                    "is_first_day": s.is_first_day,
                    "is_last_day": s.is_last_day,
                    "show_title": s.show_title,
                }
                for s in d.all_day
            ]
            rec["timed"] = [
                {
                    **_event_ref(p.event),
                    "start_ms": p.start_ms,
                    "end_ms": p.end_ms,
                    "column": p.column,
                    "column_count": p.column_count,
                    "width": p.column_width_fraction,
                    "left": p.column_left_fraction,
                    "top_px": p.top_px,
                    "height_px": p.height_px,
                    "z_index": p.z_index,
                }
                for p in d.timed
            ]
        else:
            rec["events"] = [_event_ref(e) for e in d.agenda]
        if d.overflow is not None:
            rec["overflow"] = {
                "visible_count": d.overflow.visible_count,
                "shown": [e.id for e in d.overflow.shown],
                "more_count": d.overflow.more_count,
                "popup": [e.id for e in d.overflow.popup],
            }
        days_out.append(rec)

    return {
        "view": w.view,
        "anchor": w.anchor.isoformat(),
        "dates": [x.isoformat() for x in w.dates],
        "days": days_out,
        "now": {
            "visible": layout.now.visible,
            "date": layout.now.day.isoformat() if layout.now.day else None,
            "top_px": layout.now.top_px,
            "fraction": layout.now.fraction,
        },
    }
