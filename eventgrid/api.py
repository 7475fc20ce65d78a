"""eventgrid.api

Stable *library* entrypoint for eventgrid.

Policy:
  - Only names listed in __all__ are considered public API.
  - Everything else is internal and may change without notice.
"""

from __future__ import annotations

from eventgrid.commit import EventStore, InMemoryEventStore, JsonFileEventStore, new_event_at
from eventgrid.config import SNAP_MIN, normalize_cfg
from eventgrid.geometry import column_left_fraction, column_width_fraction, position_day
from eventgrid.interval import clip_to_day, duration_min, is_multi_day, overlaps
from eventgrid.io import event_to_dict, events_from_json, load_events
from eventgrid.layout import build_view_layout, layout_to_dict
from eventgrid.model import (
    CalendarEvent,
    DayLayout,
    EventInvariantError,
    NowIndicator,
    OverflowRecord,
    PositionedEvent,
    SpanSegment,
    ViewLayout,
    ViewWindow,
)
from eventgrid.now import Clock, FixedClock, NowTicker, SystemClock, compute_now_indicator
from eventgrid.overflow import OverflowTracker, compute_overflow, visible_event_count
from eventgrid.packing import pack_columns
from eventgrid.reschedule import (
    CommitTicket,
    Dragging,
    Idle,
    Pointer,
    RescheduleController,
    Resizing,
)
from eventgrid.snap import snap_minute, snap_ms
from eventgrid.validate import EventValidationError, assert_valid_events, build_event, validate_events
from eventgrid.window import (
    agenda_events_for_day,
    all_events_for_day,
    build_view_window,
    events_starting_on_day,
    shift_anchor,
    sort_events,
    spanning_events_for_day,
    timed_events_for_day,
    view_for_shortcut,
    view_title,
)

# --- Public API exports (locked by contract tests) ------------------------
# Keep changes intentional and reviewable.
# Prefer append-only unless you are intentionally reshaping the public surface.
_PUBLIC_EXPORTS = (
    "CalendarEvent",
    "Clock",
    "CommitTicket",
    "DayLayout",
    "Dragging",
    "EventInvariantError",
    "EventStore",
    "EventValidationError",
    "FixedClock",
    "Idle",
    "InMemoryEventStore",
    "JsonFileEventStore",
    "NowIndicator",
    "NowTicker",
    "OverflowRecord",
    "OverflowTracker",
    "Pointer",
    "PositionedEvent",
    "RescheduleController",
    "Resizing",
    "SNAP_MIN",
    "SpanSegment",
    "SystemClock",
    "ViewLayout",
    "ViewWindow",
    "agenda_events_for_day",
    "all_events_for_day",
    "assert_valid_events",
    "build_event",
    "build_view_layout",
    "build_view_window",
    "clip_to_day",
    "column_left_fraction",
    "column_width_fraction",
    "compute_now_indicator",
    "compute_overflow",
    "duration_min",
    "event_to_dict",
    "events_from_json",
    "events_starting_on_day",
    "is_multi_day",
    "layout_to_dict",
    "load_events",
    "new_event_at",
    "normalize_cfg",
    "overlaps",
    "pack_columns",
    "position_day",
    "shift_anchor",
    "snap_minute",
    "snap_ms",
    "sort_events",
    "spanning_events_for_day",
    "timed_events_for_day",
    "validate_events",
    "view_for_shortcut",
    "view_title",
    "visible_event_count",
)

__all__ = [n for n in _PUBLIC_EXPORTS if n in globals()]
# --- /Public API exports --------------------------------------------------
