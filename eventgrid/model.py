# eventgrid/model.py
from __future__ import annotations

import dataclasses
import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional, Tuple

# Planner-facing types (lightweight)
CalendarConfig = Dict[str, Any]

VIEW_KINDS = ("day", "week", "month", "agenda")
EVENT_COLORS = ("sky", "amber", "violet", "rose", "emerald", "orange")


class EventInvariantError(AssertionError):
    """An event reached the engine with end before start (upstream contract breach)."""


@dataclass(frozen=True)
class CalendarEvent:
    id: str
    title: str
    start_ms: int
    end_ms: int
    all_day: bool = False
    color: str = "sky"
    description: Optional[str] = None
    location: Optional[str] = None

    def __post_init__(self) -> None:
        if int(self.end_ms) < int(self.start_ms):
            raise EventInvariantError(
                f"event {self.id!r}: end_ms ({self.end_ms}) is before start_ms ({self.start_ms})"
            )

    @property
    def duration_ms(self) -> int:
        return int(self.end_ms) - int(self.start_ms)

    def replace(self, **changes: Any) -> "CalendarEvent":
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class PositionedEvent:
    event: CalendarEvent
    day: dt.date
    column: int
    column_count: int
    column_width_fraction: float
    column_left_fraction: float
    top_px: float
    height_px: float
    z_index: int
    start_ms: int          # clipped to the day
    end_ms: int


@dataclass(frozen=True)
class SpanSegment:
    event: CalendarEvent
    day: dt.date
    is_first_day: bool
    is_last_day: bool
    show_title: bool


@dataclass(frozen=True)
class ViewWindow:
    view: str              # "day" | "week" | "month" | "agenda"
    anchor: dt.date
    dates: Tuple[dt.date, ...]
    outside: FrozenSet[dt.date] = field(default_factory=frozenset)

    @property
    def first(self) -> dt.date:
        return self.dates[0]

    @property
    def last(self) -> dt.date:
        return self.dates[-1]

    def index_of(self, day: dt.date) -> Optional[int]:
        try:
            return self.dates.index(day)
        except ValueError:
            return None


@dataclass(frozen=True)
class OverflowRecord:
    day: dt.date
    visible_count: int
    shown: Tuple[CalendarEvent, ...]
    hidden: Tuple[CalendarEvent, ...]
    more_count: int        # 0 when everything fits
    popup: Tuple[CalendarEvent, ...]

    @property
    def has_more(self) -> bool:
        return self.more_count > 0


@dataclass(frozen=True)
class NowIndicator:
    visible: bool
    day: Optional[dt.date]
    top_px: float
    fraction: float        # share of the visible hour range, 0..1


@dataclass(frozen=True)
class DayLayout:
    day: dt.date
    day_start_ms: int
    outside: bool
    is_today: bool
    all_day: Tuple[SpanSegment, ...] = ()
    timed: Tuple[PositionedEvent, ...] = ()
    agenda: Tuple[CalendarEvent, ...] = ()
    overflow: Optional[OverflowRecord] = None


@dataclass(frozen=True)
class ViewLayout:
    window: ViewWindow
    days: Tuple[DayLayout, ...]
    now: NowIndicator


__all__ = [
    "CalendarConfig",
    "VIEW_KINDS",
    "EVENT_COLORS",
    "EventInvariantError",
    "CalendarEvent",
    "PositionedEvent",
    "SpanSegment",
    "ViewWindow",
    "OverflowRecord",
    "NowIndicator",
    "DayLayout",
    "ViewLayout",
]
