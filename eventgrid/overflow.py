# eventgrid/overflow.py
from __future__ import annotations

import datetime as dt
import logging
import math
from typing import Optional, Sequence

from .model import CalendarEvent, OverflowRecord

log = logging.getLogger(__name__)


def visible_event_count(content_px: float, event_px: float, gap_px: float) -> int:
    """How many event rows of height `event_px` separated by `gap_px` fit in `content_px`."""
    if event_px + gap_px <= 0:
        return 0
    return max(0, int(math.floor((float(content_px) + gap_px) / (float(event_px) + gap_px))))


def compute_overflow(day: dt.date, events: Sequence[CalendarEvent], visible_count: int) -> OverflowRecord:
    """Split a cell's (already sorted) events into shown rows and a "+N more" remainder.

    When the cell overflows, the last visible slot hosts the affordance, so
    only visible_count - 1 events are shown.
    """
    total = len(events)
    vc = max(0, int(visible_count))
    if total <= vc:
        shown = tuple(events)
        return OverflowRecord(day=day, visible_count=vc, shown=shown, hidden=(), more_count=0, popup=tuple(events))

    n_shown = max(0, vc - 1)
    shown = tuple(events[:n_shown])
    hidden = tuple(events[n_shown:])
    return OverflowRecord(
        day=day,
        visible_count=vc,
        shown=shown,
        hidden=hidden,
        more_count=len(hidden),
        popup=tuple(events),
    )


class OverflowTracker:
    """Caches the visible row count for month cells keyed on the measured height.

    The count is recomputed only when the host reports a different height
    (container resize), not on every render.
    """

    def __init__(self, event_px: float, gap_px: float) -> None:
        self.event_px = event_px
        self.gap_px = gap_px
        self._height: Optional[float] = None
        self._count: Optional[int] = None
        self.recomputes = 0

    def measure(self, content_px: float) -> int:
        if self._count is None or content_px != self._height:
            self._height = content_px
            self._count = visible_event_count(content_px, self.event_px, self.gap_px)
            self.recomputes += 1
            log.debug("month cell height %s -> %d visible rows", content_px, self._count)
        return self._count

    @property
    def visible_count(self) -> Optional[int]:
        return self._count
