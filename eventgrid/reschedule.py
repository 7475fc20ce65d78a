# eventgrid/reschedule.py
"""Drag-to-move / drag-to-resize state machine.

    Idle --begin_drag--> Dragging --drop--> Idle (draft proposed to the store)
    Idle --begin_resize--> Resizing --drop--> Idle
    Dragging/Resizing --cancel--> Idle (draft discarded)

Pointer positions arrive already resolved by the renderer to a column of the
view window (day_index) and a y offset inside the time grid. Only one gesture
runs at a time; begin_* while a gesture is active is a no-op returning False.
"""

from __future__ import annotations

import datetime as dt
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Union

from .commit import EventStore, resolve_result
from .config import cfg_tzinfo, normalize_cfg
from .geometry import minute_at_y
from .model import CalendarConfig, CalendarEvent, ViewWindow
from .snap import snap_day_minute
from .util.tz import epoch_ms, local_datetime

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Dragging:
    event_id: str
    origin_start_ms: int
    origin_end_ms: int
    pointer_offset_px: float   # pointer y minus the event box top at pointer-down

    @property
    def duration_ms(self) -> int:
        return self.origin_end_ms - self.origin_start_ms


@dataclass(frozen=True)
class Resizing:
    event_id: str
    edge: str                  # "start" | "end"
    origin_start_ms: int
    origin_end_ms: int


DragState = Union[Idle, Dragging, Resizing]
IDLE = Idle()


@dataclass(frozen=True)
class Pointer:
    day_index: int
    y_px: float


@dataclass
class CommitTicket:
    event_id: str
    original: CalendarEvent
    draft: CalendarEvent
    status: str = "pending"    # "pending" | "committed" | "rolled_back" | "unchanged"

    @property
    def done(self) -> bool:
        return self.status != "pending"


class RescheduleController:
    def __init__(
        self,
        store: EventStore,
        window: ViewWindow,
        cfg: Optional[CalendarConfig] = None,
        *,
        on_commit: Optional[Callable[[CommitTicket], None]] = None,
    ) -> None:
        self.store = store
        self.window = window
        self.cfg = normalize_cfg(cfg)
        self.tz: dt.tzinfo = cfg_tzinfo(self.cfg)
        self.on_commit = on_commit

        self._state: DragState = IDLE
        self._original: Optional[CalendarEvent] = None
        self._draft: Optional[CalendarEvent] = None
        self._pending: Dict[str, CalendarEvent] = {}
        self._lock = threading.Lock()

    # --- state ------------------------------------------------------------------

    @property
    def state(self) -> DragState:
        return self._state

    @property
    def draft(self) -> Optional[CalendarEvent]:
        return self._draft

    @property
    def active(self) -> bool:
        return not isinstance(self._state, Idle)

    def set_window(self, window: ViewWindow) -> None:
        self.window = window

    # --- gestures ---------------------------------------------------------------

    def begin_drag(self, event: CalendarEvent, pointer: Pointer, box_top_px: float) -> bool:
        if self.active:
            log.debug("begin_drag(%s) ignored: gesture already active", event.id)
            return False
        self._state = Dragging(
            event_id=event.id,
            origin_start_ms=int(event.start_ms),
            origin_end_ms=int(event.end_ms),
            pointer_offset_px=float(pointer.y_px) - float(box_top_px),
        )
        self._original = event
        self._draft = event
        return True

    def begin_resize(self, event: CalendarEvent, edge: str = "end") -> bool:
        if edge not in ("start", "end"):
            raise ValueError(f"resize edge must be 'start' or 'end'; got {edge!r}")
        if self.active:
            log.debug("begin_resize(%s) ignored: gesture already active", event.id)
            return False
        self._state = Resizing(
            event_id=event.id,
            edge=edge,
            origin_start_ms=int(event.start_ms),
            origin_end_ms=int(event.end_ms),
        )
        self._original = event
        self._draft = event
        return True

    def _day_at(self, day_index: int) -> Optional[dt.date]:
        if not (0 <= int(day_index) < len(self.window.dates)):
            return None
        return self.window.dates[int(day_index)]

    def move(self, pointer: Pointer) -> Optional[CalendarEvent]:
        """Update the draft for a pointer move; returns the draft (None when idle)."""
        st = self._state
        if isinstance(st, Idle) or self._original is None:
            return None

        day = self._day_at(pointer.day_index)
        if day is None:
            return self._draft

        if isinstance(st, Dragging):
            if self.window.view == "month":
                # Month cells carry no time axis: keep the original wall-clock time.
                origin = local_datetime(st.origin_start_ms, self.tz)
                new_start = epoch_ms(dt.datetime.combine(day, origin.time()), self.tz)
            else:
                minute = minute_at_y(float(pointer.y_px) - st.pointer_offset_px, self.cfg)
                new_start = snap_day_minute(day, minute, self.tz)
            self._draft = self._original.replace(start_ms=new_start, end_ms=new_start + st.duration_ms)
            return self._draft

        edge_ms = snap_day_minute(day, minute_at_y(pointer.y_px, self.cfg), self.tz)
        if st.edge == "end":
            new_end = max(edge_ms, st.origin_start_ms)
            self._draft = self._original.replace(start_ms=st.origin_start_ms, end_ms=new_end)
        else:
            new_start = min(edge_ms, st.origin_end_ms)
            self._draft = self._original.replace(start_ms=new_start, end_ms=st.origin_end_ms)
        return self._draft

    def cancel(self) -> bool:
        was_active = self.active
        self._reset()
        return was_active

    def drop(self) -> Optional[CommitTicket]:
        """End the gesture and propose the draft; returns None when idle.

        The draft stays visible through preview() until the store answers;
        a rejection restores the original event.
        """
        if not self.active or self._original is None or self._draft is None:
            return None

        original, draft = self._original, self._draft
        self._reset()

        ticket = CommitTicket(event_id=original.id, original=original, draft=draft)
        if (draft.start_ms, draft.end_ms) == (original.start_ms, original.end_ms):
            ticket.status = "unchanged"
            return ticket

        with self._lock:
            self._pending[original.id] = draft

        patch = {"start_ms": int(draft.start_ms), "end_ms": int(draft.end_ms)}
        try:
            result = self.store.propose_update(original.id, patch)
        except Exception as ex:
            log.warning("propose_update(%s) raised: %s", original.id, ex)
            result = False

        resolve_result(result, lambda ok: self._reconcile(ticket, ok))
        return ticket

    def _reconcile(self, ticket: CommitTicket, ok: bool) -> None:
        with self._lock:
            if self._pending.get(ticket.event_id) is ticket.draft:
                del self._pending[ticket.event_id]
        ticket.status = "committed" if ok else "rolled_back"
        if ok:
            log.info("event %s moved to %s..%s", ticket.event_id, ticket.draft.start_ms, ticket.draft.end_ms)
        else:
            log.warning("event %s update rejected; restored original", ticket.event_id)
        if self.on_commit is not None:
            self.on_commit(ticket)

    def _reset(self) -> None:
        self._state = IDLE
        self._original = None
        self._draft = None

    # --- preview ----------------------------------------------------------------

    def preview(self, events: Iterable[CalendarEvent]) -> List[CalendarEvent]:
        """Events with pending commits and the active draft substituted by id."""
        with self._lock:
            overlay = dict(self._pending)
        if self._draft is not None:
            overlay[self._draft.id] = self._draft
        return [overlay.get(ev.id, ev) for ev in events]
