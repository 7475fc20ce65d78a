"""Commit boundary to the persistence collaborator.

The engine never mutates shared event state; it proposes creates, updates and
deletes through an EventStore and treats a failed proposal as "revert the
draft, no retry". Concurrent editors are resolved by the store (last write wins).
"""

from __future__ import annotations

import logging
import threading
import uuid as uuidlib
from concurrent.futures import Future
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Union

from .config import cfg_tzinfo, normalize_cfg
from .io import JsonPath, load_events, save_events
from .model import CalendarConfig, CalendarEvent
from .snap import snap_ms
from .util.tz import MIN_MS

log = logging.getLogger(__name__)

EventPatch = Dict[str, Any]
ProposeResult = Union[bool, "Future[bool]"]

_PATCHABLE = frozenset({"title", "start_ms", "end_ms", "all_day", "color", "description", "location"})


class EventStore(Protocol):
    def propose_create(self, event: CalendarEvent) -> ProposeResult:
        """Persist a new event; True (or a Future resolving to True) on success."""

    def propose_update(self, event_id: str, patch: EventPatch) -> ProposeResult:
        """Apply `patch` to an existing event."""

    def propose_delete(self, event_id: str) -> ProposeResult:
        """Remove an event."""


def apply_patch(event: CalendarEvent, patch: EventPatch) -> CalendarEvent:
    unknown = set(patch) - _PATCHABLE
    if unknown:
        raise ValueError(f"patch has unknown fields: {', '.join(sorted(unknown))}")
    return event.replace(**patch)


class InMemoryEventStore:
    """Reference store holding events in a dict.

    `reject` lets callers simulate collaborator failures: it receives the
    operation name ("create" | "update" | "delete") and the event id and
    returns True to reject.
    """

    def __init__(
        self,
        events: Optional[List[CalendarEvent]] = None,
        *,
        reject: Optional[Callable[[str, str], bool]] = None,
    ) -> None:
        self._events: Dict[str, CalendarEvent] = {}
        self._lock = threading.Lock()
        self.reject = reject
        for ev in events or []:
            self._events[ev.id] = ev

    def snapshot(self) -> tuple[CalendarEvent, ...]:
        with self._lock:
            return tuple(self._events.values())

    def get(self, event_id: str) -> Optional[CalendarEvent]:
        with self._lock:
            return self._events.get(event_id)

    def _rejected(self, op: str, event_id: str) -> bool:
        if self.reject is not None and self.reject(op, event_id):
            log.warning("store rejected %s of event %s", op, event_id)
            return True
        return False

    def propose_create(self, event: CalendarEvent) -> bool:
        if self._rejected("create", event.id):
            return False
        with self._lock:
            if event.id in self._events:
                return False
            self._events[event.id] = event
        return True

    def propose_update(self, event_id: str, patch: EventPatch) -> bool:
        if self._rejected("update", event_id):
            return False
        with self._lock:
            cur = self._events.get(event_id)
            if cur is None:
                return False
            try:
                self._events[event_id] = apply_patch(cur, patch)
            except (ValueError, AssertionError) as ex:
                log.warning("store refused update of %s: %s", event_id, ex)
                return False
        return True

    def propose_delete(self, event_id: str) -> bool:
        if self._rejected("delete", event_id):
            return False
        with self._lock:
            return self._events.pop(event_id, None) is not None


class JsonFileEventStore(InMemoryEventStore):
    """InMemoryEventStore persisted to an events JSON file after every accepted change.

    Each change and its file write run under one write lock, so the file always
    holds the latest accepted state.
    """

    def __init__(self, path: JsonPath, cfg: Optional[CalendarConfig] = None) -> None:
        self.path = Path(path)
        tz = cfg_tzinfo(normalize_cfg(cfg))
        events = load_events(self.path, tz) if self.path.exists() else []
        super().__init__(events)
        self._write_lock = threading.Lock()

    def _flush(self) -> None:
        save_events(self.path, list(self.snapshot()))

    def propose_create(self, event: CalendarEvent) -> bool:
        with self._write_lock:
            ok = super().propose_create(event)
            if ok:
                self._flush()
        return ok

    def propose_update(self, event_id: str, patch: EventPatch) -> bool:
        with self._write_lock:
            ok = super().propose_update(event_id, patch)
            if ok:
                self._flush()
        return ok

    def propose_delete(self, event_id: str) -> bool:
        with self._write_lock:
            ok = super().propose_delete(event_id)
            if ok:
                self._flush()
        return ok


def new_event_id() -> str:
    return uuidlib.uuid4().hex[:9]


def new_event_at(start_ms: int, cfg: Optional[CalendarConfig] = None, *, title: str = "") -> CalendarEvent:
    """Untitled one-hour draft at the clicked slot, snapped to the grid."""
    c = normalize_cfg(cfg)
    start = snap_ms(int(start_ms), cfg_tzinfo(c))
    return CalendarEvent(
        id=new_event_id(),
        title=title.strip() or "(no title)",
        start_ms=start,
        end_ms=start + 60 * MIN_MS,
    )


def resolve_result(result: ProposeResult, on_done: Callable[[bool], None]) -> None:
    """Call `on_done(ok)` now for a bool result, or when a Future completes."""
    if isinstance(result, Future):
        def _cb(fut: "Future[bool]") -> None:
            try:
                ok = bool(fut.result())
            except Exception as ex:
                log.warning("commit failed: %s", ex)
                ok = False
            on_done(ok)

        result.add_done_callback(_cb)
        return
    on_done(bool(result))


__all__ = [
    "EventStore",
    "EventPatch",
    "InMemoryEventStore",
    "JsonFileEventStore",
    "apply_patch",
    "new_event_at",
    "new_event_id",
    "resolve_result",
]
