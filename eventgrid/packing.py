# eventgrid/packing.py
"""Greedy column packing for one day's timed events.

Events are sorted by clipped start, then longer first, then id, and each one
lands in the first column none of whose members it overlaps. This is not a
minimum colouring of the interval graph; it keeps earlier, longer events in
the leftmost column and runs in O(n*k).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from .interval import overlaps
from .model import CalendarEvent

# (event, clipped_start_ms, clipped_end_ms)
PackItem = Tuple[CalendarEvent, int, int]


@dataclass(frozen=True)
class ColumnAssignment:
    event: CalendarEvent
    start_ms: int
    end_ms: int
    column: int


@dataclass(frozen=True)
class PackResult:
    assignments: Tuple[ColumnAssignment, ...]   # in placement order
    column_count: int

    def column_of(self, event_id: str) -> int:
        for a in self.assignments:
            if a.event.id == event_id:
                return a.column
        raise KeyError(event_id)

    def by_column(self) -> Dict[int, List[ColumnAssignment]]:
        out: Dict[int, List[ColumnAssignment]] = {}
        for a in self.assignments:
            out.setdefault(a.column, []).append(a)
        return out


def _sort_key(item: PackItem) -> tuple:
    ev, start, end = item
    return (start, -(end - start), ev.id)


def pack_columns(items: Sequence[PackItem]) -> PackResult:
    ordered = sorted(items, key=_sort_key)

    # columns[k] holds (start_ms, end_ms) of members already placed in column k
    columns: List[List[Tuple[int, int]]] = []
    out: List[ColumnAssignment] = []

    for ev, start, end in ordered:
        col_idx = -1
        for i, members in enumerate(columns):
            if not any(overlaps(start, end, s, e) for s, e in members):
                col_idx = i
                break
        if col_idx < 0:
            col_idx = len(columns)
            columns.append([])
        columns[col_idx].append((start, end))
        out.append(ColumnAssignment(event=ev, start_ms=int(start), end_ms=int(end), column=col_idx))

    return PackResult(assignments=tuple(out), column_count=len(columns))
