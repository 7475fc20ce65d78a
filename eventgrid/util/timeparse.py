# eventgrid/util/timeparse.py
from __future__ import annotations

import datetime as dt
import re
from typing import Tuple

_HHMM_RE = re.compile(r"^(\d{1,2})(?::(\d{2}))?$")

_WEEKDAY_NAMES = {
    "sun": 0, "sunday": 0,
    "mon": 1, "monday": 1,
    "tue": 2, "tuesday": 2,
    "wed": 3, "wednesday": 3,
    "thu": 4, "thursday": 4,
    "fri": 5, "friday": 5,
    "sat": 6, "saturday": 6,
}


def parse_hhmm(s: str) -> Tuple[int, int]:
    m = _HHMM_RE.match(s.strip())
    if not m:
        raise ValueError(f"Invalid HH:MM: {s!r}")
    hh = int(m.group(1))
    mm = int(m.group(2) or 0)
    if not (0 <= hh <= 23 and 0 <= mm <= 59):
        raise ValueError(f"Invalid HH:MM: {s!r}")
    return hh, mm


def parse_hour_range(s: str) -> Tuple[int, int]:
    """Parse a visible hour range like "07:00-20:00", "7-20" or "00:00-24:00".

    Only whole hours are accepted; the end bound may be 24.
    """
    parts = s.split("-")
    if len(parts) != 2:
        raise ValueError("hour range must be like 07:00-20:00")

    def _hour(p: str, *, allow_24: bool) -> int:
        ps = p.strip()
        if allow_24 and ps in ("24", "24:00"):
            return 24
        hh, mm = parse_hhmm(ps)
        if mm != 0:
            raise ValueError(f"hour range bounds must be whole hours: {p!r}")
        return hh

    start = _hour(parts[0], allow_24=False)
    end = _hour(parts[1], allow_24=True)
    if end <= start:
        raise ValueError("hour range end must be after start")
    return start, end


def parse_date_yyyy_mm_dd(s: str) -> dt.date:
    return dt.datetime.strptime(s, "%Y-%m-%d").date()


def parse_local_datetime(s: str) -> dt.datetime:
    """Parse "YYYY-MM-DDTHH:MM[:SS]" (or with a space) as a naive wall-clock datetime.

    An explicit offset is kept; callers decide how to read naive values.
    """
    ss = str(s).strip()
    if not ss:
        raise ValueError("empty datetime")
    try:
        return dt.datetime.fromisoformat(ss.replace("Z", "+00:00"))
    except ValueError as ex:
        raise ValueError(f"Invalid datetime: {s!r}") from ex


def parse_weekday(v) -> int:
    """Weekday index with 0=Sunday … 6=Saturday; accepts ints and English names."""
    if isinstance(v, bool):
        raise ValueError(f"Invalid weekday: {v!r}")
    if isinstance(v, int):
        if 0 <= v <= 6:
            return v
        raise ValueError(f"Invalid weekday: {v!r} (expected 0..6, 0=Sunday)")
    s = str(v).strip().lower()
    if s.isdigit():
        return parse_weekday(int(s))
    if s in _WEEKDAY_NAMES:
        return _WEEKDAY_NAMES[s]
    raise ValueError(f"Invalid weekday: {v!r}")
