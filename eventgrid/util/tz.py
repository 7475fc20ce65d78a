# eventgrid/util/tz.py
from __future__ import annotations

import datetime as dt
import re
from typing import Optional
from zoneinfo import ZoneInfo

_OFFSET_RE = re.compile(r"^([+-])(\d{2}):?(\d{2})$")

MIN_MS = 60_000


def normalize_tz_name(name: Optional[str]) -> str:
    """Normalize a timezone identifier to its canonical cfg form.

    None/"" and "local"/"system" map to "local" (wall-clock time of the host),
    "UTC"/"Z"/"GMT" map to "UTC"; IANA names and fixed offsets ("+02:00",
    "-0500") are kept as given.
    """
    if name is None:
        return "local"
    s = str(name).strip()
    if not s:
        return "local"

    low = s.lower()
    if low in {"local", "system", "native"}:
        return "local"
    if low in {"utc", "z", "gmt", "utc0", "utc+0"}:
        return "UTC"
    return s


def resolve_tz(name: Optional[str]) -> dt.tzinfo:
    """Resolve a timezone name into a tzinfo. Raises ValueError when invalid."""
    tz_name = normalize_tz_name(name)

    if tz_name == "UTC":
        return dt.timezone.utc

    if tz_name == "local":
        tz = dt.datetime.now().astimezone().tzinfo
        return tz or dt.timezone.utc

    m = _OFFSET_RE.match(tz_name)
    if m:
        sign_s, hh_s, mm_s = m.groups()
        hh = int(hh_s)
        mm = int(mm_s)
        if hh > 23 or mm > 59:
            raise ValueError(f"Invalid timezone offset: {tz_name!r}")
        sign = 1 if sign_s == "+" else -1
        return dt.timezone(dt.timedelta(minutes=sign * (hh * 60 + mm)))

    try:
        return ZoneInfo(tz_name)
    except Exception as ex:
        raise ValueError(f"Invalid timezone identifier: {tz_name!r}") from ex


def today_date(tz: dt.tzinfo) -> dt.date:
    return dt.datetime.now(tz=tz).date()


def midnight_epoch_ms(d: dt.date, tz: dt.tzinfo) -> int:
    aware = dt.datetime(d.year, d.month, d.day, 0, 0, 0, tzinfo=tz)
    return int(aware.timestamp() * 1000)


def local_date(ms: int, tz: dt.tzinfo) -> dt.date:
    return dt.datetime.fromtimestamp(int(ms) / 1000.0, tz=tz).date()


def local_datetime(ms: int, tz: dt.tzinfo) -> dt.datetime:
    return dt.datetime.fromtimestamp(int(ms) / 1000.0, tz=tz)


def epoch_ms(value: dt.datetime, tz: dt.tzinfo) -> int:
    """Epoch ms for a datetime; naive values are read as wall-clock time in `tz`."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=tz)
    return int(value.timestamp() * 1000)
