"""Event collection I/O helpers."""

from __future__ import annotations

import datetime as dt
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .model import CalendarEvent
from .util.timeparse import parse_local_datetime
from .util.tz import epoch_ms

try:
    import orjson  # type: ignore
except Exception:  # pragma: no cover
    orjson = None  # type: ignore

JsonPath = Union[str, Path]


def _as_int(v: Any) -> Optional[int]:
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    return None


def _instant_ms(raw: Dict[str, Any], key: str, tz: dt.tzinfo, label: str) -> int:
    ms = _as_int(raw.get(f"{key}_ms"))
    if ms is not None:
        return ms
    s = raw.get(key)
    if isinstance(s, str) and s.strip():
        try:
            return epoch_ms(parse_local_datetime(s), tz)
        except ValueError as ex:
            raise ValueError(f"{label}: {ex}") from ex
    raise ValueError(f"{label} must include int {key}_ms or an ISO datetime {key}")


def event_from_dict(raw: Any, tz: dt.tzinfo, *, label: str = "event") -> CalendarEvent:
    """Build an event from its JSON form.

    Accepted keys: id, title, start_ms/end_ms (epoch ms) or start/end (ISO,
    naive values read as wall-clock time in `tz`), all_day (or allDay), color,
    description, location.
    """
    if not isinstance(raw, dict):
        raise ValueError(f"{label} must be an object")

    eid = raw.get("id")
    if not isinstance(eid, str) or not eid.strip():
        raise ValueError(f"{label} must have a non-empty string id")

    start_ms = _instant_ms(raw, "start", tz, label)
    end_ms = _instant_ms(raw, "end", tz, label)
    if end_ms < start_ms:
        raise ValueError(f"{label} ({eid}) must have end >= start")

    all_day = raw.get("all_day", raw.get("allDay", False))
    color = raw.get("color") or "sky"

    return CalendarEvent(
        id=eid.strip(),
        title=str(raw.get("title") or ""),
        start_ms=int(start_ms),
        end_ms=int(end_ms),
        all_day=bool(all_day),
        color=str(color),
        description=raw.get("description") if isinstance(raw.get("description"), str) else None,
        location=raw.get("location") if isinstance(raw.get("location"), str) else None,
    )


def events_from_json(obj: Any, tz: dt.tzinfo) -> List[CalendarEvent]:
    """Accepts a JSON list of events or an object with an "events" list."""
    items = obj.get("events") if isinstance(obj, dict) else obj
    if not isinstance(items, list):
        raise ValueError("events JSON must be a list or an object with an 'events' list")

    out: List[CalendarEvent] = []
    seen: set[str] = set()
    for i, raw in enumerate(items):
        ev = event_from_dict(raw, tz, label=f"events[{i}]")
        if ev.id in seen:
            raise ValueError(f"events[{i}]: duplicate id {ev.id!r}")
        seen.add(ev.id)
        out.append(ev)
    return out


def read_json(path: JsonPath) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def load_events(path: JsonPath, tz: dt.tzinfo) -> List[CalendarEvent]:
    return events_from_json(read_json(path), tz)


def event_to_dict(ev: CalendarEvent) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": ev.id,
        "title": ev.title,
        "start_ms": int(ev.start_ms),
        "end_ms": int(ev.end_ms),
        "all_day": bool(ev.all_day),
        "color": ev.color,
    }
    if ev.description is not None:
        d["description"] = ev.description
    if ev.location is not None:
        d["location"] = ev.location
    return d


def dump_json(obj: Any, *, pretty: bool = False) -> str:
    if orjson is not None:
        opt = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS if pretty else 0
        return orjson.dumps(obj, option=opt).decode("utf-8")
    if pretty:
        return json.dumps(obj, ensure_ascii=False, indent=2, sort_keys=True)
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":"))


def save_events(path: JsonPath, events: List[CalendarEvent]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(dump_json({"events": [event_to_dict(e) for e in events]}, pretty=True) + "\n", encoding="utf-8")
