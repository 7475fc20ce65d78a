# eventgrid/config.py
from __future__ import annotations

import datetime as dt
from typing import Any, Dict, Optional

from .model import CalendarConfig
from .util.timeparse import parse_weekday
from .util.tz import normalize_tz_name, resolve_tz

# Fixed quantisation step for drag/resize/create.
SNAP_MIN = 15

DEFAULT_CFG: Dict[str, Any] = {
    "tz": "local",
    "week_start": 0,          # 0=Sunday
    "start_hour": 0,
    "end_hour": 24,
    "hour_height_px": 64,
    "agenda_days": 30,
    "event_height_px": 24,
    "event_gap_px": 4,
    "base_z": 10,
    "now_tick_s": 60,
    "default_start_hour": 9,
    "default_end_hour": 10,
}


def _int_in(cfg: Dict[str, Any], key: str, lo: int, hi: int) -> int:
    v = cfg.get(key)
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise ValueError(f"cfg.{key} must be a number; got {v!r}")
    iv = int(v)
    if iv != v or not (lo <= iv <= hi):
        raise ValueError(f"cfg.{key} must be an integer in [{lo}, {hi}]; got {v!r}")
    return iv


def normalize_cfg(cfg: Optional[CalendarConfig] = None) -> CalendarConfig:
    """Return a new cfg with defaults filled in and values range-checked.

    Unknown keys are preserved. Raises ValueError on invalid values.
    """
    out: Dict[str, Any] = dict(DEFAULT_CFG)
    if cfg:
        out.update({k: v for k, v in cfg.items() if v is not None})

    out["tz"] = normalize_tz_name(out.get("tz"))
    resolve_tz(out["tz"])  # raises ValueError early

    out["week_start"] = parse_weekday(out.get("week_start"))

    out["start_hour"] = _int_in(out, "start_hour", 0, 23)
    out["end_hour"] = _int_in(out, "end_hour", 1, 24)
    if out["end_hour"] <= out["start_hour"]:
        raise ValueError("cfg.end_hour must be after cfg.start_hour")

    hh = out.get("hour_height_px")
    if isinstance(hh, bool) or not isinstance(hh, (int, float)) or hh <= 0:
        raise ValueError(f"cfg.hour_height_px must be a positive number; got {hh!r}")
    out["hour_height_px"] = float(hh) if isinstance(hh, float) else int(hh)

    out["agenda_days"] = _int_in(out, "agenda_days", 1, 366)
    out["event_height_px"] = _int_in(out, "event_height_px", 1, 10_000)
    out["event_gap_px"] = _int_in(out, "event_gap_px", 0, 10_000)
    out["base_z"] = _int_in(out, "base_z", 0, 1_000_000)
    out["now_tick_s"] = _int_in(out, "now_tick_s", 1, 86_400)
    out["default_start_hour"] = _int_in(out, "default_start_hour", 0, 23)
    out["default_end_hour"] = _int_in(out, "default_end_hour", 1, 24)
    return out


def cfg_tzinfo(cfg: CalendarConfig) -> dt.tzinfo:
    return resolve_tz(cfg.get("tz"))
