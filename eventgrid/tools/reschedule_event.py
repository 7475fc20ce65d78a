#!/usr/bin/env python3
"""Move or resize one event in an events JSON file.

Replays the gesture through RescheduleController (pointer-down on the event,
one pointer-move to the target slot, pointer-up), so the result is snapped
exactly as an interactive drag would be.
"""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import List

from eventgrid.commit import JsonFileEventStore
from eventgrid.config import normalize_cfg
from eventgrid.geometry import hour_of, y_at_minute
from eventgrid.io import dump_json, event_to_dict
from eventgrid.reschedule import Pointer, RescheduleController
from eventgrid.util.console import die
from eventgrid.util.timeparse import parse_hour_range, parse_local_datetime
from eventgrid.util.tz import epoch_ms, local_date, resolve_tz
from eventgrid.window import build_view_window

_TOOL = "reschedule"


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        prog="eventgrid-reschedule",
        description="Move or resize an event (15-minute snapping) and persist the events file.",
    )
    ap.add_argument("--events", required=True, help="Events JSON path (updated in place)")
    ap.add_argument("--id", dest="event_id", required=True, help="Event id")
    g = ap.add_mutually_exclusive_group(required=True)
    g.add_argument("--to", default=None, help="Move: new start as local YYYY-MM-DDTHH:MM")
    g.add_argument("--resize-end", default=None, help="Resize: new end as local YYYY-MM-DDTHH:MM")
    g.add_argument("--resize-start", default=None, help="Resize: new start as local YYYY-MM-DDTHH:MM")
    ap.add_argument("--tz", default=os.getenv("EVENTGRID_TZ", "local"), help="Bucketing timezone")
    ap.add_argument("--hours", default="00:00-24:00", help="Visible hour range, e.g. 07:00-20:00")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging to stderr")
    ns = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    path = Path(ns.events)
    if not path.exists():
        return die(_TOOL, f"Missing events JSON: {path}")

    try:
        start_hour, end_hour = parse_hour_range(ns.hours)
        cfg = normalize_cfg({"tz": ns.tz, "start_hour": start_hour, "end_hour": end_hour})
        tz = resolve_tz(cfg["tz"])
        target = parse_local_datetime(ns.to or ns.resize_end or ns.resize_start)
        store = JsonFileEventStore(path, cfg)
    except ValueError as e:
        return die(_TOOL, str(e))

    ev = store.get(ns.event_id)
    if ev is None:
        return die(_TOOL, f"Unknown event id: {ns.event_id}")

    target_ms = epoch_ms(target, tz)
    target_day = local_date(target_ms, tz)
    window = build_view_window(target_day, "week", cfg)
    day_index = window.index_of(target_day)
    target_minute = hour_of(target_ms, target_day, tz) * 60.0
    target_y = y_at_minute(target_minute, cfg)

    ctl = RescheduleController(store, window, cfg)
    if ns.to:
        ev_day = local_date(ev.start_ms, tz)
        box_top = y_at_minute(hour_of(ev.start_ms, ev_day, tz) * 60.0, cfg)
        ctl.begin_drag(ev, Pointer(day_index=window.index_of(ev_day) or 0, y_px=box_top), box_top)
    else:
        ctl.begin_resize(ev, "end" if ns.resize_end else "start")

    ctl.move(Pointer(day_index=int(day_index or 0), y_px=target_y))
    ticket = ctl.drop()
    if ticket is None or ticket.status == "rolled_back":
        return die(_TOOL, f"Update of {ns.event_id} was rejected", rc=1)

    print(dump_json({"status": ticket.status, "event": event_to_dict(ticket.draft)}))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
