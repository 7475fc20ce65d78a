from __future__ import annotations

import argparse
import logging
import os
import time
from pathlib import Path

from .config import normalize_cfg
from .io import dump_json, load_events
from .layout import build_view_layout, layout_to_dict
from .model import VIEW_KINDS
from .util.console import die
from .util.timeparse import parse_date_yyyy_mm_dd, parse_hour_range
from .util.tz import normalize_tz_name, resolve_tz, today_date
from .validate import validate_events
from .window import view_title


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        prog="eventgrid",
        description="Compute calendar layout records (day/week/month/agenda) for an events JSON file.",
    )
    ap.add_argument("--events", required=True, help="Events JSON (list, or object with an 'events' list)")
    ap.add_argument("--view", default="week", choices=VIEW_KINDS, help="View kind (default: week)")
    ap.add_argument("--date", default=None, help="Anchor date YYYY-MM-DD (default: today in --tz)")
    ap.add_argument(
        "--tz",
        default=os.getenv("EVENTGRID_TZ", "local"),
        help="Bucketing timezone for day boundaries (default: env EVENTGRID_TZ or 'local')",
    )
    ap.add_argument("--week-start", default="sunday", help="First day of the week (name or 0..6, 0=Sunday)")
    ap.add_argument("--hours", default="00:00-24:00", help="Visible hour range, e.g. 07:00-20:00")
    ap.add_argument("--hour-height", type=float, default=64.0, help="Row height per hour in px (default: 64)")
    ap.add_argument("--agenda-days", type=int, default=30, help="Agenda window length in days (default: 30)")
    ap.add_argument("--cell-height", type=float, default=None, help="Measured month cell content height in px")
    ap.add_argument("--now-ms", type=int, default=None, help="Override the current instant (epoch ms)")
    ap.add_argument("--out", default=None, help="Write layout JSON here (default: stdout)")
    ap.add_argument("--pretty", action="store_true", help="Indent JSON output")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging to stderr")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    tz_name = normalize_tz_name(args.tz)
    try:
        tzinfo = resolve_tz(tz_name)
    except ValueError as e:
        return die("layout", f"Invalid --tz value: {e}")

    try:
        start_hour, end_hour = parse_hour_range(args.hours)
        cfg = normalize_cfg(
            {
                "tz": tz_name,
                "week_start": args.week_start,
                "start_hour": start_hour,
                "end_hour": end_hour,
                "hour_height_px": args.hour_height,
                "agenda_days": args.agenda_days,
            }
        )
        anchor = parse_date_yyyy_mm_dd(args.date) if args.date else today_date(tzinfo)
    except ValueError as e:
        return die("layout", str(e))

    events_path = Path(args.events)
    if not events_path.exists():
        return die("layout", f"Missing events JSON: {events_path}")
    try:
        events = load_events(events_path, tzinfo)
    except (OSError, ValueError) as e:
        return die("layout", f"Failed to load events: {events_path} ({e})")

    errs = validate_events(events, cfg)
    if errs:
        for e in errs:
            die("layout", e)
        return 1

    now_ms = args.now_ms if args.now_ms is not None else int(time.time() * 1000)
    layout = build_view_layout(
        events,
        anchor,
        args.view,
        cfg,
        now_ms=now_ms,
        cell_content_px=args.cell_height,
    )
    data = layout_to_dict(layout)
    data["title"] = view_title(anchor, args.view, cfg)
    text = dump_json(data, pretty=bool(args.pretty))

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text + "\n", encoding="utf-8")
        print(str(out_path))
    else:
        print(text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
