#!/usr/bin/env python3
from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import List

from eventgrid.config import normalize_cfg
from eventgrid.io import events_from_json, read_json
from eventgrid.util.console import die
from eventgrid.util.tz import resolve_tz
from eventgrid.validate import validate_events

_TOOL = "validate-events"


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        prog="eventgrid-validate-events",
        description="Validate an events JSON file before it reaches the layout engine.",
    )
    ap.add_argument("--in", dest="in_json", required=True, help="Input events JSON path")
    ap.add_argument("--tz", default=os.getenv("EVENTGRID_TZ", "local"), help="Timezone for ISO datetimes and all-day checks")
    ns = ap.parse_args(argv)

    in_path = Path(ns.in_json)
    if not in_path.exists():
        return die(_TOOL, f"Missing input JSON: {in_path}")

    try:
        cfg = normalize_cfg({"tz": ns.tz})
        obj = read_json(in_path)
    except ValueError as e:
        return die(_TOOL, f"Failed to load JSON: {in_path} ({e})")

    try:
        events = events_from_json(obj, resolve_tz(cfg["tz"]))
    except (ValueError, AssertionError) as e:
        die(_TOOL, str(e))
        return 1

    errs = validate_events(events, cfg)
    if errs:
        for e in errs[:50]:
            die(_TOOL, e)
        return 1

    print(f"[eventgrid-{_TOOL}] OK ({len(events)} events)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
