# eventgrid/util/console.py
from __future__ import annotations
import sys
from typing import Any

def eprint(*args: Any) -> None:
    print(*args, file=sys.stderr)


def die(tool: str, msg: str, rc: int = 2) -> int:
    eprint(f"[eventgrid-{tool}] ERROR: {msg}")
    return rc
