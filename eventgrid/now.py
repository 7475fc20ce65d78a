# eventgrid/now.py
"""Current-time marker for day and week views."""

from __future__ import annotations

import time
from typing import Optional, Protocol

from .config import cfg_tzinfo, normalize_cfg
from .geometry import hour_of, top_px
from .model import CalendarConfig, NowIndicator, ViewWindow
from .util.tz import local_date

_HIDDEN = NowIndicator(visible=False, day=None, top_px=0.0, fraction=0.0)


class Clock(Protocol):
    def now_ms(self) -> int:
        """Current instant as UTC epoch milliseconds."""


class SystemClock:
    def now_ms(self) -> int:
        return int(time.time() * 1000)


class FixedClock:
    """Manually advanced clock for deterministic tests."""

    def __init__(self, now_ms: int) -> None:
        self._now = int(now_ms)

    def now_ms(self) -> int:
        return self._now

    def set(self, now_ms: int) -> None:
        self._now = int(now_ms)

    def advance(self, ms: int) -> None:
        self._now += int(ms)


def compute_now_indicator(window: ViewWindow, cfg: Optional[CalendarConfig], now_ms: int) -> NowIndicator:
    c = normalize_cfg(cfg)
    if window.view not in ("day", "week"):
        return _HIDDEN

    tz = cfg_tzinfo(c)
    today = local_date(now_ms, tz)
    if today not in window.dates:
        return _HIDDEN

    start_hour = int(c["start_hour"])
    end_hour = int(c["end_hour"])
    hour = hour_of(now_ms, today, tz)
    if not (start_hour <= hour < end_hour):
        return _HIDDEN

    return NowIndicator(
        visible=True,
        day=today,
        top_px=top_px(hour, start_hour, c["hour_height_px"]),
        fraction=(hour - start_hour) / (end_hour - start_hour),
    )


class NowTicker:
    """Recomputes the indicator at most once per cfg.now_tick_s.

    poll() is idempotent between ticks and never touches drag state, so a host
    timer may call it while a gesture is in progress.
    """

    def __init__(self, clock: Clock, cfg: Optional[CalendarConfig] = None) -> None:
        self.clock = clock
        self.cfg = normalize_cfg(cfg)
        self._interval_ms = int(self.cfg["now_tick_s"]) * 1000
        self._last_ms: Optional[int] = None
        self._window: Optional[ViewWindow] = None
        self._current: NowIndicator = _HIDDEN

    @property
    def current(self) -> NowIndicator:
        return self._current

    def poll(self, window: ViewWindow) -> NowIndicator:
        now = self.clock.now_ms()
        stale = (
            self._last_ms is None
            or window != self._window
            or now - self._last_ms >= self._interval_ms
            or now < self._last_ms
        )
        if stale:
            self._current = compute_now_indicator(window, self.cfg, now)
            self._last_ms = now
            self._window = window
        return self._current
