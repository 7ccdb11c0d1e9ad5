"""
Core Web Vitals: maps performance entries to performance events.

The host feeds entries as its performance source reports them:
- LCP: last largest-contentful-paint entry's start time (ms)
- FID: first input's processing delay (ms)
- CLS: layout-shift values summed, skipping shifts flagged had_recent_input,
  emitted once as a unitless score when the page is hidden
- TTFB / PageLoad: from the navigation timing entry on load (ms)
"""

from collections.abc import Sequence
from typing import Callable, Optional

from pydantic import BaseModel

from devpulse.payload import UNIT_MS, UNITLESS

# (name, value, unit) -> None
Emit = Callable[[str, float, str], None]


class PerformanceEntry(BaseModel):
    name: str = ""
    entry_type: str = ""
    start_time: float = 0.0
    duration: float = 0.0
    processing_start: Optional[float] = None  # first-input
    value: Optional[float] = None  # layout-shift
    had_recent_input: bool = False  # layout-shift
    response_start: Optional[float] = None  # navigation
    load_event_end: Optional[float] = None  # navigation


class VitalsTracker:
    def __init__(self, emit: Emit):
        self._emit = emit
        self._cls = 0.0

    @property
    def cumulative_layout_shift(self) -> float:
        return self._cls

    def on_largest_contentful_paint(self, entries: Sequence[PerformanceEntry]) -> None:
        if entries:
            self._emit("LCP", entries[-1].start_time, UNIT_MS)

    def on_first_input(self, entries: Sequence[PerformanceEntry]) -> None:
        if not entries:
            return
        fid = entries[0]
        if fid.processing_start is not None:
            self._emit("FID", fid.processing_start - fid.start_time, UNIT_MS)

    def on_layout_shift(self, entries: Sequence[PerformanceEntry]) -> None:
        for entry in entries:
            if not entry.had_recent_input and entry.value:
                self._cls += entry.value

    def on_page_hide(self) -> None:
        """Emit the accumulated CLS score, if any, and start over."""
        if self._cls > 0:
            value, self._cls = self._cls, 0.0
            self._emit("CLS", value, UNITLESS)

    def on_load(self, navigation: Optional[PerformanceEntry]) -> None:
        if navigation is None:
            return
        if navigation.response_start is not None:
            self._emit("TTFB", navigation.response_start, UNIT_MS)
        if navigation.load_event_end is not None:
            self._emit("PageLoad", navigation.load_event_end, UNIT_MS)
