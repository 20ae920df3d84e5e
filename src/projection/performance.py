"""Performance trace for a single projection."""

from __future__ import annotations

import time
from typing import Optional

from src.models.records import PerformanceReport


class PerformanceTracker:
    """Collect named timing marks relative to construction time."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._start = time.perf_counter() if enabled else None
        self.marks: dict[str, float] = {}

    def _elapsed_ms(self) -> float:
        return round((time.perf_counter() - self._start) * 1000, 3)

    def mark(self, name: str) -> None:
        if self.enabled:
            self.marks[name] = self._elapsed_ms()

    def report(self) -> Optional[PerformanceReport]:
        if not self.enabled:
            return None
        return PerformanceReport(total_time=self._elapsed_ms(), marks=dict(self.marks))
