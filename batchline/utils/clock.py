"""Time sources for elapsed-time and throughput measurement.

The reporter never reads the wall clock directly; it receives a ``Clock`` at
construction so durations are deterministic under test.
"""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Monotonic time source returning seconds as a float."""

    def now(self) -> float: ...


class MonotonicClock:
    """Clock backed by ``time.perf_counter``."""

    def now(self) -> float:
        return time.perf_counter()


class ManualClock:
    """Clock that only moves when told to.

    Args:
        start: Initial reading in seconds.
    """

    def __init__(self, start: float = 0.0):
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        """Move the clock forward by ``seconds``."""
        if seconds < 0:
            raise ValueError("ManualClock cannot move backwards")
        self._now += float(seconds)

    def advance_ms(self, milliseconds: float) -> None:
        """Move the clock forward by ``milliseconds``."""
        self.advance(milliseconds / 1000.0)
