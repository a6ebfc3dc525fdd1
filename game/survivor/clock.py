"""
Simulation clock and timer scheduler
------------------------------------
Game time only moves when the session advances it, so pausing freezes every
timer built on top of it (buffs, respawns, wave ramps, invincibility).
"""

from __future__ import annotations

import heapq
import itertools
import logging
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class SimClock:
    """Monotonic, pausable simulation time in seconds"""

    def __init__(self, start: float = 0.0):
        self._now = float(start)

    @property
    def now(self) -> float:
        return self._now

    def advance(self, dt: float) -> float:
        if dt < 0:
            raise ValueError("clock cannot run backwards")
        self._now += dt
        return self._now

    def reset(self):
        self._now = 0.0


class Timer:
    """Handle for a scheduled callback"""

    __slots__ = ("due", "interval", "callback", "cancelled", "name")

    def __init__(self, due: float, callback: Callable[[], None],
                 interval: Optional[float] = None, name: str = ""):
        self.due = due
        self.interval = interval
        self.callback = callback
        self.cancelled = False
        self.name = name

    @property
    def repeating(self) -> bool:
        return self.interval is not None

    def cancel(self):
        self.cancelled = True

    def __repr__(self):
        return f"Timer({self.name or self.callback!r}, due={self.due:.3f}, interval={self.interval})"


class Scheduler:
    """Fires callbacks against a SimClock; nothing here touches wall time."""

    def __init__(self, clock: SimClock):
        self.clock = clock
        self._heap: List[Tuple[float, int, Timer]] = []
        self._seq = itertools.count()

    def __len__(self):
        return sum(1 for _, _, t in self._heap if not t.cancelled)

    def call_later(self, delay: float, callback: Callable[[], None], name: str = "") -> Timer:
        timer = Timer(self.clock.now + max(0.0, delay), callback, name=name)
        self._push(timer)
        return timer

    def every(self, interval: float, callback: Callable[[], None], name: str = "") -> Timer:
        if interval <= 0:
            raise ValueError("interval must be positive")
        timer = Timer(self.clock.now + interval, callback, interval=interval, name=name)
        self._push(timer)
        return timer

    def _push(self, timer: Timer):
        heapq.heappush(self._heap, (timer.due, next(self._seq), timer))

    def run_due(self) -> int:
        """Run every timer whose due time has passed. Returns how many fired."""
        fired = 0
        now = self.clock.now
        while self._heap and self._heap[0][0] <= now:
            _, _, timer = heapq.heappop(self._heap)
            if timer.cancelled:
                continue
            # Re-arm before firing so the callback may cancel its own timer
            if timer.repeating:
                timer.due += timer.interval
                self._push(timer)
            timer.callback()
            fired += 1
        return fired

    def cancel_all(self):
        for _, _, timer in self._heap:
            timer.cancel()
        self._heap.clear()
        logger.debug("scheduler cleared")
