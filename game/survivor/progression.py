"""
XP and level tracking
---------------------
XP accumulates until the next threshold, possibly crossing several levels at
once. Each level gained queues a skill choice; choices are presented one at a
time (Idle -> AwaitingChoice -> Idle) no matter how many are queued.
"""

from __future__ import annotations

import enum
import logging
from collections import deque
from typing import Callable, Deque, Optional

logger = logging.getLogger(__name__)

MAX_LEVEL = 25
BASE_XP = 10
XP_STEP = 5


def xp_to_next(level: int) -> int:
    """XP needed to go from `level` to `level + 1`"""
    return BASE_XP + (level - 1) * XP_STEP


class LevelUpState(enum.Enum):
    IDLE = "idle"
    AWAITING_CHOICE = "awaiting_choice"


class ProgressionTracker:
    def __init__(self, on_level_up: Optional[Callable[[int], None]] = None,
                 on_change: Optional[Callable[[int, int, int], None]] = None):
        self.on_level_up = on_level_up
        self.on_change = on_change
        self.xp = 0
        self.level = 1
        self.state = LevelUpState.IDLE
        self.pending: Deque[int] = deque()
        self.presenting: Optional[int] = None

    @property
    def awaiting_choice(self) -> bool:
        return self.state is LevelUpState.AWAITING_CHOICE

    @property
    def pending_count(self) -> int:
        return len(self.pending)

    @property
    def required(self) -> int:
        return xp_to_next(self.level)

    def add_xp(self, n: int = 1) -> int:
        """Add XP and resolve any level-ups. Returns how many levels were gained."""
        if n <= 0:
            return 0
        self.xp += n
        gained = 0
        while self.level < MAX_LEVEL and self.xp >= xp_to_next(self.level):
            self.xp -= xp_to_next(self.level)
            self.level += 1
            self.pending.append(self.level)
            gained += 1
        self._notify()
        if gained:
            logger.debug("reached level %d (%d queued)", self.level, len(self.pending))
        self._present_next()
        return gained

    def choice_made(self) -> bool:
        """Close the current choice and present the next queued one, if any"""
        if self.state is not LevelUpState.AWAITING_CHOICE:
            logger.warning("skill choice reported with no level-up outstanding")
            return False
        self.state = LevelUpState.IDLE
        self.presenting = None
        self._present_next()
        return True

    def _present_next(self):
        if self.state is LevelUpState.AWAITING_CHOICE or not self.pending:
            return
        self.presenting = self.pending.popleft()
        self.state = LevelUpState.AWAITING_CHOICE
        if self.on_level_up is not None:
            self.on_level_up(self.presenting)

    def _notify(self):
        if self.on_change is not None:
            self.on_change(self.xp, self.level, xp_to_next(self.level))

    def reset(self):
        self.xp = 0
        self.level = 1
        self.state = LevelUpState.IDLE
        self.pending.clear()
        self.presenting = None
        self._notify()
