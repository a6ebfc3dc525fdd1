"""
Powerups and timed buffs
------------------------
- firerate: doubles the auto-attack rate
- movement: faster player (x1.75) and faster bullets (x1.5)
- magnet: pulls every XP gem on the map to the player

Buff windows are measured on the simulation clock, so they freeze while the
session is paused. Re-activating a buff restarts its window; nothing stacks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .clock import Scheduler, SimClock
from .entities import PowerupPickup, XPGem
from .utils import distance

logger = logging.getLogger(__name__)

MAGNET = "magnet"
FIRERATE = "firerate"
MOVEMENT = "movement"
POWERUP_KINDS = (MAGNET, FIRERATE, MOVEMENT)
TIMED_KINDS = (FIRERATE, MOVEMENT)

MOVEMENT_MULT = 1.75
PROJECTILE_SPEED_MULT = 1.5
FIRERATE_MULT = 2.0

# Passive pickup radius (px) at Magnetism level 0
PASSIVE_BASE_RANGE = 48.0

# Magnet pull: 6 steps of 0.05s at multiplier 1; step count scales with 1/multiplier
MAGNET_BASE_STEPS = 6
MAGNET_BASE_DELAY = 0.05


@dataclass
class BuffTimer:
    expires_at: float = 0.0
    duration: float = 0.0


class PowerupManager:
    def __init__(self, clock: SimClock, scheduler: Optional[Scheduler] = None):
        self.clock = clock
        self.scheduler = scheduler
        self._timers: Dict[str, BuffTimer] = {k: BuffTimer() for k in TIMED_KINDS}

    # ----------------------------
    # Timed buffs
    # ----------------------------

    def activate(self, kind: str, duration: float):
        if kind not in self._timers:
            raise ValueError(f"not a timed powerup: {kind}")
        timer = self._timers[kind]
        timer.expires_at = self.clock.now + duration
        timer.duration = duration
        logger.debug("%s active for %.1fs", kind, duration)

    def is_active(self, kind: str) -> bool:
        timer = self._timers.get(kind)
        return timer is not None and self.clock.now < timer.expires_at

    def remaining(self, kind: str) -> float:
        timer = self._timers.get(kind)
        if timer is None:
            return 0.0
        return max(0.0, timer.expires_at - self.clock.now)

    def duration(self, kind: str) -> float:
        timer = self._timers.get(kind)
        return timer.duration if timer is not None else 0.0

    def movement_multiplier(self) -> float:
        return MOVEMENT_MULT if self.is_active(MOVEMENT) else 1.0

    def projectile_speed_multiplier(self) -> float:
        return PROJECTILE_SPEED_MULT if self.is_active(MOVEMENT) else 1.0

    def fire_rate_multiplier(self) -> float:
        return FIRERATE_MULT if self.is_active(FIRERATE) else 1.0

    def reset(self):
        for timer in self._timers.values():
            timer.expires_at = 0.0
            timer.duration = 0.0

    # ----------------------------
    # Magnet
    # ----------------------------

    def pull_to_player(self, gems: Iterable[XPGem], target: Tuple[float, float],
                       on_arrive: Callable[[XPGem], None], speed_multiplier: float = 1.0,
                       still_valid: Callable[[], bool] = lambda: True) -> int:
        """
        Schedule a stepped slide of every live gem toward `target`, then hand
        each gem to `on_arrive`. Lower speed multipliers take longer.
        Returns the number of gems scheduled.
        """
        if self.scheduler is None:
            raise RuntimeError("magnet pull needs a scheduler")
        m = max(0.01, speed_multiplier)
        steps = max(2, int(round(MAGNET_BASE_STEPS / m)))
        delay = MAGNET_BASE_DELAY
        count = 0
        for gem in list(gems):
            if not gem.alive:
                continue
            sx = (target[0] - gem.x) / steps
            sy = (target[1] - gem.y) / steps
            for i in range(1, steps + 1):
                self.scheduler.call_later(i * delay, self._magnet_step(gem, sx, sy, i == steps, on_arrive, still_valid),
                                          name="magnet")
            count += 1
        return count

    @staticmethod
    def _magnet_step(gem, sx, sy, last, on_arrive, still_valid):
        def step():
            if not gem.alive or not still_valid():
                return
            gem.x += sx
            gem.y += sy
            if last:
                on_arrive(gem)
        return step


def magnet_duration(speed_multiplier: float = 1.0) -> float:
    """Total length of a magnet pull"""
    m = max(0.01, speed_multiplier)
    steps = max(2, int(round(MAGNET_BASE_STEPS / m)))
    return steps * MAGNET_BASE_DELAY


def pickup_range(pickup_multiplier: float) -> float:
    return PASSIVE_BASE_RANGE * pickup_multiplier


def within_range(center: Tuple[float, float], items: Iterable, radius: float) -> List:
    """Live items whose position is within `radius` of `center`"""
    return [it for it in items if it.alive and distance(center, it.pos) <= radius]


def make_pickup(kind: str, pos: Tuple[float, float]) -> PowerupPickup:
    if kind not in POWERUP_KINDS:
        raise ValueError(f"unknown powerup kind: {kind}")
    return PowerupPickup(x=pos[0], y=pos[1], kind=kind)
