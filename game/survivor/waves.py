"""
Wave scheduling and enemy placement
-----------------------------------
Three periodic rules on the simulation clock:
- every 9s raise the enemy ceiling by one (up to the cap) and spawn one if below it
- every 1s top the population up by one if it is under half the ceiling
- every 12s play an ambient groan while enemies are around
"""

from __future__ import annotations

import logging
import random
from typing import Callable, Optional, Sequence, Tuple

from .clock import Scheduler
from .utils import distance

logger = logging.getLogger(__name__)

CEILING_INTERVAL = 9.0
FLOOR_INTERVAL = 1.0
AMBIENT_INTERVAL = 12.0
MIN_SPAWN_DISTANCE = 200.0
MAX_SPAWN_ATTEMPTS = 32


def pick_spawn_point(rng: random.Random, width: float, height: float, padding: float,
                     avoid: Optional[Tuple[float, float]] = None,
                     min_distance: float = MIN_SPAWN_DISTANCE,
                     max_attempts: int = MAX_SPAWN_ATTEMPTS) -> Tuple[float, float]:
    """
    Uniform point inside the padded arena, at least `min_distance` from `avoid`.
    After `max_attempts` rejected samples the farthest candidate seen is used,
    so this always terminates even in arenas too small for the exclusion radius.
    """
    best, best_d = None, -1.0
    for _ in range(max(1, max_attempts)):
        p = (rng.uniform(padding, width - padding), rng.uniform(padding, height - padding))
        if avoid is None:
            return p
        d = distance(p, avoid)
        if d >= min_distance:
            return p
        if d > best_d:
            best, best_d = p, d
    logger.debug("spawn placement fell back to farthest sample (%.1f px)", best_d)
    return best


class WaveScheduler:
    def __init__(self, scheduler: Scheduler, spawn_enemy: Callable[[], object],
                 enemy_count: Callable[[], int], is_running: Callable[[], bool],
                 initial_enemies: int = 5, max_enemies: int = 25,
                 play_ambient: Optional[Callable[[str], object]] = None,
                 ambient_sounds: Sequence[str] = (),
                 rng: Optional[random.Random] = None):
        self.scheduler = scheduler
        self.spawn_enemy = spawn_enemy
        self.enemy_count = enemy_count
        self.is_running = is_running
        self.initial_enemies = initial_enemies
        self.max_enemies = max_enemies
        self.play_ambient = play_ambient
        self.ambient_sounds = tuple(ambient_sounds)
        self.rng = rng or random.Random()
        self.current_max = initial_enemies
        self._timers: list = []

    @property
    def floor(self) -> int:
        return self.current_max // 2

    def start(self):
        self.stop()
        self.current_max = self.initial_enemies
        self._timers = [
            self.scheduler.every(CEILING_INTERVAL, self.raise_ceiling, name="wave-ceiling"),
            self.scheduler.every(FLOOR_INTERVAL, self.top_up, name="wave-floor"),
            self.scheduler.every(AMBIENT_INTERVAL, self.ambient, name="wave-ambient"),
        ]

    def stop(self):
        for t in self._timers:
            t.cancel()
        self._timers = []

    def raise_ceiling(self) -> bool:
        """Returns True if an enemy was spawned"""
        if not self.is_running():
            return False
        if self.current_max >= self.max_enemies:
            return False
        self.current_max += 1
        logger.debug("enemy ceiling raised to %d", self.current_max)
        if self.enemy_count() < self.current_max:
            self.spawn_enemy()
            return True
        return False

    def top_up(self) -> bool:
        if not self.is_running():
            return False
        # One per tick to avoid bursts
        if self.enemy_count() < self.floor:
            self.spawn_enemy()
            return True
        return False

    def ambient(self) -> Optional[str]:
        if not self.is_running() or self.play_ambient is None or not self.ambient_sounds:
            return None
        if self.enemy_count() <= 0:
            return None
        snd = self.ambient_sounds[self.rng.randrange(len(self.ambient_sounds))]
        self.play_ambient(snd)
        return snd
