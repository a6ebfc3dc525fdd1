"""
Game entity dataclasses
"""

from dataclasses import dataclass, field
from typing import Any, Tuple

# Where hidden pooled entities are parked
HIDDEN_POS = (-1000.0, -1000.0)

ENEMY_KINDS = ("enemy1", "enemy2", "enemy3", "enemy4")


@dataclass
class Player:
    """The survivor, one per session"""
    x: float
    y: float
    max_health: int
    health: int
    radius: float = 14.0
    facing: Tuple[float, float] = (1.0, 0.0)
    aim: Tuple[float, float] = (1.0, 0.0)
    invincible_until: float = 0.0
    handle: Any = None

    @property
    def pos(self) -> Tuple[float, float]:
        return self.x, self.y


@dataclass
class Enemy:
    """Enemy entity that chases the player"""
    x: float
    y: float
    kind: str = "enemy1"
    hp: int = 1
    radius: float = 16.0
    speed: float = 75.0  # px/s
    alive: bool = True
    handle: Any = None

    @property
    def pos(self) -> Tuple[float, float]:
        return self.x, self.y


@dataclass
class XPGem:
    """Experience dropped by a dead enemy"""
    x: float
    y: float
    value: int = 1
    radius: float = 8.0
    alive: bool = True
    handle: Any = None

    @property
    def pos(self) -> Tuple[float, float]:
        return self.x, self.y


@dataclass
class PowerupPickup:
    """Collectible that activates a powerup"""
    x: float
    y: float
    kind: str = "magnet"
    radius: float = 9.0
    alive: bool = True
    handle: Any = None

    @property
    def pos(self) -> Tuple[float, float]:
        return self.x, self.y


@dataclass
class Projectile:
    """Pooled bullet; a slot is either live or parked off-screen"""
    slot: int
    x: float = HIDDEN_POS[0]
    y: float = HIDDEN_POS[1]
    dx: float = 0.0
    dy: float = 0.0
    speed: float = 400.0
    angle: float = 0.0
    critical: bool = False
    ttl: float = 0.0  # seconds
    radius: float = 4.0
    origin: Tuple[float, float] = HIDDEN_POS
    live: bool = False
    handle: Any = None
    tags: dict = field(default_factory=dict)

    @property
    def pos(self) -> Tuple[float, float]:
        return self.x, self.y
