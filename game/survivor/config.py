"""
Session configuration
"""

from __future__ import annotations

from dataclasses import dataclass, fields, asdict
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class SessionConfig:
    """Numeric settings for one survival session. Validated once on creation."""

    # Round setup
    initial_health: int = 5
    initial_bombs: int = 3
    initial_enemy_count: int = 5
    enemy_spawn_padding: float = 64.0
    max_enemy_cap: int = 25

    # Arena
    world_width: float = 1280.0
    world_height: float = 720.0

    # Gameplay tuning
    player_speed: float = 180.0  # px/s
    enemy_speed: float = 75.0  # px/s
    attack_interval: float = 0.4  # seconds between volleys
    projectile_speed: float = 400.0
    projectile_ttl: float = 2.5
    projectile_pool_size: int = 24
    spawn_min_distance: float = 200.0
    spawn_max_attempts: int = 32
    respawn_delay: float = 1.5
    invincibility_window: float = 0.5
    player_knockback: float = 50.0
    powerups_per_kind: int = 1
    powerup_duration: float = 10.0

    def __post_init__(self):
        if self.world_width <= 0 or self.world_height <= 0:
            raise ValueError("world size must be positive")
        if self.initial_health < 1:
            raise ValueError("initial_health must be at least 1")
        if self.initial_bombs < 0:
            raise ValueError("initial_bombs cannot be negative")
        if self.initial_enemy_count < 0:
            raise ValueError("initial_enemy_count cannot be negative")
        if self.max_enemy_cap < self.initial_enemy_count:
            raise ValueError("max_enemy_cap must be >= initial_enemy_count")
        if self.enemy_spawn_padding < 0:
            raise ValueError("enemy_spawn_padding cannot be negative")
        if (2 * self.enemy_spawn_padding >= self.world_width
                or 2 * self.enemy_spawn_padding >= self.world_height):
            raise ValueError("enemy_spawn_padding leaves no room to spawn")
        if self.spawn_max_attempts < 1:
            raise ValueError("spawn_max_attempts must be at least 1")
        for name in ("attack_interval", "projectile_speed", "projectile_ttl",
                     "respawn_delay", "invincibility_window", "powerup_duration"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.projectile_pool_size < 0:
            raise ValueError("projectile_pool_size cannot be negative")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]] = None) -> "SessionConfig":
        """Build a config from a plain dict, ignoring keys it does not know"""
        data = data or {}
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
