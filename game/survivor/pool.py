"""
Projectile pool
---------------
A growable table of reusable bullet slots. Released slots are parked
off-screen instead of being destroyed, so a later spawn only has to move the
existing render entity back into play.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from .entities import HIDDEN_POS, Projectile
from .hosts import EntityHost, safe_call
from .utils import normalize

logger = logging.getLogger(__name__)

POOL_SIZE = 24
PROJECTILE_TTL = 2.5  # seconds


class ProjectilePool:
    def __init__(self, world_w: float = float("inf"), world_h: float = float("inf"),
                 size: int = POOL_SIZE, ttl: float = PROJECTILE_TTL,
                 host: Optional[EntityHost] = None):
        self.world_w = world_w
        self.world_h = world_h
        self.ttl = ttl
        self.host = host
        self._initial_size = size
        self.slots: List[Projectile] = []

    def __len__(self):
        return len(self.slots)

    # ----------------------------
    # Slot management
    # ----------------------------

    def _ensure_pool(self):
        # Lazily created so an unused pool costs nothing
        if self.slots:
            return
        for _ in range(self._initial_size):
            self._new_slot()

    def _new_slot(self) -> Projectile:
        p = Projectile(slot=len(self.slots))
        if self.host is not None:
            p.handle = safe_call(self.host.create, "projectile", HIDDEN_POS, {"radius": p.radius, "hidden": True})
        self.slots.append(p)
        return p

    def _free_slot(self) -> Projectile:
        for p in self.slots:
            if not p.live:
                return p
        # Never drop a spawn: grow instead
        p = self._new_slot()
        logger.debug("projectile pool grew to %d slots", len(self.slots))
        return p

    # ----------------------------
    # Public API
    # ----------------------------

    def spawn(self, origin: Tuple[float, float], direction: Tuple[float, float], angle: float = 0.0,
              options: Optional[Dict[str, Any]] = None) -> Projectile:
        """Put a bullet into play and return its slot as the handle"""
        self._ensure_pool()
        opts = options or {}
        p = self._free_slot()
        dx, dy = normalize(direction[0], direction[1])
        if dx == 0.0 and dy == 0.0:
            dx = 1.0
        p.x, p.y = origin
        p.origin = (origin[0], origin[1])
        p.dx, p.dy = dx, dy
        p.angle = angle
        p.speed = float(opts.get("speed", 400.0))
        p.critical = bool(opts.get("critical", False))
        p.ttl = float(opts.get("ttl", self.ttl))
        p.tags = dict(opts.get("tags", {}))
        p.live = True
        if self.host is not None and p.handle is not None:
            safe_call(self.host.set_position, p.handle, p.pos)
        return p

    def release(self, p: Projectile) -> bool:
        """Return a slot to the free list. No-op if it is already free."""
        if not p.live:
            return False
        p.live = False
        p.critical = False
        p.x, p.y = HIDDEN_POS
        if self.host is not None and p.handle is not None:
            safe_call(self.host.set_position, p.handle, HIDDEN_POS)
        return True

    def update(self, dt: float) -> int:
        """Move live bullets and cull expired or out-of-bounds ones. Returns culled count."""
        culled = 0
        for p in self.live():
            p.x += p.dx * p.speed * dt
            p.y += p.dy * p.speed * dt
            p.ttl -= dt
            if p.ttl <= 0 or self._out_of_bounds(p):
                self.release(p)
                culled += 1
            elif self.host is not None and p.handle is not None:
                safe_call(self.host.set_position, p.handle, p.pos)
        return culled

    def _out_of_bounds(self, p: Projectile) -> bool:
        return p.x < 0 or p.y < 0 or p.x > self.world_w or p.y > self.world_h

    def live(self) -> List[Projectile]:
        """Snapshot of live slots, safe to iterate while releasing"""
        return [p for p in self.slots if p.live]

    def clear(self):
        self._ensure_pool()
        for p in self.slots:
            self.release(p)
