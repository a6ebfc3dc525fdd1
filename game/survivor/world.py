"""
In-memory entity host
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .utils import circle_collide

# Collision radius per entity kind when no explicit radius attribute is given
DEFAULT_RADII = {
    "player": 14.0,
    "enemy": 16.0,
    "projectile": 4.0,
    "xpGem": 8.0,
    "powerup": 9.0,
}


@dataclass
class WorldEntity:
    id: int
    kind: str
    x: float
    y: float
    attributes: Dict[str, Any] = field(default_factory=dict)

    @property
    def radius(self) -> float:
        return float(self.attributes.get("radius", DEFAULT_RADII.get(self.kind, 0.0)))

    @property
    def tags(self) -> Tuple[str, ...]:
        return (self.kind,) + tuple(self.attributes.get("tags", ()))


class World:
    """Keeps visible entities in a dict keyed by id. Handles are the ids."""

    def __init__(self):
        self._entities: Dict[int, WorldEntity] = {}
        self._ids = itertools.count(1)
        self.created = 0
        self.destroyed = 0

    def __len__(self):
        return len(self._entities)

    def __contains__(self, handle):
        return handle in self._entities

    def get(self, handle) -> Optional[WorldEntity]:
        return self._entities.get(handle)

    def create(self, kind: str, position: Tuple[float, float], attributes: Optional[Dict[str, Any]] = None) -> int:
        handle = next(self._ids)
        self._entities[handle] = WorldEntity(handle, kind, position[0], position[1], dict(attributes or {}))
        self.created += 1
        return handle

    def destroy(self, handle) -> None:
        if self._entities.pop(handle, None) is not None:
            self.destroyed += 1

    def set_position(self, handle, position: Tuple[float, float]) -> None:
        ent = self._entities.get(handle)
        if ent is None:
            return
        ent.x, ent.y = position

    def is_colliding_with(self, a, b) -> bool:
        ea, eb = self._entities.get(a), self._entities.get(b)
        if ea is None or eb is None:
            return False
        return circle_collide(ea.x, ea.y, ea.radius, eb.x, eb.y, eb.radius)

    def query_by_tag(self, tag: str) -> List[int]:
        return [h for h, e in self._entities.items() if tag in e.tags]

    def clear(self):
        self.destroyed += len(self._entities)
        self._entities.clear()
