"""
Collaborator interfaces the simulation talks to
-----------------------------------------------
Rendering, audio, HUD and the level-up menu live outside the core. Each one is
resolved once when the session is built; missing optional hosts are replaced
with the null implementations below so the core never probes for methods.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Tuple

logger = logging.getLogger(__name__)


class EntityHost(Protocol):
    """
    Creates and tracks visible entities. Handles stay stable until destroyed.

    The session keeps the authoritative positions and radii and resolves every
    collision itself with `circle_collide`; the host only mirrors them.
    `is_colliding_with` and `query_by_tag` are offered to front ends and tools
    that inspect the host, and the core never relies on their answers.
    """

    def create(self, kind: str, position: Tuple[float, float], attributes: Optional[Dict[str, Any]] = None) -> Any: ...

    def destroy(self, handle: Any) -> None: ...

    def set_position(self, handle: Any, position: Tuple[float, float]) -> None: ...

    def is_colliding_with(self, a: Any, b: Any) -> bool: ...

    def query_by_tag(self, tag: str) -> List[Any]: ...


class AudioSink(Protocol):
    def play(self, sound_id: str, volume: float = 1.0, loop: bool = False) -> Any: ...


class HudSink(Protocol):
    def score_changed(self, score: int) -> None: ...

    def health_changed(self, health: int, max_health: int) -> None: ...

    def bombs_changed(self, bombs: int) -> None: ...

    def xp_changed(self, xp: int, level: int, required: int) -> None: ...


class LevelUpUI(Protocol):
    def request_skill_choice(self, candidates: Sequence[Any]) -> None: ...


class NullAudio:
    def play(self, sound_id: str, volume: float = 1.0, loop: bool = False):
        return None


class NullHud:
    def score_changed(self, score: int):
        pass

    def health_changed(self, health: int, max_health: int):
        pass

    def bombs_changed(self, bombs: int):
        pass

    def xp_changed(self, xp: int, level: int, required: int):
        pass


@dataclass
class InputState:
    """Logical input for one simulation step"""
    move_left: bool = False
    move_right: bool = False
    move_up: bool = False
    move_down: bool = False
    bomb: bool = False  # pressed this step
    pause: bool = False  # pressed this step
    aim: Optional[Tuple[float, float]] = None  # pointer in world coordinates

    @property
    def move_vector(self) -> Tuple[float, float]:
        x = float(self.move_right) - float(self.move_left)
        y = float(self.move_down) - float(self.move_up)
        return x, y


@dataclass
class Collaborators:
    """Everything the session needs from the outside world"""
    entities: Optional[EntityHost] = None
    audio: Optional[AudioSink] = None
    hud: Optional[HudSink] = None
    level_up_ui: Optional[LevelUpUI] = None


def safe_call(fn: Callable, *args, **kwargs):
    """Call into a collaborator; its failures never stop the simulation."""
    try:
        return fn(*args, **kwargs)
    except Exception as exc:  # noqa: BLE001 - host errors are not ours to handle
        logger.debug("collaborator call %s failed: %s", getattr(fn, "__qualname__", fn), exc)
        return None
