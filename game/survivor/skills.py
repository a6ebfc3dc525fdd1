"""
Skill registry
--------------
Ten upgrade skills, each with a six-entry effect table indexed by level 0..5
(level 0 means no effect). The registry owns the per-player level counters;
everything else is static data.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

MAX_SKILL_LEVEL = 5


@dataclass(frozen=True)
class Skill:
    id: str
    name: str
    description: str
    effects: Dict[str, Sequence[float]] = field(default_factory=dict, compare=False, hash=False)


SKILLS = (
    # Power Strike: +10% damage per level
    Skill("skill_power", "Power Strike", "Deal extra damage on hit.",
          {"dmgMult": (1, 1.1, 1.2, 1.3, 1.4, 1.5)}),
    # Fortify: one extra heart per level
    Skill("skill_fortify", "Fortify", "Increase max health.",
          {"hpBonus": (0, 1, 2, 3, 4, 5)}),
    Skill("skill_swift", "Swift Foot", "Move slightly faster.",
          {"moveMult": (1, 1.1, 1.2, 1.3, 1.4, 1.5)}),
    Skill("skill_focus", "Focus", "Gain extra XP from enemies.",
          {"xpMult": (1, 1.5, 2, 2.5, 3.25, 4)}),
    Skill("skill_barrage", "Barrage", "Fire additional projectiles.",
          {"extraProjectiles": (0, 1, 1, 3, 3, 5)}),
    Skill("skill_magnet", "Magnetism", "Pick up nearby items.",
          {"pickupMult": (1, 1.5, 1.75, 2.0, 2.25, 2.5)}),
    Skill("skill_armor", "Armor Plating", "Reduce incoming damage.",
          {"dmgReductionPct": (0, 10, 20, 30, 40, 50)}),
    # Knockback strength is in pixels
    Skill("skill_knockback", "Knockback", "Small knockback on hit.",
          {"knockback": (0, 40, 60, 80, 100, 120)}),
    Skill("skill_expert", "Expertise", "Critical hit chance up.",
          {"critPct": (0, 5, 10, 15, 20, 25)}),
    Skill("skill_escape", "Escape Artist", "Chance to dodge attacks.",
          {"dodgePct": (0, 10, 15, 20, 25, 30)}),
)

SKILLS_BY_ID = {s.id: s for s in SKILLS}


def lookup_effect(skill_id: str, key: str, level: int) -> Optional[float]:
    """Read one effect table entry; None when the skill or key has no table"""
    skill = SKILLS_BY_ID.get(skill_id)
    if skill is None:
        return None
    table = skill.effects.get(key)
    if not table:
        return None
    lv = min(MAX_SKILL_LEVEL, max(0, int(level or 0)))
    if lv >= len(table):
        return None
    return table[lv]


class SkillRegistry:
    """Skill catalogue plus the player's level in each skill"""

    def __init__(self, skills: Sequence[Skill] = SKILLS, rng: Optional[random.Random] = None):
        self._skills = list(skills)
        self._by_id = {s.id: s for s in self._skills}
        self._levels: Dict[str, int] = {s.id: 0 for s in self._skills}
        self.rng = rng or random.Random()

    def list_all(self) -> List[Skill]:
        return list(self._skills)

    def get(self, skill_id: str) -> Optional[Skill]:
        return self._by_id.get(skill_id)

    def level_of(self, skill_id: str) -> int:
        return self._levels.get(skill_id, 0)

    def levels(self) -> Dict[str, int]:
        return dict(self._levels)

    def bump(self, skill_id: str) -> int:
        """Raise a skill by one level, capped at MAX_SKILL_LEVEL. Returns the new level."""
        if skill_id not in self._levels:
            logger.warning("bump of unknown skill %r ignored", skill_id)
            return 0
        nxt = min(MAX_SKILL_LEVEL, self._levels[skill_id] + 1)
        self._levels[skill_id] = nxt
        logger.debug("skill %s -> %d", skill_id, nxt)
        return nxt

    def is_maxed(self, skill_id: str) -> bool:
        return self.level_of(skill_id) >= MAX_SKILL_LEVEL

    def all_maxed(self) -> bool:
        return all(lv >= MAX_SKILL_LEVEL for lv in self._levels.values())

    def pick_random(self, n: int = 3, exclude_maxed: bool = True) -> List[Skill]:
        """Up to n distinct skills, drawn without replacement"""
        source = [s for s in self._skills if not (exclude_maxed and self.is_maxed(s.id))]
        out = []
        while len(out) < n and source:
            out.append(source.pop(self.rng.randrange(len(source))))
        return out

    def reset_all(self):
        for k in self._levels:
            self._levels[k] = 0

    # ----------------------------
    # Derived modifiers
    # ----------------------------

    def _modifier(self, skill_id: str, key: str, neutral: float) -> float:
        value = lookup_effect(skill_id, key, self.level_of(skill_id))
        return neutral if value is None else value

    def damage_multiplier(self) -> float:
        return self._modifier("skill_power", "dmgMult", 1)

    def max_health_bonus(self) -> int:
        return int(self._modifier("skill_fortify", "hpBonus", 0))

    def move_multiplier(self) -> float:
        return self._modifier("skill_swift", "moveMult", 1)

    def xp_multiplier(self) -> float:
        return self._modifier("skill_focus", "xpMult", 1)

    def extra_projectiles(self) -> int:
        return int(self._modifier("skill_barrage", "extraProjectiles", 0))

    def pickup_range_multiplier(self) -> float:
        return self._modifier("skill_magnet", "pickupMult", 1)

    def armor_reduction_percent(self) -> float:
        return self._modifier("skill_armor", "dmgReductionPct", 0)

    def crit_percent(self) -> float:
        return self._modifier("skill_expert", "critPct", 0)

    def dodge_percent(self) -> float:
        return self._modifier("skill_escape", "dodgePct", 0)

    def knockback_strength(self) -> float:
        return self._modifier("skill_knockback", "knockback", 0)
