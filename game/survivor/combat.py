"""
Combat resolution
-----------------
Collision-driven damage, knockback, crits, dodge and armor, bombs and pickups.
The resolver holds no state of its own; it reads and mutates the session it
was built for. Every loop over a live-entity list iterates a snapshot, since
kills remove entries from the list being walked.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .entities import Enemy, PowerupPickup, Projectile, XPGem
from .powerups import FIRERATE, MAGNET, MOVEMENT, pickup_range, within_range
from .utils import circle_collide, clamp, normalize, round_half_up

if TYPE_CHECKING:
    from .session import GameSession

logger = logging.getLogger(__name__)

BASE_DAMAGE = 1
CRIT_MULTIPLIER = 1.5
CONTACT_DAMAGE = 1


def projectile_damage(damage_multiplier: float, critical: bool = False, base: float = BASE_DAMAGE) -> int:
    """Damage dealt by one bullet; always at least 1"""
    crit = CRIT_MULTIPLIER if critical else 1.0
    return round_half_up(max(1.0, base * damage_multiplier * crit))


def contact_damage(armor_reduction_percent: float, base: float = CONTACT_DAMAGE) -> int:
    """Damage the player takes from touching an enemy, after armor; always at least 1"""
    return round_half_up(max(1.0, base * (1.0 - armor_reduction_percent / 100.0)))


def roll_percent(rng, percent: float) -> bool:
    """True with probability percent/100"""
    if percent <= 0:
        return False
    return rng.random() * 100.0 < percent


class CombatResolver:
    def __init__(self, session: "GameSession"):
        self.session = session

    # ----------------------------
    # Per-step collision pass
    # ----------------------------

    def resolve(self):
        s = self.session

        # Bullets vs enemies
        for p in s.pool.live():
            for e in list(s.enemies):
                if not e.alive:
                    continue
                if circle_collide(p.x, p.y, p.radius, e.x, e.y, e.radius):
                    self.projectile_hit(p, e)
                    break

        # Enemies vs player
        for e in list(s.enemies):
            if s.game_over or s.player is None:
                return
            if e.alive and circle_collide(s.player.x, s.player.y, s.player.radius, e.x, e.y, e.radius):
                self.enemy_contact(e)

        self.collect_nearby()

    def collect_nearby(self):
        """Passive pickup of gems and powerups inside the (Magnetism-scaled) radius"""
        s = self.session
        if s.player is None or s.game_over:
            return
        radius = pickup_range(s.skills.pickup_range_multiplier())
        for g in within_range(s.player.pos, list(s.gems), radius):
            self.pickup_gem(g)
        for pw in within_range(s.player.pos, list(s.pickups), radius):
            self.pickup_powerup(pw)

    # ----------------------------
    # Individual interactions
    # ----------------------------

    def projectile_hit(self, p: Projectile, e: Enemy) -> bool:
        s = self.session
        if not p.live or not e.alive:
            return False
        s.pool.release(p)
        dmg = projectile_damage(s.skills.damage_multiplier(), p.critical)
        e.hp -= dmg
        s.events["hits"] += 1
        strength = s.skills.knockback_strength()
        if strength > 0:
            nx, ny = normalize(e.x - p.origin[0], e.y - p.origin[1])
            e.x = clamp(e.x + nx * strength, e.radius, s.config.world_width - e.radius)
            e.y = clamp(e.y + ny * strength, e.radius, s.config.world_height - e.radius)
            s.host_move(e)
        if e.hp <= 0:
            self.kill_enemy(e)
        return True

    def kill_enemy(self, e: Enemy) -> bool:
        """Score, floating +1, XP gem and a delayed replacement for one enemy"""
        s = self.session
        if not e.alive:
            return False
        e.alive = False
        if e in s.enemies:
            s.enemies.remove(e)
        s.host_destroy(e)
        s.add_score(1)
        s.floating_text(e.pos, "+1")
        s.spawn_gem(e.pos)
        s.schedule_respawn()
        s.events["kills"] += 1
        s.stats["kills"] += 1
        return True

    def enemy_contact(self, e: Enemy) -> bool:
        """Returns True when the player actually lost health"""
        s = self.session
        player = s.player
        if player is None or s.game_over:
            return False
        now = s.clock.now
        if now < player.invincible_until:
            return False
        if roll_percent(s.rng, s.skills.dodge_percent()):
            player.invincible_until = now + s.config.invincibility_window
            s.events["dodges"] += 1
            return False
        dmg = contact_damage(s.skills.armor_reduction_percent())
        player.health -= dmg
        s.events["damage"] += dmg
        s.stats["damage_taken"] += dmg
        # Push the player away from the enemy
        nx, ny = normalize(player.x - e.x, player.y - e.y)
        push = s.config.player_knockback
        player.x = clamp(player.x + nx * push, player.radius, s.config.world_width - player.radius)
        player.y = clamp(player.y + ny * push, player.radius, s.config.world_height - player.radius)
        s.host_move(player)
        player.invincible_until = now + s.config.invincibility_window
        s.notify_health()
        if player.health <= 0:
            s.game_over_now()
        return True

    def detonate_bomb(self) -> bool:
        s = self.session
        if s.bombs <= 0 or s.game_over:
            return False
        s.bombs -= 1
        s.notify_bombs()
        for e in list(s.enemies):
            s.audio.sfx("explosion", volume=0.09)
            self.kill_enemy(e)
        logger.debug("bomb used, %d left", s.bombs)
        return True

    def pickup_gem(self, g: XPGem) -> bool:
        s = self.session
        if not g.alive:
            return False
        g.alive = False
        if g in s.gems:
            s.gems.remove(g)
        s.host_destroy(g)
        amount = round_half_up(g.value * s.skills.xp_multiplier())
        s.events["xp"] += amount
        s.stats["xp_gained"] += amount
        s.progression.add_xp(amount)
        return True

    def pickup_powerup(self, pw: PowerupPickup) -> bool:
        s = self.session
        if not pw.alive:
            return False
        pw.alive = False
        if pw in s.pickups:
            s.pickups.remove(pw)
        s.host_destroy(pw)
        if pw.kind == MAGNET:
            s.activate_magnet()
        elif pw.kind in (FIRERATE, MOVEMENT):
            s.powerups.activate(pw.kind, s.config.powerup_duration)
        s.events["powerups"] += 1
        return True
