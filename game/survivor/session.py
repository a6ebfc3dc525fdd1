"""
GameSession - the survival round as one aggregate
-------------------------------------------------
Owns the player, the live-entity lists, score/health/bomb counters, the
simulation clock and every subsystem (skills, powerups, progression, waves,
projectile pool, combat). The outer loop calls `step(dt, input)` once per
frame; nothing else advances game time.

States: Playing <-> Paused, Playing -> GameOver -> (restart) -> Playing.
While a level-up choice is outstanding the step is a no-op as well.
"""

from __future__ import annotations

import enum
import logging
import random
from collections import defaultdict
from typing import Any, Dict, List, Optional, Tuple

from .audio import AMBIENT_SOUNDS, AudioMixer
from .clock import Scheduler, SimClock
from .combat import CombatResolver, roll_percent
from .config import SessionConfig
from .entities import ENEMY_KINDS, Enemy, Player, PowerupPickup, XPGem
from .hosts import Collaborators, InputState, NullHud, safe_call
from .pool import ProjectilePool
from .powerups import POWERUP_KINDS, PowerupManager, make_pickup
from .progression import ProgressionTracker
from .skills import Skill, SkillRegistry
from .utils import angle_deg, clamp, normalize, rotate
from .waves import WaveScheduler, pick_spawn_point
from .world import World

logger = logging.getLogger(__name__)

BARREL_OFFSET = 32.0
BARRAGE_SPREAD_DEG = 12.0
FLOAT_TEXT_TTL = 1.0
SKILL_CHOICES = 3


class SessionState(enum.Enum):
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class GameSession:
    def __init__(self, config: Optional[SessionConfig] = None,
                 collaborators: Optional[Collaborators] = None,
                 seed: Optional[int] = None):
        self.config = config or SessionConfig()
        hosts = collaborators or Collaborators()

        # Collaborators, resolved once
        self.entities = hosts.entities if hosts.entities is not None else World()
        self.hud = hosts.hud if hosts.hud is not None else NullHud()
        self.level_up_ui = hosts.level_up_ui

        self.rng = random.Random(seed)
        self.clock = SimClock()
        self.scheduler = Scheduler(self.clock)
        self.audio = AudioMixer(hosts.audio, now=lambda: self.clock.now)

        cfg = self.config
        self.skills = SkillRegistry(rng=self.rng)
        self.powerups = PowerupManager(self.clock, self.scheduler)
        self.progression = ProgressionTracker(on_level_up=self._on_level_up, on_change=self._on_xp_changed)
        self.pool = ProjectilePool(cfg.world_width, cfg.world_height, size=cfg.projectile_pool_size,
                                   ttl=cfg.projectile_ttl, host=self.entities)
        self.waves = WaveScheduler(
            self.scheduler,
            spawn_enemy=self.spawn_enemy,
            enemy_count=lambda: len(self.enemies),
            is_running=lambda: not self.game_over,
            initial_enemies=cfg.initial_enemy_count,
            max_enemies=cfg.max_enemy_cap,
            play_ambient=lambda snd: self.audio.sfx(snd, volume=0.1),
            ambient_sounds=AMBIENT_SOUNDS,
            rng=self.rng,
        )
        self.combat = CombatResolver(self)

        # World state
        self.player: Optional[Player] = None
        self.enemies: List[Enemy] = []
        self.gems: List[XPGem] = []
        self.pickups: List[PowerupPickup] = []
        self.floaters: List[Any] = []

        # Counters
        self.state = SessionState.PLAYING
        self.epoch = 0
        self.score = 0
        self.bombs = cfg.initial_bombs
        self.candidates: List[Skill] = []
        self._fortify_applied = 0
        self._attack_timer = 0.0
        self.started = False

        self.events: Dict[str, float] = defaultdict(float)
        self.stats: Dict[str, float] = defaultdict(float)

    # ----------------------------
    # Properties
    # ----------------------------

    @property
    def game_over(self) -> bool:
        return self.state is SessionState.GAME_OVER

    @property
    def paused(self) -> bool:
        return self.state is SessionState.PAUSED

    @property
    def awaiting_choice(self) -> bool:
        return self.progression.awaiting_choice

    @property
    def health(self) -> int:
        return self.player.health if self.player is not None else 0

    @property
    def max_health(self) -> int:
        return self.player.max_health if self.player is not None else 0

    @property
    def invincible(self) -> bool:
        return self.player is not None and self.clock.now < self.player.invincible_until

    @property
    def pending_level_ups(self) -> int:
        return self.progression.pending_count

    # ----------------------------
    # Lifecycle
    # ----------------------------

    def start(self):
        """Begin the first round. Calling it twice is a no-op."""
        if self.started:
            return
        self.started = True
        self.audio.play_music(volume=0.8)
        self._begin_round()

    def restart(self):
        """Wipe the round and start over with fresh counters"""
        self.epoch += 1
        self.scheduler.cancel_all()
        self._clear_world()
        self.pool.clear()
        self.skills.reset_all()
        self.powerups.reset()
        self.progression.reset()
        self.audio.reset()
        self.candidates = []
        self.score = 0
        self.bombs = self.config.initial_bombs
        self._fortify_applied = 0
        self._attack_timer = 0.0
        self.state = SessionState.PLAYING
        self.started = True
        logger.debug("session restarted (epoch %d)", self.epoch)
        self._begin_round()

    def _begin_round(self):
        self.spawn_player()
        for _ in range(self.config.initial_enemy_count):
            self.spawn_enemy()
        self.seed_powerups()
        self.waves.start()
        self.notify_score()
        self.notify_health()
        self.notify_bombs()
        self._on_xp_changed(self.progression.xp, self.progression.level, self.progression.required)

    def _clear_world(self):
        if self.player is not None:
            self.host_destroy(self.player)
            self.player = None
        for group in (self.enemies, self.gems, self.pickups):
            for ent in list(group):
                ent.alive = False
                self.host_destroy(ent)
            group.clear()
        for handle in self.floaters:
            safe_call(self.entities.destroy, handle)
        self.floaters.clear()

    def pause(self) -> bool:
        if self.state is not SessionState.PLAYING:
            return False
        self.state = SessionState.PAUSED
        logger.debug("paused at t=%.2f", self.clock.now)
        return True

    def resume(self) -> bool:
        if self.state is not SessionState.PAUSED:
            return False
        self.state = SessionState.PLAYING
        logger.debug("resumed at t=%.2f", self.clock.now)
        return True

    def toggle_pause(self) -> bool:
        return self.resume() if self.paused else self.pause()

    def game_over_now(self):
        if self.game_over:
            return
        self.state = SessionState.GAME_OVER
        self.waves.stop()
        if self.player is not None:
            self.host_destroy(self.player)
        for e in list(self.enemies):
            e.alive = False
            self.host_destroy(e)
        self.enemies.clear()
        self.pool.clear()
        logger.info("game over: score=%d level=%d t=%.1fs", self.score, self.progression.level, self.clock.now)

    # ----------------------------
    # Simulation step
    # ----------------------------

    def step(self, dt: float, inp: Optional[InputState] = None) -> bool:
        """Advance the simulation by dt seconds. Returns False when nothing moved."""
        if not self.started:
            self.start()
        self.events = defaultdict(float)
        inp = inp or InputState()
        if inp.pause:
            self.toggle_pause()
        if self.state is not SessionState.PLAYING or self.awaiting_choice:
            return False

        self.clock.advance(dt)
        self.scheduler.run_due()
        if self.game_over or self.awaiting_choice:
            return True

        if inp.bomb:
            self.detonate_bomb()

        self._move_player(dt, inp)
        self._auto_attack(dt)
        self._move_enemies(dt)
        self.pool.update(dt)
        self.combat.resolve()
        return True

    def _move_player(self, dt: float, inp: InputState):
        p = self.player
        if p is None:
            return
        mx, my = normalize(*inp.move_vector)
        if mx or my:
            p.facing = (mx, my)
            speed = self.config.player_speed * self.skills.move_multiplier() * self.powerups.movement_multiplier()
            p.x = clamp(p.x + mx * speed * dt, p.radius, self.config.world_width - p.radius)
            p.y = clamp(p.y + my * speed * dt, p.radius, self.config.world_height - p.radius)
            self.host_move(p)
        if inp.aim is not None:
            ax, ay = normalize(inp.aim[0] - p.x, inp.aim[1] - p.y)
            if ax or ay:
                p.aim = (ax, ay)
        elif mx or my:
            p.aim = p.facing

    def _auto_attack(self, dt: float):
        interval = self.config.attack_interval
        self._attack_timer += dt * self.powerups.fire_rate_multiplier()
        while self._attack_timer >= interval:
            self._attack_timer -= interval
            self.fire_volley()

    def _move_enemies(self, dt: float):
        p = self.player
        if p is None:
            return
        for e in self.enemies:
            nx, ny = normalize(p.x - e.x, p.y - e.y)
            e.x += nx * e.speed * dt
            e.y += ny * e.speed * dt
            self.host_move(e)

    def fire_volley(self) -> int:
        """One auto-attack: a main shot plus Barrage extras fanned around the aim"""
        p = self.player
        if p is None or self.game_over:
            return 0
        dx, dy = p.aim
        speed = self.config.projectile_speed * self.powerups.projectile_speed_multiplier()
        offsets = [0.0]
        for k in range(1, self.skills.extra_projectiles() + 1):
            side = 1 if k % 2 else -1
            offsets.append(side * BARRAGE_SPREAD_DEG * ((k + 1) // 2))
        crit_pct = self.skills.crit_percent()
        for off in offsets:
            sx, sy = rotate(dx, dy, off)
            origin = (p.x + sx * BARREL_OFFSET, p.y + sy * BARREL_OFFSET)
            self.pool.spawn(origin, (sx, sy), angle_deg(sx, sy),
                            {"speed": speed, "critical": roll_percent(self.rng, crit_pct)})
        self.audio.sfx("bulletsound", volume=0.075)
        self.events["shots"] += len(offsets)
        return len(offsets)

    # ----------------------------
    # Combat entry points
    # ----------------------------

    def detonate_bomb(self) -> bool:
        return self.combat.detonate_bomb()

    def activate_magnet(self, speed_multiplier: float = 1.0) -> int:
        if self.player is None or self.game_over:
            return 0
        epoch = self.epoch
        return self.powerups.pull_to_player(
            self.gems, self.player.pos, self.combat.pickup_gem, speed_multiplier,
            still_valid=lambda: self.epoch == epoch and not self.game_over,
        )

    # ----------------------------
    # Level-ups
    # ----------------------------

    def _on_level_up(self, level: int):
        self.candidates = self.skills.pick_random(SKILL_CHOICES)
        logger.debug("level %d: offering %s", level, [s.id for s in self.candidates])
        if not self.candidates:
            # Everything maxed; nothing to choose
            self.progression.choice_made()
            return
        if self.level_up_ui is None:
            self.choose_skill(self.candidates[0].id)
            return
        safe_call(self.level_up_ui.request_skill_choice, list(self.candidates))

    def choose_skill(self, skill_id: str) -> bool:
        """Answer the outstanding level-up request"""
        if not self.awaiting_choice:
            logger.warning("choose_skill(%r) with no level-up outstanding", skill_id)
            return False
        if skill_id not in [s.id for s in self.candidates]:
            logger.warning("choose_skill(%r) is not one of the offered skills", skill_id)
            return False
        self.skills.bump(skill_id)
        if skill_id == "skill_fortify":
            self.refresh_fortify_bonus()
        self.candidates = []
        self.progression.choice_made()
        return True

    def refresh_fortify_bonus(self):
        """Apply the change in Fortify bonus to max and current health"""
        bonus = self.skills.max_health_bonus()
        delta = bonus - self._fortify_applied
        self._fortify_applied = bonus
        if self.player is None or delta == 0:
            return
        self.player.max_health += delta
        self.player.health = clamp(self.player.health + delta, 0, self.player.max_health)
        self.notify_health()

    def _on_xp_changed(self, xp: int, level: int, required: int):
        safe_call(self.hud.xp_changed, xp, level, required)

    # ----------------------------
    # Spawning
    # ----------------------------

    def spawn_player(self) -> Player:
        cfg = self.config
        self._fortify_applied = self.skills.max_health_bonus()
        max_hp = cfg.initial_health + self._fortify_applied
        self.player = Player(x=cfg.world_width / 2, y=cfg.world_height / 2, max_health=max_hp, health=max_hp)
        self.player.handle = safe_call(self.entities.create, "player", self.player.pos,
                                       {"radius": self.player.radius})
        return self.player

    def _spawn_point(self) -> Tuple[float, float]:
        cfg = self.config
        return pick_spawn_point(self.rng, cfg.world_width, cfg.world_height, cfg.enemy_spawn_padding,
                                avoid=self.player.pos if self.player is not None else None,
                                min_distance=cfg.spawn_min_distance, max_attempts=cfg.spawn_max_attempts)

    def spawn_enemy(self) -> Optional[Enemy]:
        if self.game_over or self.player is None:
            return None
        x, y = self._spawn_point()
        kind = ENEMY_KINDS[self.rng.randrange(len(ENEMY_KINDS))]
        e = Enemy(x=x, y=y, kind=kind, speed=self.config.enemy_speed)
        e.handle = safe_call(self.entities.create, "enemy", e.pos, {"radius": e.radius, "kind": kind})
        self.enemies.append(e)
        return e

    def schedule_respawn(self):
        epoch = self.epoch

        def respawn():
            if self.epoch != epoch or self.game_over:
                return
            self.spawn_enemy()

        self.scheduler.call_later(self.config.respawn_delay, respawn, name="respawn")

    def spawn_gem(self, pos: Tuple[float, float], value: int = 1) -> XPGem:
        g = XPGem(x=pos[0], y=pos[1], value=max(1, int(value)))
        g.handle = safe_call(self.entities.create, "xpGem", g.pos, {"radius": g.radius, "value": g.value})
        self.gems.append(g)
        return g

    def spawn_powerup(self, kind: str, pos: Optional[Tuple[float, float]] = None) -> PowerupPickup:
        pw = make_pickup(kind, pos if pos is not None else self._spawn_point())
        pw.handle = safe_call(self.entities.create, "powerup", pw.pos, {"radius": pw.radius, "type": kind})
        self.pickups.append(pw)
        return pw

    def seed_powerups(self):
        for kind in POWERUP_KINDS:
            for _ in range(self.config.powerups_per_kind):
                self.spawn_powerup(kind)

    def floating_text(self, pos: Tuple[float, float], text: str):
        handle = safe_call(self.entities.create, "floatingText", pos, {"text": text})
        if handle is None:
            return
        self.floaters.append(handle)

        def expire():
            if handle in self.floaters:
                self.floaters.remove(handle)
                safe_call(self.entities.destroy, handle)

        self.scheduler.call_later(FLOAT_TEXT_TTL, expire, name="float-text")

    # ----------------------------
    # Counters and host plumbing
    # ----------------------------

    def add_score(self, n: int = 1) -> int:
        self.score += max(0, n)
        self.notify_score()
        return self.score

    def notify_score(self):
        safe_call(self.hud.score_changed, self.score)

    def notify_health(self):
        safe_call(self.hud.health_changed, self.health, self.max_health)

    def notify_bombs(self):
        safe_call(self.hud.bombs_changed, self.bombs)

    def host_move(self, ent):
        if ent.handle is not None:
            safe_call(self.entities.set_position, ent.handle, ent.pos)

    def host_destroy(self, ent):
        if ent.handle is not None:
            safe_call(self.entities.destroy, ent.handle)
            ent.handle = None

    def snapshot(self) -> Dict[str, Any]:
        """Plain-data summary of the session, handy for HUDs and env info"""
        return {
            "state": self.state.value,
            "time": self.clock.now,
            "score": self.score,
            "health": self.health,
            "max_health": self.max_health,
            "bombs": self.bombs,
            "xp": self.progression.xp,
            "level": self.progression.level,
            "xp_required": self.progression.required,
            "pending_level_ups": self.pending_level_ups,
            "awaiting_choice": self.awaiting_choice,
            "enemies": len(self.enemies),
            "enemy_ceiling": self.waves.current_max,
            "projectiles": len(self.pool.live()),
            "gems": len(self.gems),
            "pickups": len(self.pickups),
            "skills": self.skills.levels(),
        }
