"""
Arcade front end: draws a GameSession and feeds it keyboard/mouse input.
Also serves as the session's HUD, level-up menu and audio host.
"""

from __future__ import annotations

import logging
import os
from typing import Dict, List, Optional

import arcade

from .config import SessionConfig
from .hosts import Collaborators, InputState
from .keybinds import KeyBindings
from .powerups import FIRERATE, MOVEMENT
from .session import GameSession
from .utils import clamp

logger = logging.getLogger(__name__)

SOUND_DIR = os.environ.get("SURVIVOR_SOUND_DIR", "assetsSounds")


class ArcadeAudio:
    """Plays <sound_dir>/<id>.mp3; missing files are skipped quietly"""

    def __init__(self, sound_dir: str = SOUND_DIR):
        self.sound_dir = sound_dir
        self._cache: Dict[str, Optional[arcade.Sound]] = {}

    def _load(self, sound_id: str):
        if sound_id not in self._cache:
            path = os.path.join(self.sound_dir, f"{sound_id}.mp3")
            self._cache[sound_id] = arcade.load_sound(path) if os.path.exists(path) else None
            if self._cache[sound_id] is None:
                logger.debug("no sound file for %s", sound_id)
        return self._cache[sound_id]

    def play(self, sound_id: str, volume: float = 1.0, loop: bool = False):
        snd = self._load(sound_id)
        if snd is None:
            return None
        return arcade.play_sound(snd, volume=volume, loop=loop)


class SurvivorWindow(arcade.Window):
    """Arcade window for rendering (and optionally playing) a session"""

    def __init__(self, session: Optional[GameSession] = None, interactive: bool = True,
                 config: Optional[SessionConfig] = None, bindings: Optional[KeyBindings] = None,
                 seed: Optional[int] = None):
        cfg = session.config if session is not None else (config or SessionConfig())
        super().__init__(int(cfg.world_width), int(cfg.world_height), "Survivor - Arcade")
        self.interactive = interactive
        self.bindings = bindings or KeyBindings()
        self.offered: List = []
        self._held = set()
        self._pressed = set()
        self._mouse = None

        if session is None:
            session = GameSession(cfg, Collaborators(audio=ArcadeAudio(), hud=self, level_up_ui=self), seed=seed)
            session.start()
        self.session = session

        # Colors
        self.BG = (18, 18, 22)
        self.PLAYER_C = (80, 200, 120)
        self.ENEMY_C = (220, 80, 80)
        self.GEM_C = (240, 210, 80)
        self.BULLET_C = (180, 180, 220)
        self.CRIT_C = (255, 140, 40)
        self.POWERUP_C = {"magnet": (180, 100, 255), "firerate": (255, 140, 40), "movement": (100, 200, 255)}
        self.HUD_C = (220, 220, 220)

    # ----------------------------
    # HUD / level-up hosts
    # ----------------------------

    def score_changed(self, score: int):
        pass

    def health_changed(self, health: int, max_health: int):
        pass

    def bombs_changed(self, bombs: int):
        pass

    def xp_changed(self, xp: int, level: int, required: int):
        pass

    def request_skill_choice(self, candidates):
        self.offered = list(candidates)

    # ----------------------------
    # Input
    # ----------------------------

    def _action(self, symbol: int) -> Optional[str]:
        for action, key in self.bindings.all().items():
            if getattr(arcade.key, key.upper(), None) == symbol:
                return action
        return None

    def on_key_press(self, symbol: int, modifiers: int):
        if not self.interactive:
            return
        s = self.session
        if s.awaiting_choice and self.offered:
            slots = {arcade.key.KEY_1: 0, arcade.key.KEY_2: 1, arcade.key.KEY_3: 2}
            idx = slots.get(symbol)
            if idx is not None and idx < len(self.offered):
                choice = self.offered[idx]
                self.offered = []
                s.choose_skill(choice.id)
            return
        if symbol == arcade.key.R and s.game_over:
            s.restart()
            return
        action = self._action(symbol)
        if action in ("bomb", "pause"):
            self._pressed.add(action)
        elif action is not None:
            self._held.add(action)

    def on_key_release(self, symbol: int, modifiers: int):
        action = self._action(symbol)
        self._held.discard(action)

    def on_mouse_motion(self, x: float, y: float, dx: float, dy: float):
        # Arcade's y axis points up; the simulation's points down
        self._mouse = (x, self.height - y)

    def on_update(self, delta_time: float):
        if not self.interactive:
            return
        inp = InputState(
            move_left="move_left" in self._held,
            move_right="move_right" in self._held,
            move_up="move_up" in self._held,
            move_down="move_down" in self._held,
            bomb="bomb" in self._pressed,
            pause="pause" in self._pressed,
            aim=self._mouse,
        )
        self._pressed.clear()
        self.session.step(min(delta_time, 0.1), inp)

    # ----------------------------
    # Drawing
    # ----------------------------

    def _y(self, y: float) -> float:
        return self.height - y

    def on_draw(self):
        """Draw the current game state"""
        self.clear()
        arcade.set_background_color(self.BG)
        s = self.session

        for pw in s.pickups:
            arcade.draw_circle_filled(pw.x, self._y(pw.y), pw.radius, self.POWERUP_C.get(pw.kind, self.HUD_C))
        for g in s.gems:
            arcade.draw_circle_filled(g.x, self._y(g.y), g.radius, self.GEM_C)
        for e in s.enemies:
            arcade.draw_circle_filled(e.x, self._y(e.y), e.radius, self.ENEMY_C)
        for b in s.pool.live():
            arcade.draw_circle_filled(b.x, self._y(b.y), b.radius, self.CRIT_C if b.critical else self.BULLET_C)
        if s.player is not None:
            color = self.HUD_C if s.invincible else self.PLAYER_C
            arcade.draw_circle_filled(s.player.x, self._y(s.player.y), s.player.radius, color)

        self._draw_hud()
        if s.awaiting_choice and self.offered:
            self._draw_skill_menu()
        elif s.game_over:
            arcade.draw_text("GAME OVER - press R to restart", self.width / 2, self.height / 2,
                             self.HUD_C, 24, anchor_x="center")
        elif s.paused:
            arcade.draw_text("PAUSED", self.width / 2, self.height / 2, self.HUD_C, 24, anchor_x="center")

    def _draw_hud(self):
        s = self.session
        # Health bar
        bar_w, bar_h = 180, 10
        x0, y0 = 12, self.height - 22
        arcade.draw_lrbt_rectangle_filled(x0, x0 + bar_w, y0, y0 + bar_h, (60, 60, 60))
        fill = bar_w * clamp(s.health / max(1, s.max_health), 0, 1)
        if fill > 0:
            arcade.draw_lrbt_rectangle_filled(x0, x0 + fill, y0, y0 + bar_h, self.PLAYER_C)

        # XP bar
        prog = s.progression
        xp_fill = bar_w * clamp(prog.xp / max(1, prog.required), 0, 1)
        arcade.draw_lrbt_rectangle_filled(x0, x0 + bar_w, 12, 20, (60, 60, 60))
        if xp_fill > 0:
            arcade.draw_lrbt_rectangle_filled(x0, x0 + xp_fill, 12, 20, (255, 200, 0))

        buffs = []
        for kind in (FIRERATE, MOVEMENT):
            if s.powerups.is_active(kind):
                buffs.append(f"{kind} {s.powerups.remaining(kind):.0f}s")
        txt = (f"HP: {s.health}/{s.max_health}  Bombs: {s.bombs}  Score: {s.score}  "
               f"LV {prog.level} {prog.xp}/{prog.required}  Enemies: {len(s.enemies)}  "
               + "  ".join(buffs))
        arcade.draw_text(txt, 12, self.height - 40, self.HUD_C, 14)

    def _draw_skill_menu(self):
        s = self.session
        arcade.draw_text("LEVEL UP - choose a skill (1-3)", self.width / 2, self.height / 2 + 80,
                         self.HUD_C, 22, anchor_x="center")
        for i, skill in enumerate(self.offered):
            lvl = s.skills.level_of(skill.id)
            stars = "*" * lvl + "." * (5 - lvl)
            arcade.draw_text(f"{i + 1}. {skill.name} [{stars}] - {skill.description}",
                             self.width / 2, self.height / 2 + 30 - i * 30, self.HUD_C, 16, anchor_x="center")


def run_window(config: Optional[SessionConfig] = None, seed: Optional[int] = None):
    window = SurvivorWindow(config=config, seed=seed)
    arcade.run()
    return window
