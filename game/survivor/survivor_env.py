"""
SurvivorEnv - gymnasium wrapper around a GameSession
----------------------------------------------------
- Gymnasium API over the survival simulation
- 1 agent that moves, aims the auto-attack and triggers bombs
- Level-up choices are answered with a random offered skill
- Vector observation: player state + top-K nearest enemies + top-M nearest gems
- MultiDiscrete action space: [move(5), bomb(2), aim(8)]

Quick test:
    python -c "from game.survivor import run_random_episode; run_random_episode(render=False)"
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .config import SessionConfig
from .hosts import Collaborators, InputState
from .powerups import FIRERATE, MOVEMENT
from .progression import MAX_LEVEL
from .session import GameSession
from .utils import clamp

DEFAULT_REWARDS = {
    "R_KILL": 1.0,
    "R_XP": 0.1,
    "R_LEVEL": 0.5,
    "R_DAMAGE": 1.0,  # per heart lost
    "R_TIME": 0.001,
    "R_DEATH": 5.0,
}


class _RandomChooser:
    """Level-up host that picks one of the offered skills at random"""

    def __init__(self, env: "SurvivorEnv"):
        self.env = env

    def request_skill_choice(self, candidates):
        # Deferred to the env step so the session is never re-entered mid-callback
        self.env._pending_choice = list(candidates)


class SurvivorEnv(gym.Env):
    """Top-down survival environment"""

    metadata = {"render_modes": ["human"], "render_fps": 60}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        session_config: Optional[Dict[str, Any]] = None,
        dt: float = 1 / 30,
        max_steps: int = 5400,  # 3 minutes at 30 FPS
        k_enemies: int = 5,
        m_gems: int = 3,
        rewards: Optional[Dict[str, float]] = None,
    ):
        super().__init__()

        self.render_mode = render_mode
        self.config = SessionConfig.from_dict(session_config)
        self.width = self.config.world_width
        self.height = self.config.world_height
        self.dt = dt
        self.max_steps = max_steps
        self.k_enemies = k_enemies
        self.m_gems = m_gems
        self.rewards = dict(DEFAULT_REWARDS, **(rewards or {}))

        # move: 0 stay, 1 up, 2 down, 3 left, 4 right
        # bomb: 0/1
        # aim: 0..7 (8 directions)
        self.action_space = spaces.MultiDiscrete([5, 2, 8])

        # Player: pos(2) health(1) bombs(1) level(1) xp progress(1) buffs(2)
        # Each enemy: rel pos(2); each gem: rel pos(2)
        obs_dim = 8 + (self.k_enemies * 2) + (self.m_gems * 2)
        self.observation_space = spaces.Box(low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32)

        self._aim_dirs = []
        for i in range(8):
            ang = (math.pi * 2) * (i / 8.0)
            self._aim_dirs.append((math.cos(ang), math.sin(ang)))

        self.session: GameSession = None  # type: ignore
        self._pending_choice: List = []
        self._step_count = 0
        self._last_level = 1
        self._window = None

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        session_seed = int(self.np_random.integers(0, 2**31 - 1))
        self.session = GameSession(self.config, Collaborators(level_up_ui=_RandomChooser(self)), seed=session_seed)
        self.session.start()
        self._pending_choice = []
        self._step_count = 0
        self._last_level = 1
        return self._get_obs(), self._get_info()

    def step(self, action):
        move, bomb, aim = int(action[0]), int(action[1]), int(action[2])

        self._answer_level_up()
        inp = self._to_input(move, bomb, aim)
        self.session.step(self.dt, inp)
        events = dict(self.session.events)

        # Anything offered during this step is answered straight away
        self._answer_level_up()

        reward = self._compute_reward(events)
        terminated = self.session.game_over
        self._step_count += 1
        truncated = self._step_count >= self.max_steps

        if self.render_mode == "human":
            self.render()

        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def _answer_level_up(self):
        while self._pending_choice and self.session.awaiting_choice:
            offered = self._pending_choice
            self._pending_choice = []
            pick = offered[int(self.np_random.integers(0, len(offered)))]
            self.session.choose_skill(pick.id)

    def _to_input(self, move: int, bomb: int, aim: int) -> InputState:
        p = self.session.player
        dx, dy = self._aim_dirs[aim % 8]
        target = (p.x + dx * 100.0, p.y + dy * 100.0) if p is not None else None
        return InputState(
            move_up=move == 1,
            move_down=move == 2,
            move_left=move == 3,
            move_right=move == 4,
            bomb=bomb == 1,
            aim=target,
        )

    # ----------------------------
    # Observation / reward / info
    # ----------------------------

    def _get_obs(self) -> np.ndarray:
        s = self.session
        p = s.player
        if p is None:
            return np.zeros(self.observation_space.shape, dtype=np.float32)

        level_frac = (s.progression.level - 1) / max(1, MAX_LEVEL - 1)
        xp_frac = s.progression.xp / max(1, s.progression.required)
        obs_parts = [
            (p.x / self.width) * 2 - 1, (p.y / self.height) * 2 - 1,
            (p.health / max(1, p.max_health)) * 2 - 1,
            (s.bombs / max(1, s.config.initial_bombs)) * 2 - 1,
            level_frac * 2 - 1,
            clamp(xp_frac, 0, 1) * 2 - 1,
            1.0 if s.powerups.is_active(FIRERATE) else -1.0,
            1.0 if s.powerups.is_active(MOVEMENT) else -1.0,
        ]

        def nearest(items, k):
            ranked = sorted(items, key=lambda it: (it.x - p.x) ** 2 + (it.y - p.y) ** 2)
            out = []
            for i in range(k):
                if i < len(ranked):
                    it = ranked[i]
                    out += [clamp((it.x - p.x) / self.width, -1, 1), clamp((it.y - p.y) / self.height, -1, 1)]
                else:
                    out += [0.0, 0.0]
            return out

        obs_parts += nearest(s.enemies, self.k_enemies)
        obs_parts += nearest(s.gems, self.m_gems)
        obs = np.array([clamp(v, -1.0, 1.0) for v in obs_parts], dtype=np.float32)
        return obs

    def _compute_reward(self, events: Dict[str, float]) -> float:
        R = self.rewards
        reward = 0.0
        reward += R["R_KILL"] * events.get("kills", 0.0)
        reward += R["R_XP"] * events.get("xp", 0.0)
        level = self.session.progression.level
        reward += R["R_LEVEL"] * (level - self._last_level)
        self._last_level = level
        reward -= R["R_DAMAGE"] * events.get("damage", 0.0)
        reward -= R["R_TIME"]
        if self.session.game_over:
            reward -= R["R_DEATH"]
        return float(reward)

    def _get_info(self) -> Dict[str, Any]:
        info = self.session.snapshot()
        info.pop("skills", None)
        info["step"] = self._step_count
        info["enemies_killed"] = self.session.stats["kills"]
        info["damage_taken"] = self.session.stats["damage_taken"]
        return info

    # ----------------------------
    # Rendering with Arcade
    # ----------------------------

    def render(self):
        if self.render_mode is None:
            return None
        if self._window is None:
            from .window import SurvivorWindow
            self._window = SurvivorWindow(self.session, interactive=False)
        self._window.session = self.session
        self._window.on_draw()
        return None

    def close(self):
        if self._window is not None:
            self._window.close()
            self._window = None


def run_random_episode(render: bool = True, seed: int = 42):
    """Run a random episode for testing"""
    env = SurvivorEnv(render_mode="human" if render else None)
    obs, info = env.reset(seed=seed)

    terminated = False
    truncated = False
    total = 0.0

    print("Running episode...")

    import time
    while not (terminated or truncated):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward
        if render and env._window:
            env._window.dispatch_events()
            env._window.flip()
            time.sleep(1 / 60)

    print(f"Random episode return: {total:.2f}  score={info['score']}  level={info['level']}")
    env.close()
    return total
