import numpy as np
import pytest
from gymnasium.utils.env_checker import check_env

from game.survivor import SurvivorEnv


@pytest.fixture
def env():
    e = SurvivorEnv(max_steps=200)
    yield e
    e.close()


def test_spaces(env):
    assert env.action_space.nvec.tolist() == [5, 2, 8]
    assert env.observation_space.shape == (8 + 5 * 2 + 3 * 2,)


def test_reset_and_step_shapes(env):
    obs, info = env.reset(seed=0)
    assert obs.shape == env.observation_space.shape
    assert obs.dtype == np.float32
    assert env.observation_space.contains(obs)
    assert info["health"] == 5
    assert info["step"] == 0

    obs, reward, terminated, truncated, info = env.step(np.array([0, 0, 0]))
    assert env.observation_space.contains(obs)
    assert isinstance(reward, float)
    assert not terminated
    assert "skills" not in info


def test_episode_truncates(env):
    env.reset(seed=1)
    truncated = terminated = False
    steps = 0
    while not (terminated or truncated):
        _, _, terminated, truncated, _ = env.step(env.action_space.sample())
        steps += 1
    assert steps <= 200


def test_bomb_action_is_rewarded_for_kills(env):
    env.reset(seed=2)
    _, reward, _, _, info = env.step(np.array([0, 1, 0]))
    assert info["bombs"] == 2
    assert info["enemies_killed"] == 5
    assert reward == pytest.approx(5 - env.rewards["R_TIME"])


def test_level_ups_never_block_the_env(env):
    env.reset(seed=3)
    env.session.progression.add_xp(45)
    env.step(np.array([0, 0, 0]))
    assert not env.session.awaiting_choice
    assert env.session.progression.level == 4


def test_same_seed_same_episode():
    a, b = SurvivorEnv(), SurvivorEnv()
    obs_a, _ = a.reset(seed=9)
    obs_b, _ = b.reset(seed=9)
    assert np.array_equal(obs_a, obs_b)
    for _ in range(30):
        action = np.array([4, 0, 2])
        obs_a, *_ = a.step(action)
        obs_b, *_ = b.step(action)
    assert np.array_equal(obs_a, obs_b)


def test_env_passes_gymnasium_checks():
    check_env(SurvivorEnv(), skip_render_check=True)
