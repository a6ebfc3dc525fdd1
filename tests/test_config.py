import pytest

from game.survivor.config import SessionConfig


def test_defaults():
    cfg = SessionConfig()
    assert cfg.initial_health == 5
    assert cfg.initial_bombs == 3
    assert cfg.initial_enemy_count == 5
    assert cfg.max_enemy_cap == 25


@pytest.mark.parametrize("overrides", [
    {"initial_health": 0},
    {"initial_bombs": -1},
    {"initial_enemy_count": 30},
    {"enemy_spawn_padding": 400},
    {"world_width": 0},
    {"attack_interval": 0},
    {"spawn_max_attempts": 0},
])
def test_invalid_values_are_rejected(overrides):
    with pytest.raises(ValueError):
        SessionConfig(**overrides)


def test_from_dict_ignores_unknown_keys():
    cfg = SessionConfig.from_dict({"initial_bombs": 7, "difficulty": "hard"})
    assert cfg.initial_bombs == 7
    assert SessionConfig.from_dict(None) == SessionConfig()


def test_round_trip_through_dict():
    cfg = SessionConfig(initial_health=9)
    assert SessionConfig.from_dict(cfg.to_dict()) == cfg
