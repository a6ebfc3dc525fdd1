import pytest

from game.survivor.clock import Scheduler, SimClock
from game.survivor.entities import XPGem
from game.survivor.powerups import (
    FIRERATE,
    MAGNET,
    MOVEMENT,
    PowerupManager,
    magnet_duration,
    make_pickup,
    pickup_range,
    within_range,
)


@pytest.fixture
def clock():
    return SimClock()


@pytest.fixture
def manager(clock):
    return PowerupManager(clock, Scheduler(clock))


def test_firerate_window(clock, manager):
    manager.activate(FIRERATE, 10)
    assert manager.is_active(FIRERATE)
    assert manager.fire_rate_multiplier() == 2.0

    clock.advance(9.5)
    assert manager.remaining(FIRERATE) == pytest.approx(0.5)
    clock.advance(0.5)
    assert not manager.is_active(FIRERATE)
    assert manager.fire_rate_multiplier() == 1.0


def test_movement_buff_speeds_player_and_bullets(manager):
    assert manager.movement_multiplier() == 1.0
    manager.activate(MOVEMENT, 10)
    assert manager.movement_multiplier() == 1.75
    assert manager.projectile_speed_multiplier() == 1.5
    assert manager.fire_rate_multiplier() == 1.0


def test_reactivation_restarts_the_window(clock, manager):
    manager.activate(MOVEMENT, 10)
    clock.advance(8)
    manager.activate(MOVEMENT, 10)
    clock.advance(8)
    assert manager.is_active(MOVEMENT)
    assert manager.remaining(MOVEMENT) == pytest.approx(2)


def test_magnet_is_not_a_timed_buff(manager):
    with pytest.raises(ValueError):
        manager.activate(MAGNET, 5)


def test_reset_clears_buffs(manager):
    manager.activate(FIRERATE, 10)
    manager.reset()
    assert not manager.is_active(FIRERATE)


def test_magnet_pulls_gems_to_the_target(clock, manager):
    gems = [XPGem(x=100, y=100), XPGem(x=700, y=400)]
    arrived = []

    assert manager.pull_to_player(gems, (400, 300), arrived.append) == 2
    clock.advance(0.1)
    manager.scheduler.run_due()
    assert arrived == []

    clock.advance(0.25)
    manager.scheduler.run_due()
    assert arrived == gems
    for g in gems:
        assert g.x == pytest.approx(400)
        assert g.y == pytest.approx(300)


def test_magnet_skips_gems_collected_midway(clock, manager):
    gem = XPGem(x=0, y=0)
    arrived = []
    manager.pull_to_player([gem], (60, 0), arrived.append)
    clock.advance(0.1)
    manager.scheduler.run_due()
    gem.alive = False
    clock.advance(1)
    manager.scheduler.run_due()
    assert arrived == []


def test_magnet_stops_when_no_longer_valid(clock, manager):
    gem = XPGem(x=0, y=0)
    arrived = []
    valid = [True]
    manager.pull_to_player([gem], (60, 0), arrived.append, still_valid=lambda: valid[0])
    valid[0] = False
    clock.advance(1)
    manager.scheduler.run_due()
    assert arrived == []
    assert gem.x == 0


def test_slower_magnet_takes_longer():
    assert magnet_duration(1.0) == pytest.approx(0.3)
    assert magnet_duration(0.5) == pytest.approx(0.6)
    assert magnet_duration(2.0) < magnet_duration(1.0)


def test_pickup_range_and_filter():
    assert pickup_range(1.5) == 72
    near = XPGem(x=10, y=0)
    far = XPGem(x=100, y=0)
    dead = XPGem(x=0, y=0, alive=False)
    assert within_range((0, 0), [near, far, dead], 50) == [near]


def test_make_pickup_validates_kind():
    assert make_pickup(FIRERATE, (1, 2)).kind == FIRERATE
    with pytest.raises(ValueError):
        make_pickup("laser", (1, 2))
