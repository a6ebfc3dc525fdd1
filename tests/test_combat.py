import random

import pytest

from game.survivor.combat import contact_damage, projectile_damage, roll_percent
from game.survivor.config import SessionConfig
from game.survivor.hosts import Collaborators, InputState
from game.survivor.powerups import FIRERATE, MAGNET
from game.survivor.session import GameSession
from game.survivor.world import World

from conftest import RecordingHud, make_session, place_enemy


@pytest.mark.parametrize("mult, crit, expected", [
    (1.0, False, 1),
    (1.0, True, 2),
    (1.4, False, 1),
    (1.5, True, 2),
    (0.1, False, 1),
    (2.5, False, 3),
    (1.7, True, 3),
])
def test_projectile_damage(mult, crit, expected):
    assert projectile_damage(mult, crit) == expected


def test_contact_damage_is_at_least_one():
    assert contact_damage(0) == 1
    assert contact_damage(50) == 1


def test_contact_damage_rounds_halves_up():
    assert contact_damage(0, base=2.5) == 3
    assert contact_damage(50, base=5) == 3


def test_roll_percent_edges():
    rng = random.Random(0)
    assert not roll_percent(rng, 0)
    assert all(roll_percent(rng, 100) for _ in range(20))


def test_contact_damage_grants_invincibility():
    hud = RecordingHud()
    s = make_session(hud=hud, initial_enemy_count=0, powerups_per_kind=0)
    s.waves.stop()
    p = s.player
    e = place_enemy(s, p.x, p.y)

    assert s.step(0.01)
    assert s.health == 4
    assert s.invincible
    assert hud.calls[-1] == ("health", 4, 5)

    s.step(0.01)
    assert s.health == 4

    # Window has elapsed
    s.clock.advance(0.5)
    assert not s.invincible
    assert s.combat.enemy_contact(e)
    assert s.health == 3


def test_contact_pushes_the_player_away():
    s = make_session(initial_enemy_count=0, powerups_per_kind=0)
    s.waves.stop()
    p = s.player
    e = place_enemy(s, p.x - 10, p.y)
    s.combat.enemy_contact(e)
    assert p.x == pytest.approx(640 + 50)
    assert p.y == pytest.approx(360)


def test_dodge_skips_damage_but_starts_the_window(quiet_session):
    s = quiet_session
    for _ in range(5):
        s.skills.bump("skill_escape")
    s.rng.random = lambda: 0.0
    e = place_enemy(s, s.player.x, s.player.y)

    assert not s.combat.enemy_contact(e)
    assert s.health == 5
    assert s.invincible


def test_last_heart_ends_the_round():
    s = make_session(initial_health=1, initial_enemy_count=3, powerups_per_kind=0)
    e = place_enemy(s, s.player.x, s.player.y)
    s.combat.enemy_contact(e)

    assert s.game_over
    assert s.enemies == []
    assert s.pool.live() == []
    assert s.step(0.1) is False


def test_bomb_kills_everything_and_schedules_respawns():
    s = make_session(initial_enemy_count=2, initial_bombs=1, powerups_per_kind=0)
    s.waves.stop()
    assert len(s.enemies) == 2

    assert s.step(0.01, InputState(bomb=True))
    assert s.bombs == 0
    assert s.score == 2
    assert len(s.gems) == 2
    assert s.enemies == []
    assert len(s.floaters) == 2

    assert not s.detonate_bomb()
    assert s.score == 2

    s.clock.advance(1.0)
    s.scheduler.run_due()
    assert s.floaters == []
    assert s.enemies == []

    s.clock.advance(0.6)
    s.scheduler.run_due()
    assert len(s.enemies) == 2


def test_no_respawn_after_game_over():
    s = make_session(initial_enemy_count=2, initial_bombs=1, powerups_per_kind=0)
    s.detonate_bomb()
    s.game_over_now()
    s.clock.advance(2.0)
    s.scheduler.run_due()
    assert s.enemies == []


def test_bullet_kill_drops_a_gem(quiet_session):
    s = quiet_session
    e = place_enemy(s, 900, 360)
    bullet = s.pool.spawn((900, 360), (1, 0))
    s.combat.resolve()

    assert not bullet.live
    assert not e.alive
    assert s.score == 1
    assert [(g.x, g.y) for g in s.gems] == [(900, 360)]
    assert s.stats["kills"] == 1


def test_knockback_pushes_away_from_the_shot_origin(quiet_session):
    s = quiet_session
    s.skills.bump("skill_knockback")
    e = place_enemy(s, 900, 360, hp=3)
    s.pool.spawn((880, 360), (1, 0))
    s.combat.resolve()

    assert e.alive
    assert e.hp == 2
    assert e.x == pytest.approx(940)


def test_crit_bullet_deals_extra_damage(quiet_session):
    s = quiet_session
    e = place_enemy(s, 900, 360, hp=3)
    s.pool.spawn((900, 360), (1, 0), options={"critical": True})
    s.combat.resolve()
    assert e.hp == 1


def test_gem_pickup_uses_focus_multiplier(quiet_session):
    s = quiet_session
    s.spawn_gem((650, 360))
    s.step(0.01)
    assert s.progression.xp == 1
    assert s.gems == []

    s.skills.bump("skill_focus")
    s.spawn_gem((650, 360))
    s.step(0.01)
    assert s.progression.xp == 3


@pytest.mark.parametrize("focus_level, expected", [
    (1, 2),  # 1.5
    (3, 3),  # 2.5
    (4, 3),  # 3.25
    (5, 4),
])
def test_gem_xp_rounds_halves_up(quiet_session, focus_level, expected):
    s = quiet_session
    for _ in range(focus_level):
        s.skills.bump("skill_focus")
    s.spawn_gem((650, 360))
    s.step(0.01)
    assert s.gems == []
    assert s.progression.xp == expected


def test_passive_pickup_radius_ignores_player_size(quiet_session):
    s = quiet_session
    outside = s.spawn_gem((640 + 55, 360))
    inside = s.spawn_gem((640 + 47, 360))
    s.step(0.001)
    assert s.gems == [outside]
    assert not inside.alive
    assert s.progression.xp == 1


def test_far_gems_stay_put(quiet_session):
    s = quiet_session
    s.spawn_gem((900, 360))
    s.step(0.01)
    assert len(s.gems) == 1


def test_magnetism_widens_pickup_radius(quiet_session):
    s = quiet_session
    s.spawn_gem((640 + 100, 360))
    s.step(0.01)
    assert len(s.gems) == 1
    for _ in range(5):
        s.skills.bump("skill_magnet")
    s.step(0.01)
    assert s.gems == []


def test_firerate_pickup_activates_buff(quiet_session):
    s = quiet_session
    s.spawn_powerup(FIRERATE, (650, 360))
    s.step(0.01)
    assert s.pickups == []
    assert s.powerups.is_active(FIRERATE)
    assert s.powerups.duration(FIRERATE) == 10


def test_magnet_pickup_pulls_every_gem(quiet_session):
    s = quiet_session
    s.spawn_gem((100, 100))
    s.spawn_gem((1200, 700))
    s.spawn_powerup(MAGNET, (650, 360))
    s.step(0.01)
    for _ in range(4):
        s.step(0.1)
    assert s.gems == []
    assert s.progression.xp == 2


def test_magnet_pull_is_dropped_on_restart(quiet_session):
    s = quiet_session
    gem = s.spawn_gem((100, 100))
    s.activate_magnet()
    s.restart()
    s.clock.advance(1)
    s.scheduler.run_due()
    assert gem.x == 100
    assert s.progression.xp == 0


class BlindWorld(World):
    """A host whose collision and tag queries never find anything"""

    def __init__(self):
        super().__init__()
        self.queries = []

    def is_colliding_with(self, a, b):
        self.queries.append(("collide", a, b))
        return False

    def query_by_tag(self, tag):
        self.queries.append(("tag", tag))
        return []


def test_collisions_are_resolved_without_the_host():
    world = BlindWorld()
    s = GameSession(SessionConfig(initial_enemy_count=0, powerups_per_kind=0),
                    Collaborators(entities=world), seed=7)
    s.start()
    s.waves.stop()

    target = place_enemy(s, 900, 360)
    s.pool.spawn((900, 360), (1, 0))
    toucher = place_enemy(s, 640, 360, hp=5)
    s.combat.resolve()

    assert not target.alive
    assert s.score == 1
    assert toucher.alive
    assert s.health == 4
    assert world.queries == []
