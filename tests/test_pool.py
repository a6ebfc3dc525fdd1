from game.survivor.entities import HIDDEN_POS
from game.survivor.pool import ProjectilePool
from game.survivor.world import World


def test_spawning_past_capacity_grows_the_pool():
    pool = ProjectilePool(1000, 1000, size=2)
    shots = [pool.spawn((100, 100), (1, 0)) for _ in range(5)]

    assert len(pool.live()) == 5
    assert len({id(p) for p in shots}) == 5
    assert len(pool) == 5


def test_released_slot_is_reused():
    pool = ProjectilePool(1000, 1000, size=2)
    first = pool.spawn((100, 100), (1, 0))
    assert pool.release(first) is True
    assert pool.release(first) is False

    again = pool.spawn((200, 200), (0, 1), options={"speed": 50, "critical": True})
    assert again is first
    assert again.live and again.critical
    assert again.speed == 50
    assert again.origin == (200, 200)


def test_bullets_expire_after_their_lifetime():
    pool = ProjectilePool(1000, 1000, ttl=2.5)
    p = pool.spawn((500, 500), (1, 0), options={"speed": 0})

    assert pool.update(2.4) == 0
    assert p.live
    assert pool.update(0.2) == 1
    assert not p.live
    assert p.pos == HIDDEN_POS


def test_bullets_leaving_the_arena_are_culled():
    pool = ProjectilePool(1000, 1000)
    p = pool.spawn((5, 5), (-1, 0), options={"speed": 100})
    assert pool.update(0.1) == 1
    assert not p.live
    assert pool.live() == []


def test_bullets_move_along_their_direction():
    pool = ProjectilePool(1000, 1000)
    p = pool.spawn((100, 100), (0, 2), options={"speed": 400})
    pool.update(0.5)
    assert p.x == 100
    assert p.y == 300


def test_zero_direction_defaults_to_right():
    pool = ProjectilePool(1000, 1000)
    p = pool.spawn((100, 100), (0, 0))
    assert (p.dx, p.dy) == (1.0, 0.0)


def test_slots_keep_one_render_entity_each():
    world = World()
    pool = ProjectilePool(1000, 1000, size=3, host=world)
    p = pool.spawn((10, 20), (1, 0))

    assert world.created == 3
    assert world.get(p.handle).x == 10

    pool.release(p)
    assert (world.get(p.handle).x, world.get(p.handle).y) == HIDDEN_POS

    pool.spawn((30, 40), (1, 0))
    assert world.created == 3
    assert world.destroyed == 0


def test_clear_hides_everything():
    pool = ProjectilePool(1000, 1000, size=4)
    for _ in range(3):
        pool.spawn((100, 100), (1, 0))
    pool.clear()
    assert pool.live() == []
    assert all(p.pos == HIDDEN_POS for p in pool.slots)
