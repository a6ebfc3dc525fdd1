import pytest

from game.survivor.clock import Scheduler, SimClock


def test_clock_advances_and_rejects_negative_dt():
    clock = SimClock()
    assert clock.advance(0.25) == 0.25
    with pytest.raises(ValueError):
        clock.advance(-0.1)
    clock.reset()
    assert clock.now == 0.0


def test_call_later_fires_in_due_order():
    clock = SimClock()
    sched = Scheduler(clock)
    fired = []
    sched.call_later(2.0, lambda: fired.append("b"))
    sched.call_later(1.0, lambda: fired.append("a"))
    sched.call_later(1.0, lambda: fired.append("a2"))

    clock.advance(0.5)
    assert sched.run_due() == 0

    clock.advance(1.5)
    assert sched.run_due() == 3
    assert fired == ["a", "a2", "b"]
    assert len(sched) == 0


def test_every_catches_up_after_a_long_step():
    clock = SimClock()
    sched = Scheduler(clock)
    ticks = []
    sched.every(1.0, lambda: ticks.append(clock.now))

    clock.advance(3.5)
    assert sched.run_due() == 3
    assert len(ticks) == 3
    assert len(sched) == 1


def test_cancelled_timers_do_not_fire():
    clock = SimClock()
    sched = Scheduler(clock)
    fired = []
    t = sched.call_later(1.0, lambda: fired.append(1))
    rep = sched.every(0.5, lambda: fired.append(2))
    t.cancel()

    clock.advance(0.6)
    sched.run_due()
    rep.cancel()
    clock.advance(5)
    sched.run_due()
    assert fired == [2]


def test_repeating_timer_can_cancel_itself():
    clock = SimClock()
    sched = Scheduler(clock)
    count = []

    def tick():
        count.append(1)
        if len(count) == 2:
            timer.cancel()

    timer = sched.every(1.0, tick)
    clock.advance(10)
    sched.run_due()
    assert len(count) == 2


def test_cancel_all_empties_the_queue():
    clock = SimClock()
    sched = Scheduler(clock)
    fired = []
    sched.call_later(1.0, lambda: fired.append(1))
    sched.every(1.0, lambda: fired.append(2))
    sched.cancel_all()
    clock.advance(5)
    assert sched.run_due() == 0
    assert fired == []
    assert len(sched) == 0


def test_every_rejects_non_positive_interval():
    sched = Scheduler(SimClock())
    with pytest.raises(ValueError):
        sched.every(0, lambda: None)
