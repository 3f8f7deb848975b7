"""Tests for momentum scrolling."""

import pytest

from infinite_note.core.momentum import MomentumScroller, ticks_to_settle


DECAY = 64 / 65


def test_trailing_half_adds_no_velocity():
    scroller = MomentumScroller(DECAY, 1 / 16)
    assert scroller.feed(0.25, 100) == 0
    assert scroller.velocity == 0


def test_feed_formula():
    scroller = MomentumScroller(DECAY, 1 / 16)
    assert scroller.feed(1.0, 32) == pytest.approx(1.0)
    # Zoomed in 4x halves the push
    assert scroller.feed(0.75, 64, scale=4) == pytest.approx(0.5)
    assert scroller.velocity == pytest.approx(1.5)


def test_tick_scrolls_whole_units_and_carries_rest():
    scroller = MomentumScroller(DECAY, 1 / 16)
    steps = []
    scroller.scroll_requested.connect(lambda dx, dy: steps.append((dx, dy)))
    scroller.add_velocity(1.5)

    assert scroller.tick() == 1
    assert scroller.remainder == pytest.approx(0.5)
    assert scroller.velocity == pytest.approx(1.5 * DECAY)
    assert steps == [(1, 0)]


def test_small_velocity_accumulates_before_scrolling():
    scroller = MomentumScroller(DECAY, 1 / 16)
    scroller.add_velocity(0.4)

    assert scroller.tick() == 0
    assert scroller.tick() == 0
    assert scroller.tick() == 1


def test_velocity_decays_below_one_unit_after_298_ticks():
    scroller = MomentumScroller(DECAY, 1 / 16)
    scroller.add_velocity(100)

    for _ in range(297):
        scroller.tick()
    assert scroller.velocity >= 1

    scroller.tick()
    assert scroller.velocity < 1
    assert ticks_to_settle(100, DECAY) == 298


def test_ticks_to_settle_slow_velocity():
    assert ticks_to_settle(0.5, DECAY) == 0


def test_invalid_decay():
    with pytest.raises(ValueError):
        MomentumScroller(decay=1.0)


def test_reset_and_timer_control():
    scroller = MomentumScroller(DECAY, 1 / 16, tick_ms=16)
    scroller.add_velocity(3)
    scroller.start()
    assert scroller.is_running

    scroller.stop()
    scroller.reset()
    assert not scroller.is_running
    assert scroller.velocity == 0
    assert scroller.remainder == 0


def test_decay_never_reverses_direction():
    scroller = MomentumScroller(DECAY, 1 / 16)
    steps = []
    scroller.scroll_requested.connect(lambda dx, dy: steps.append(dx))
    scroller.feed(1.0, 800)
    scroller.feed(0.9, 300)

    for _ in range(ticks_to_settle(scroller.velocity, DECAY) + 50):
        scroller.tick()
        assert scroller.velocity >= 0
        assert scroller.remainder >= 0

    assert steps
    assert all(step > 0 for step in steps)
    assert scroller.velocity < 1
