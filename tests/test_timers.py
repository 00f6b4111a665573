"""Tests for the delay/sound timer driver."""

import jax.numpy as jnp
import pytest
from octavm import update_timers, TimerClock


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


def with_timers(state, delay, sound):
    return state.replace(
        delay_timer=jnp.asarray(delay, dtype=jnp.uint8),
        sound_timer=jnp.asarray(sound, dtype=jnp.uint8),
    )


class TestUpdateTimers:

    def test_decrements_both(self, fresh_state):
        state = update_timers(with_timers(fresh_state, 10, 3))
        assert state.delay_timer == 9
        assert state.sound_timer == 2

    def test_floors_at_zero(self, fresh_state):
        state = update_timers(with_timers(fresh_state, 0, 1))
        assert state.delay_timer == 0
        assert state.sound_timer == 0

        state = update_timers(state)
        assert state.delay_timer == 0
        assert state.sound_timer == 0

    def test_multiple_ticks(self, fresh_state):
        state = update_timers(with_timers(fresh_state, 10, 3), ticks=5)
        assert state.delay_timer == 5
        assert state.sound_timer == 0

    def test_zero_ticks_is_identity(self, fresh_state):
        state = with_timers(fresh_state, 7, 7)
        assert update_timers(state, ticks=0) is state

    def test_timers_do_not_touch_pc(self, fresh_state):
        state = update_timers(with_timers(fresh_state, 5, 5))
        assert state.pc == fresh_state.pc


class TestTimerClock:

    def test_no_ticks_before_a_period(self):
        clock = FakeClock()
        timer = TimerClock(60, clock)
        clock.now = 0.5 / 60
        assert timer.due() == 0

    def test_ticks_follow_wall_clock(self):
        clock = FakeClock()
        timer = TimerClock(60, clock)

        clock.now = 1.001
        assert timer.due() == 60
        assert timer.due() == 0

    def test_fractional_time_carries_over(self):
        clock = FakeClock()
        timer = TimerClock(10, clock)

        clock.now = 0.25
        assert timer.due() == 2
        clock.now = 0.35
        assert timer.due() == 1

    def test_reset(self):
        clock = FakeClock()
        timer = TimerClock(60, clock)
        clock.now = 10.0
        timer.reset()
        assert timer.due() == 0

    def test_invalid_frequency(self):
        with pytest.raises(ValueError):
            TimerClock(0)
