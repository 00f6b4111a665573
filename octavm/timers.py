"""Delay and sound timer driver."""

import time
from typing import Callable

import jax.numpy as jnp
from octavm.constants import TIMER_FREQUENCY
from octavm.state import EmulatorState


def update_timers(state: EmulatorState, ticks: int = 1) -> EmulatorState:
    """Decrement both timers by `ticks`, flooring at zero."""
    if ticks <= 0:
        return state
    delay = max(int(state.delay_timer) - ticks, 0)
    sound = max(int(state.sound_timer) - ticks, 0)
    return state.replace(
        delay_timer=jnp.asarray(delay, dtype=jnp.uint8),
        sound_timer=jnp.asarray(sound, dtype=jnp.uint8),
    )


class TimerClock:
    """Fixed-rate gate deciding how many timer ticks are due.

    Ticks are derived from elapsed wall-clock time, so the timer rate does
    not depend on how many instructions the host manages to run.
    """

    def __init__(self, frequency: float = TIMER_FREQUENCY, clock: Callable[[], float] = time.monotonic):
        if frequency <= 0:
            raise ValueError(f"Timer frequency must be positive, got {frequency}")
        self.period = 1.0 / frequency
        self.clock = clock
        self.reset()

    def reset(self):
        self._last = self.clock()

    def due(self) -> int:
        """Number of whole periods elapsed since the previous call."""
        elapsed = self.clock() - self._last
        ticks = int(elapsed // self.period)
        if ticks > 0:
            self._last += ticks * self.period
        return ticks
