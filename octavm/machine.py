"""CHIP-8 execution loop.

The :class:`Machine` owns the emulator state and advances it one tick at a
time: one instruction, then the timers, then an optional render. The keypad
is the only object shared with the input thread.
"""

import enum
import threading
import time
from typing import Callable, Optional

import numpy as np

from octavm.config import MachineConfig
from octavm.emulator import step, load_program
from octavm.errors import MachineFault
from octavm.instructions.misc import resume_with_key
from octavm.keypad import Keypad
from octavm.logging import ConsoleLogger
from octavm.rendering import debug_string
from octavm.state import EmulatorState, create_state, display_snapshot
from octavm.timers import TimerClock, update_timers

Renderer = Callable[[np.ndarray, str], None]


class MachineStatus(enum.Enum):
    RUNNING = "running"
    HALTED = "halted"


class Machine:
    """Single CHIP-8 machine running one program.

    Args:
        program: Validated program bytes, copied to 0x200
        config: Interpreter settings
        keypad: Key table written by the input producer
        renderer: Called with a read-only (64, 32) display snapshot and a
            debug string whenever the display changed
        logger: Console logger
        clock: Monotonic time source driving the timers
    """

    def __init__(
        self,
        program: bytes = b"",
        config: Optional[MachineConfig] = None,
        keypad: Optional[Keypad] = None,
        renderer: Optional[Renderer] = None,
        logger: Optional[ConsoleLogger] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or MachineConfig()
        self.keypad = keypad if keypad is not None else Keypad()
        self.renderer = renderer
        self.logger = logger or ConsoleLogger("Machine", log_level="WARNING")
        self.program = bytes(program)
        self.timer_clock = TimerClock(self.config.timer_frequency, clock)
        self._stop_requested = threading.Event()
        self.reset()

    def reset(self):
        """Full reset: fresh state, program reloaded, keys released."""
        state = create_state(self.config.seed, raw_shift_flag=self.config.raw_shift_flag)
        self.state: EmulatorState = load_program(state, self.program)
        self.keypad.clear()
        self.status = MachineStatus.RUNNING
        self.fault: Optional[MachineFault] = None
        self.instruction_count = 0
        self._wait_mark = 0
        self._stop_requested.clear()
        self.timer_clock.reset()

    @property
    def halted(self) -> bool:
        return self.status is MachineStatus.HALTED

    def stop(self):
        """Request termination; honoured at the next tick boundary."""
        self._stop_requested.set()

    def _halt(self, reason: str):
        self.status = MachineStatus.HALTED
        self.logger.info(f"Halted: {reason} after {self.instruction_count} instructions")

    def tick(self):
        """Advance the machine by one tick.

        Raises:
            MachineFault: The instruction faulted. The machine is halted first.
        """
        if self.halted:
            return
        if self._stop_requested.is_set():
            self._halt("stop requested")
            return

        try:
            if self.state.awaiting_input:
                self._poll_key(timeout=0)
            else:
                self._execute_next()
        except MachineFault as fault:
            self.fault = fault
            self.logger.error(f"Fault: {fault}")
            self._halt("fault")
            raise

        self.state = update_timers(self.state, self.timer_clock.due())
        self._render()

    def _execute_next(self):
        # Taken before executing so a press racing FX0A is not missed
        mark = self.keypad.press_count()
        self.state = step(self.state, self.keypad)
        self.instruction_count += 1
        if self.state.awaiting_input:
            self._wait_mark = mark
            self.logger.debug(f"Waiting for key into V{self.state.waiting_register:X}")

    def _poll_key(self, timeout: float):
        key = self.keypad.wait_for_press(self._wait_mark, timeout)
        if key is None:
            return
        self.keypad.consume(key)
        self.state = resume_with_key(self.state, key)

    def _render(self):
        if not self.state.draw_flag:
            return
        if self.renderer is not None:
            self.renderer(display_snapshot(self.state), debug_string(self.state, self.keypad.last_key))
        self.state = self.state.replace(draw_flag=False)

    def _pace(self):
        interval = self.config.pacing_interval
        if self.state.awaiting_input:
            # Wakes early when the awaited key arrives
            self.keypad.wait_for_press(self._wait_mark, interval)
        else:
            self._stop_requested.wait(interval)

    def run(self):
        """Tick until halted by a stop request or a fault.

        Raises:
            MachineFault: The fault that halted the machine.
        """
        self.logger.info(f"Running {len(self.program)} byte program")
        while not self.halted:
            self.tick()
            if not self.halted:
                self._pace()

    def _run_in_background(self):
        try:
            self.run()
        except MachineFault:
            # Already logged and kept in self.fault by tick()
            pass

    def start(self) -> threading.Thread:
        """Run the loop on a background thread.

        A fault ends the thread quietly; check :attr:`fault` after joining.
        """
        thread = threading.Thread(target=self._run_in_background, name="octavm-machine", daemon=True)
        thread.start()
        return thread
