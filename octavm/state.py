"""CHIP-8 machine state structures."""

import jax
import jax.numpy as jnp
import numpy as np
from flax.struct import PyTreeNode, field

from octavm.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, MEMORY_SIZE, NUM_REGISTERS,
)
from octavm.errors import MemoryFault


class StackState(PyTreeNode):
    """Return address stack for subroutine calls."""
    data: jnp.ndarray
    pointer: int = 0


class EmulatorState(PyTreeNode):
    """Complete CHIP-8 machine state.

    The keypad is not part of the state: it is shared with the input thread
    and lives in :class:`octavm.keypad.Keypad`.
    """
    rng: jax.Array
    memory: jnp.ndarray
    V: jnp.ndarray
    I: jnp.ndarray
    pc: jnp.ndarray
    display: jnp.ndarray
    stack: StackState
    delay_timer: jnp.ndarray
    sound_timer: jnp.ndarray
    draw_flag: bool = False
    waiting_register: int = -1
    raw_shift_flag: bool = field(pytree_node=False, default=False)

    @property
    def awaiting_input(self) -> bool:
        return self.waiting_register >= 0


def create_state(seed: int = 0, raw_shift_flag: bool = False) -> EmulatorState:
    """Create a reset machine state with the font loaded into low memory."""
    memory = jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8)
    memory = memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA)
    return EmulatorState(
        rng=jax.random.PRNGKey(seed),
        memory=memory,
        V=jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8),
        I=jnp.zeros((), dtype=jnp.uint16),
        pc=jnp.asarray(PROGRAM_START, dtype=jnp.uint16),
        display=jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_),
        stack=StackState(data=jnp.zeros(STACK_SIZE, dtype=jnp.uint16)),
        delay_timer=jnp.zeros((), dtype=jnp.uint8),
        sound_timer=jnp.zeros((), dtype=jnp.uint8),
        raw_shift_flag=raw_shift_flag,
    )


def check_address(address: int, length: int = 1) -> None:
    """Raise MemoryFault unless [address, address + length) lies in memory."""
    if address < 0:
        raise MemoryFault(address)
    if address + length > MEMORY_SIZE:
        raise MemoryFault(max(address, MEMORY_SIZE))


def read_memory(state: EmulatorState, address: int, length: int = 1) -> jnp.ndarray:
    """Bounds-checked read of `length` bytes."""
    check_address(address, length)
    return state.memory[address:address + length]


def write_memory(state: EmulatorState, address: int, values) -> EmulatorState:
    """Bounds-checked write of a byte sequence starting at `address`."""
    values = jnp.asarray(values, dtype=jnp.uint8)
    check_address(address, values.shape[0])
    return state.replace(memory=state.memory.at[address:address + values.shape[0]].set(values))


def framebuffer(state: EmulatorState) -> np.ndarray:
    """Linear view of the display where cell ``x + y * 64`` is pixel (x, y)."""
    return np.asarray(state.display).T.reshape(-1)


def display_snapshot(state: EmulatorState) -> np.ndarray:
    """Read-only (64, 32) copy of the display for renderers."""
    snapshot = np.array(state.display, dtype=np.bool_)
    snapshot.setflags(write=False)
    return snapshot


def advance_pc(state: EmulatorState, amount: int = 2) -> EmulatorState:
    """Move PC forward by `amount` bytes (2 for next instruction, 4 to skip one)."""
    return state.replace(pc=jnp.asarray((int(state.pc) + amount) & 0xFFFF, dtype=jnp.uint16))
