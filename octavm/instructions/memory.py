"""CHIP-8 memory and register operations."""

import jax
import jax.numpy as jnp
from octavm.state import EmulatorState, advance_pc
from octavm.decode import DecodedInstruction


def execute_set(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """6XNN - Set VX = NN."""
    return advance_pc(state.replace(V=state.V.at[instruction.x].set(instruction.nn)))


def execute_add(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """7XNN - Add NN to VX without touching the carry flag."""
    result = (int(state.V[instruction.x]) + instruction.nn) & 0xFF
    return advance_pc(state.replace(V=state.V.at[instruction.x].set(result)))


def execute_set_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """ANNN - Set I = NNN."""
    return advance_pc(state.replace(I=jnp.asarray(instruction.nnn, dtype=jnp.uint16)))


def execute_random(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """CXNN - Set VX = random & NN."""
    key, subkey = jax.random.split(state.rng)
    random_value = int(jax.random.randint(subkey, shape=(), minval=0, maxval=256, dtype=jnp.int32))
    state = state.replace(V=state.V.at[instruction.x].set(random_value & instruction.nn), rng=key)
    return advance_pc(state)
