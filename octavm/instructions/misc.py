"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from octavm.state import EmulatorState, advance_pc, read_memory, write_memory
from octavm.decode import DecodedInstruction
from octavm.constants import FONT_START, FONT_GLYPH_SIZE, FLAG_REGISTER, ADDRESS_MASK
from octavm.errors import UnknownInstructionFault


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return advance_pc(state.replace(V=state.V.at[instruction.x].set(state.delay_timer)))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return advance_pc(state.replace(delay_timer=state.V[instruction.x]))


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return advance_pc(state.replace(sound_timer=state.V[instruction.x]))


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register, VF flags a result past 0xFFF.

    I is not wrapped: a later memory access through it faults.
    """
    new_i = int(state.I) + int(state.V[instruction.x])
    state = state.replace(
        I=jnp.asarray(new_i & 0xFFFF, dtype=jnp.uint16),
        V=state.V.at[FLAG_REGISTER].set(int(new_i > ADDRESS_MASK)),
    )
    return advance_pc(state)


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press (blocking).

    Only marks the register to fill; PC stays on this instruction until
    :func:`resume_with_key` delivers a key.
    """
    return state.replace(waiting_register=instruction.x)


def resume_with_key(state: EmulatorState, key: int) -> EmulatorState:
    """Complete a pending FX0A by storing `key` and moving past it."""
    state = state.replace(
        V=state.V.at[state.waiting_register].set(key),
        waiting_register=-1,
    )
    return advance_pc(state)


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    digit = int(state.V[instruction.x]) & 0xF
    font_address = FONT_START + digit * FONT_GLYPH_SIZE
    return advance_pc(state.replace(I=jnp.asarray(font_address, dtype=jnp.uint16)))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = int(state.V[instruction.x])
    digits = [value // 100, (value // 10) % 10, value % 10]
    return advance_pc(write_memory(state, int(state.I), digits))


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    return advance_pc(write_memory(state, int(state.I), state.V[:instruction.x + 1]))


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    values = read_memory(state, int(state.I), instruction.x + 1)
    return advance_pc(state.replace(V=state.V.at[:instruction.x + 1].set(values)))


MISC_INSTRUCTIONS = {
    0x07: execute_get_delay_timer,
    0x0A: execute_wait_for_key,
    0x15: execute_set_delay_timer,
    0x18: execute_set_sound_timer,
    0x1E: execute_add_to_index,
    0x29: execute_font_character,
    0x33: execute_bcd_conversion,
    0x55: execute_store_registers,
    0x65: execute_load_registers,
}


def execute_misc_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch misc instructions on the low byte."""
    handler = MISC_INSTRUCTIONS.get(instruction.nn)
    if handler is None:
        raise UnknownInstructionFault("Unknown Fxxx instruction")
    return handler(state, instruction)
