"""CHIP-8 control flow instructions."""

import jax.numpy as jnp
from octavm.constants import ADDRESS_MASK
from octavm.state import EmulatorState, advance_pc
from octavm.decode import DecodedInstruction
from octavm.errors import UnknownInstructionFault
from octavm.keypad import Keypad
from octavm.stack import push


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.asarray(instruction.nnn, dtype=jnp.uint16))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    state = state.replace(stack=push(state.stack, state.pc))
    return execute_jump(state, instruction)


def skip_if(state: EmulatorState, condition: bool) -> EmulatorState:
    """Skip the next instruction when `condition` holds."""
    return advance_pc(state, 4 if condition else 2)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        return skip_if(state, bool(condition_fn(state, instruction)))
    return skip_instruction


def make_register_skip_instruction(condition_fn):
    """Factory for 5XY0/9XY0, which are only defined with a zero low nibble."""
    skip_instruction = make_skip_instruction(condition_fn)

    def register_skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        if instruction.n != 0:
            raise UnknownInstructionFault("Register comparison requires a zero low nibble")
        return skip_instruction(state, instruction)
    return register_skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != inst.nn
)

execute_skip_if_equal_register = make_register_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == int(state.V[inst.y])
)

execute_skip_if_not_equal_register = make_register_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != int(state.V[inst.y])
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0."""
    jump_address = (instruction.nnn + int(state.V[0])) & ADDRESS_MASK
    return state.replace(pc=jnp.asarray(jump_address, dtype=jnp.uint16))


def execute_skip_if_key(state: EmulatorState, instruction: DecodedInstruction, keypad: Keypad) -> EmulatorState:
    """EX9E/EXA1 - Skip if key pressed/not pressed.

    Reading a pressed key releases it, so one physical press satisfies a
    single check.
    """
    if instruction.nn not in (0x9E, 0xA1):
        raise UnknownInstructionFault("Unknown key instruction")

    key_pressed = keypad.consume(int(state.V[instruction.x]))
    if instruction.nn == 0xA1:
        return skip_if(state, not key_pressed)
    return skip_if(state, key_pressed)
