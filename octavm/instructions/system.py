"""CHIP-8 system instructions (0x0xxx)."""

import jax.numpy as jnp
from octavm.state import EmulatorState, advance_pc
from octavm.decode import DecodedInstruction
from octavm.errors import UnknownInstructionFault
from octavm.stack import pop


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    state = state.replace(display=jnp.zeros_like(state.display), draw_flag=True)
    return advance_pc(state)


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine to the instruction after the call."""
    stack, address = pop(state.stack)
    state = state.replace(stack=stack, pc=jnp.asarray(address, dtype=jnp.uint16))
    return advance_pc(state)


def execute_system_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch system instructions."""
    if instruction.raw == 0x00E0:
        return execute_clear_screen(state, instruction)
    if instruction.raw == 0x00EE:
        return execute_return(state, instruction)
    # 0NNN calls native RCA 1802 code, which cannot be emulated
    raise UnknownInstructionFault("Unsupported machine code routine call")
