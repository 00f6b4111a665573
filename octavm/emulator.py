"""Main CHIP-8 emulator execution engine."""

from typing import Optional

from octavm.state import EmulatorState, read_memory, write_memory
from octavm.decode import decode
from octavm.constants import PROGRAM_START, MAX_PROGRAM_SIZE
from octavm.errors import MachineFault, RomError
from octavm.keypad import Keypad
from octavm.instructions.system import execute_system_instruction
from octavm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from octavm.instructions.alu import execute_alu_operation
from octavm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from octavm.instructions.display import execute_display
from octavm.instructions.misc import execute_misc_instruction

# Indexed by the instruction's high nibble
INSTRUCTION_FAMILIES = [
    execute_system_instruction,
    execute_jump,
    execute_call,
    execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate,
    execute_skip_if_equal_register,
    execute_set,
    execute_add,
    execute_alu_operation,
    execute_skip_if_not_equal_register,
    execute_set_index,
    execute_jump_with_offset,
    execute_random,
    execute_display,
    None,  # key instructions need the keypad, see execute()
    execute_misc_instruction,
]


def execute(state: EmulatorState, instruction: int, keypad: Optional[Keypad] = None) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    Args:
        state: Current machine state, left unmodified
        instruction: 16-bit instruction value
        keypad: Key table consulted by EX9E/EXA1; an idle keypad if omitted

    Returns:
        The state after exactly one instruction

    Raises:
        MachineFault: The instruction is undefined or accesses memory or the
            stack out of range. The fault records the instruction and PC.
    """
    try:
        decoded_instruction = decode(instruction)
        if decoded_instruction.opcode == 0xE:
            return execute_skip_if_key(state, decoded_instruction, keypad if keypad is not None else Keypad())
        return INSTRUCTION_FAMILIES[decoded_instruction.opcode](state, decoded_instruction)
    except MachineFault as fault:
        raise fault.with_context(int(instruction), int(state.pc))


def _pack_u16(high: int, low: int) -> int:
    """Pack two bytes into uint16."""
    return (int(high) << 8) | int(low)


def fetch(state: EmulatorState) -> int:
    """Fetch the instruction at PC without advancing it."""
    pc = int(state.pc)
    try:
        high, low = read_memory(state, pc, 2)
    except MachineFault as fault:
        raise fault.with_context(None, pc)
    return _pack_u16(high, low)


def step(state: EmulatorState, keypad: Optional[Keypad] = None) -> EmulatorState:
    """Fetch and execute the instruction at PC."""
    return execute(state, fetch(state), keypad)


def load_program(state: EmulatorState, program: bytes) -> EmulatorState:
    """Copy program bytes into memory starting at 0x200."""
    if len(program) > MAX_PROGRAM_SIZE:
        raise RomError(f"Program is {len(program)} bytes, at most {MAX_PROGRAM_SIZE} fit in memory")
    if not program:
        return state
    return write_memory(state, PROGRAM_START, list(program))


def read_rom(filename: str) -> bytes:
    """Read and validate a ROM image from disk."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    if not rom_data:
        raise RomError(f"ROM '{filename}' is empty")
    if len(rom_data) > MAX_PROGRAM_SIZE:
        raise RomError(f"ROM '{filename}' is {len(rom_data)} bytes, at most {MAX_PROGRAM_SIZE} fit in memory")
    return rom_data


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    return load_program(state, read_rom(filename))
