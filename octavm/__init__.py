"""CHIP-8 virtual machine package."""

from octavm.state import EmulatorState, StackState, create_state, framebuffer, display_snapshot
from octavm.emulator import execute, fetch, step, load_program, load_rom, read_rom
from octavm.decode import DecodedInstruction, decode
from octavm.constants import *
from octavm.errors import (
    MachineFault, UnknownInstructionFault, MemoryFault,
    StackOverflowFault, StackUnderflowFault, RomError,
)
from octavm.keypad import Keypad
from octavm.timers import update_timers, TimerClock
from octavm.config import MachineConfig
from octavm.machine import Machine, MachineStatus
from octavm.rendering import chip8_display_to_rgb, create_color_scheme, display_to_text, debug_string

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "framebuffer",
    "display_snapshot",
    "fetch",
    "step",
    "execute",
    "load_program",
    "load_rom",
    "read_rom",
    "DecodedInstruction",
    "decode",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "MachineFault",
    "UnknownInstructionFault",
    "MemoryFault",
    "StackOverflowFault",
    "StackUnderflowFault",
    "RomError",
    "Keypad",
    "update_timers",
    "TimerClock",
    "MachineConfig",
    "Machine",
    "MachineStatus",
    "chip8_display_to_rgb",
    "create_color_scheme",
    "display_to_text",
    "debug_string",
]
