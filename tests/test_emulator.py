"""Tests for fetch, decode and program loading."""

import jax.numpy as jnp
import pytest
from octavm import (
    create_state, decode, execute, fetch, step, load_program, load_rom, read_rom,
    MemoryFault, RomError, UnknownInstructionFault, PROGRAM_START,
)


def test_decode_fields():
    instruction = decode(0xD12F)
    assert instruction.opcode == 0xD
    assert instruction.x == 0x1
    assert instruction.y == 0x2
    assert instruction.n == 0xF
    assert instruction.nn == 0x2F
    assert instruction.nnn == 0x12F


@pytest.mark.parametrize("instruction", [-1, 0x10000, 0x1D12F])
def test_decode_rejects_values_outside_16_bits(instruction):
    with pytest.raises(UnknownInstructionFault) as excinfo:
        decode(instruction)
    assert excinfo.value.instruction == instruction


def test_execute_reports_oversized_instruction(fresh_state):
    with pytest.raises(UnknownInstructionFault) as excinfo:
        execute(fresh_state, 0x1D12F)
    assert excinfo.value.instruction == 0x1D12F
    assert excinfo.value.pc == PROGRAM_START


def test_initial_state(fresh_state):
    assert fresh_state.pc == PROGRAM_START
    assert fresh_state.I == 0
    assert fresh_state.stack.pointer == 0
    assert not fresh_state.display.any()
    assert fresh_state.memory[0x4F] == 0x80  # last row of glyph F
    assert fresh_state.memory[0x50] == 0


def test_fetch_is_big_endian(fresh_state):
    state = load_program(fresh_state, bytes([0xA2, 0xF0]))
    assert fetch(state) == 0xA2F0
    assert state.pc == PROGRAM_START


def test_fetch_out_of_bounds(fresh_state):
    state = fresh_state.replace(pc=jnp.asarray(0xFFF, dtype=jnp.uint16))
    with pytest.raises(MemoryFault) as excinfo:
        fetch(state)
    assert excinfo.value.pc == 0xFFF


def test_step_executes_fetched_instruction(fresh_state):
    state = load_program(fresh_state, bytes([0x6A, 0x42]))
    state = step(state)
    assert state.V[0xA] == 0x42
    assert state.pc == 0x202


def test_execute_leaves_input_state_untouched(fresh_state):
    state = load_program(fresh_state, bytes([0x6A, 0x42]))
    step(state)
    assert state.V[0xA] == 0
    assert state.pc == PROGRAM_START


class TestLoadProgram:

    def test_load_program_copies_verbatim(self, fresh_state):
        data = bytes(range(256)) * 2
        state = load_program(fresh_state, data)
        assert bytes(int(b) for b in state.memory[0x200:0x400]) == data
        assert state.memory[0x400] == 0

    def test_largest_program_fits(self, fresh_state):
        state = load_program(fresh_state, b"\x01" * 3584)
        assert state.memory[0xFFF] == 1

    def test_oversized_program_rejected(self, fresh_state):
        with pytest.raises(RomError):
            load_program(fresh_state, b"\x00" * 3585)


class TestRomFiles:

    def test_read_rom(self, tmp_path):
        rom = tmp_path / "test.ch8"
        rom.write_bytes(b"\x00\xE0\x12\x00")
        assert read_rom(str(rom)) == b"\x00\xE0\x12\x00"

    def test_load_rom(self, tmp_path):
        rom = tmp_path / "test.ch8"
        rom.write_bytes(b"\x00\xE0")
        state = load_rom(create_state(), str(rom))
        assert state.memory[0x200] == 0x00
        assert state.memory[0x201] == 0xE0

    def test_empty_rom_rejected(self, tmp_path):
        rom = tmp_path / "empty.ch8"
        rom.write_bytes(b"")
        with pytest.raises(RomError):
            read_rom(str(rom))

    def test_oversized_rom_rejected(self, tmp_path):
        rom = tmp_path / "big.ch8"
        rom.write_bytes(b"\x00" * 4000)
        with pytest.raises(RomError):
            read_rom(str(rom))

    def test_missing_rom(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_rom(str(tmp_path / "missing.ch8"))
