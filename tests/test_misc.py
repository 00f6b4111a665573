"""Tests for miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
import pytest
from octavm import execute, MemoryFault, UnknownInstructionFault, FONT_START
from octavm.instructions.misc import resume_with_key


class TestTimers:
    """Test timer-related instructions."""

    def test_misc_timer_instructions(self, fresh_state):
        """Test timer set and get operations."""
        state = execute(fresh_state, 0x6030)  # V0 = 48
        state = execute(state, 0xF015)  # Set delay timer to V0
        assert state.delay_timer == 48

        state = execute(state, 0x6120)  # V1 = 32
        state = execute(state, 0xF118)  # Set sound timer to V1
        assert state.sound_timer == 32

        state = execute(state, 0xF207)  # V2 = delay timer
        assert state.V[2] == 48
        assert state.pc == 0x20A


class TestIndexArithmetic:
    """Test FX1E and FX29."""

    def test_add_to_index(self, fresh_state):
        state = execute(fresh_state, 0xA100)
        state = execute(state, 0x6020)
        state = execute(state, 0xF01E)
        assert state.I == 0x120
        assert state.V[15] == 0

    def test_add_to_index_overflow(self, fresh_state):
        """FX1E - VF flags a result past 0xFFF and I keeps the full sum."""
        state = execute(fresh_state, 0xAFFF)
        state = execute(state, 0x6010)
        state = execute(state, 0xF01E)
        assert state.I == 0x100F
        assert state.V[15] == 1

    @pytest.mark.parametrize("instruction", [0xF033, 0xF155, 0xF165, 0xD001])
    def test_access_after_index_overflow_faults(self, fresh_state, instruction):
        """Memory access through an I past 0xFFF faults instead of hitting the font."""
        state = execute(fresh_state, 0xAFFF)
        state = execute(state, 0x6010)
        state = execute(state, 0xF01E)

        with pytest.raises(MemoryFault) as excinfo:
            execute(state, instruction)
        assert excinfo.value.instruction == instruction
        assert excinfo.value.pc == 0x206

    @pytest.mark.parametrize("digit", range(16))
    def test_font_character(self, fresh_state, digit):
        """FX29 - Glyph N starts at N * 5."""
        state = execute(fresh_state, 0x6000 | digit)
        state = execute(state, 0xF029)
        assert state.I == FONT_START + digit * 5

    def test_font_character_uses_low_nibble(self, fresh_state):
        state = execute(fresh_state, 0x601A)
        state = execute(state, 0xF029)
        assert state.I == 0xA * 5


class TestBCD:
    """Test BCD conversion."""

    def test_misc_bcd_conversion(self, fresh_state):
        """Test BCD conversion with 156."""
        state = execute(fresh_state, 0x609C)  # V0 = 156
        state = execute(state, 0xA300)  # I = 0x300
        state = execute(state, 0xF033)

        assert state.memory[0x300] == 1
        assert state.memory[0x301] == 5
        assert state.memory[0x302] == 6
        assert state.I == 0x300

    @pytest.mark.parametrize("value,digits", [(0, (0, 0, 0)), (9, (0, 0, 9)), (255, (2, 5, 5))])
    def test_bcd_edge_cases(self, fresh_state, value, digits):
        state = execute(fresh_state, 0x6000 | value)
        state = execute(state, 0xA400)
        state = execute(state, 0xF033)
        assert tuple(int(d) for d in state.memory[0x400:0x403]) == digits

    def test_bcd_past_end_of_memory(self, fresh_state):
        state = execute(fresh_state, 0xAFFE)
        with pytest.raises(MemoryFault):
            execute(state, 0xF033)


class TestRegisterTransfer:
    """Test FX55 and FX65."""

    def test_store_registers(self, fresh_state):
        """FX55 - Writes exactly V0..VX and leaves I alone."""
        state = fresh_state
        for register, value in enumerate([0x11, 0x22, 0x33, 0x44]):
            state = execute(state, 0x6000 | (register << 8) | value)
        state = execute(state, 0xA300)

        state = execute(state, 0xF255)

        assert [int(b) for b in state.memory[0x300:0x304]] == [0x11, 0x22, 0x33, 0x00]
        assert state.I == 0x300

    def test_load_registers(self, fresh_state):
        """FX65 - Reads V0..VX from I."""
        state = fresh_state.replace(memory=fresh_state.memory.at[0x300:0x304].set(
            jnp.array([1, 2, 3, 4], dtype=jnp.uint8)
        ))
        state = execute(state, 0x6399)  # V3 should survive
        state = execute(state, 0xA300)

        state = execute(state, 0xF265)

        assert [int(v) for v in state.V[:4]] == [1, 2, 3, 0x99]
        assert state.I == 0x300

    def test_store_all_registers(self, fresh_state):
        state = execute(fresh_state, 0x6F7E)
        state = execute(state, 0xA500)
        state = execute(state, 0xFF55)
        assert state.memory[0x50F] == 0x7E

    def test_load_past_end_of_memory(self, fresh_state):
        state = execute(fresh_state, 0xAFF8)
        with pytest.raises(MemoryFault) as excinfo:
            execute(state, 0xFF65)
        assert excinfo.value.pc == 0x202


class TestWaitForKey:
    """FX0A enters the awaiting-input sub-state."""

    def test_wait_for_key_holds_pc(self, fresh_state):
        state = execute(fresh_state, 0xF30A)
        assert state.awaiting_input
        assert state.waiting_register == 3
        assert state.pc == 0x200

    def test_resume_with_key(self, fresh_state):
        state = execute(fresh_state, 0xF30A)
        state = resume_with_key(state, 0xB)
        assert not state.awaiting_input
        assert state.V[3] == 0xB
        assert state.pc == 0x202


@pytest.mark.parametrize("instruction", [0xF000, 0xF008, 0xF019, 0xF030, 0xF075, 0xF0FF])
def test_unknown_misc_instruction(fresh_state, instruction):
    with pytest.raises(UnknownInstructionFault):
        execute(fresh_state, instruction)
