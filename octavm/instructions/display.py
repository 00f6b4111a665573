"""CHIP-8 display operations."""

import jax.numpy as jnp
from octavm.state import EmulatorState, advance_pc, read_memory
from octavm.decode import DecodedInstruction
from octavm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH, FLAG_REGISTER

# Bit shift selecting each sprite column, most significant bit first
_column_shifts = 7 - jnp.arange(SPRITE_WIDTH)


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    Pixels are XORed onto the display and wrap around both edges. VF is set
    when any lit pixel is turned off.
    """
    sprite_x = int(state.V[instruction.x]) % SCREEN_WIDTH
    sprite_y = int(state.V[instruction.y]) % SCREEN_HEIGHT
    height = instruction.n

    sprite_bytes = read_memory(state, int(state.I), height)
    sprite = jnp.zeros_like(state.display)
    if height:
        columns = (sprite_x + jnp.arange(SPRITE_WIDTH)) % SCREEN_WIDTH
        rows = (sprite_y + jnp.arange(height)) % SCREEN_HEIGHT
        bits = ((sprite_bytes[:, None] >> _column_shifts[None, :]) & 1).astype(jnp.bool_)
        sprite = sprite.at[columns[None, :], rows[:, None]].set(bits)

    collision = bool(jnp.any(state.display & sprite))
    state = state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(int(collision)),
        draw_flag=True,
    )
    return advance_pc(state)
