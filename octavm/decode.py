"""CHIP-8 instruction decoding."""

from chex import dataclass

from octavm.errors import UnknownInstructionFault


@dataclass(frozen=True)
class DecodedInstruction:
    """Instruction word split into the operand fields executors read.

    ``opcode`` selects the instruction family. Which of the other fields
    an executor uses depends on the family.
    """
    raw: int
    opcode: int
    x: int
    y: int
    n: int
    nn: int
    nnn: int


def decode(instruction: int) -> DecodedInstruction:
    """Split a 16-bit instruction word into its nibble and byte fields.

    Raises:
        UnknownInstructionFault: The value does not fit in 16 bits.
    """
    instruction = int(instruction)
    if not 0 <= instruction <= 0xFFFF:
        raise UnknownInstructionFault("Instruction does not fit in 16 bits", instruction=instruction)
    return DecodedInstruction(
        raw=instruction,
        opcode=instruction >> 12,
        x=(instruction >> 8) & 0xF,
        y=(instruction >> 4) & 0xF,
        n=instruction & 0xF,
        nn=instruction & 0xFF,
        nnn=instruction & 0xFFF,
    )
