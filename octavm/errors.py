"""Fatal machine faults and loader errors."""

from typing import Optional


class MachineFault(Exception):
    """Unrecoverable interpreter trap.

    Attributes:
        instruction: 16-bit instruction being executed when the fault occurred
        pc: Program counter the instruction was fetched from
    """

    def __init__(self, message: str, instruction: Optional[int] = None, pc: Optional[int] = None):
        self.instruction = instruction
        self.pc = pc
        self.reason = message
        super().__init__(self._format(message))

    def _format(self, message: str) -> str:
        context = []
        if self.instruction is not None:
            context.append(f"instruction=0x{self.instruction:04X}")
        if self.pc is not None:
            context.append(f"pc=0x{self.pc:03X}")
        if not context:
            return message
        return f"{message} ({', '.join(context)})"

    def with_context(self, instruction: int, pc: int) -> "MachineFault":
        """Attach the faulting instruction and PC if they are not already set."""
        if self.instruction is None:
            self.instruction = instruction
        if self.pc is None:
            self.pc = pc
        self.args = (self._format(self.reason),)
        return self


class UnknownInstructionFault(MachineFault):
    """Instruction value with no defined effect."""


class MemoryFault(MachineFault):
    """Memory access outside the 4 KiB address space."""

    def __init__(self, address: int, instruction: Optional[int] = None, pc: Optional[int] = None):
        self.address = address
        super().__init__(f"Memory access out of bounds at 0x{address:X}", instruction, pc)


class StackOverflowFault(MachineFault):
    """Subroutine call with a full stack."""


class StackUnderflowFault(MachineFault):
    """Subroutine return with an empty stack."""


class RomError(ValueError):
    """ROM image rejected before it reaches the machine."""
