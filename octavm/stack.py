"""CHIP-8 stack operations."""

import jax.numpy as jnp
from octavm.constants import ADDRESS_MASK, STACK_SIZE
from octavm.errors import StackOverflowFault, StackUnderflowFault
from octavm.state import StackState


def push(stack: StackState, address) -> StackState:
    """Push address onto stack."""
    if stack.pointer >= STACK_SIZE:
        raise StackOverflowFault(f"Stack overflow: more than {STACK_SIZE} nested calls")
    masked_address = int(address) & ADDRESS_MASK
    new_data = stack.data.at[stack.pointer].set(masked_address)
    return stack.replace(data=new_data, pointer=stack.pointer + 1)


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack."""
    if stack.pointer <= 0:
        raise StackUnderflowFault("Stack underflow: return without a matching call")
    new_pointer = stack.pointer - 1
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
