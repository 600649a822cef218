"""
Instruction Set
===============

The machine understands seven opcodes. Every instruction carries exactly one
integer operand whose meaning depends on the opcode:

    Opcode   Operand
    ------   -------------------------------------------------------
    LOAD     memory address      acc = mem[addr]
    STORE    memory address      mem[addr] = acc
    ADD      memory address      acc = acc + mem[addr]
    SUB      memory address      acc = acc - mem[addr]
    JUMP     jump target         if acc == 0: pc = target - 1
    NOP      unused
    HALT     unused              stop execution

A program is an ordered, immutable tuple of instructions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Tuple


class Opcode(Enum):
    """Instruction kinds recognized by the step function."""
    LOAD = "LOAD"
    STORE = "STORE"
    ADD = "ADD"
    SUB = "SUB"
    JUMP = "JUMP"
    NOP = "NOP"
    HALT = "HALT"

    @property
    def uses_memory(self) -> bool:
        """True if the operand is a memory address."""
        return self in MEMORY_OPCODES


MEMORY_OPCODES = frozenset({Opcode.LOAD, Opcode.STORE, Opcode.ADD, Opcode.SUB})


@dataclass(frozen=True)
class Instruction:
    """
    One operation and its operand.

    The kind is not validated here. A foreign kind is caught by the step
    function, which raises UnknownOpcodeError when it is executed.

    Attributes:
        kind: The opcode
        operand: Address, jump target, or unused (0)
    """
    kind: Opcode
    operand: int = 0

    @property
    def mnemonic(self) -> str:
        """Opcode name, or the repr of a foreign kind."""
        if isinstance(self.kind, Opcode):
            return self.kind.name
        return repr(self.kind)

    def __str__(self) -> str:
        return f"{self.mnemonic} {self.operand}"


Program = Tuple[Instruction, ...]


def make_program(instructions: Iterable[Instruction]) -> Program:
    """Freeze a sequence of instructions into a Program."""
    return tuple(instructions)
