"""
Register and execution state.

Registers is the immutable value threaded through the step function.
ExecutionState is the engine's mutable view: current registers plus
statistics.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Registers:
    """
    Architectural registers.

    Attributes:
        accumulator: Signed working register
        program_counter: Zero-based index of the next instruction
        halted: Set by HALT
    """
    accumulator: int = 0
    program_counter: int = 0
    halted: bool = False


@dataclass
class ExecutionState:
    """
    Complete engine state for one simulation session.

    Attributes:
        registers: Current register values
        cycle_count: Instructions fetched since the last reset
        elapsed_time: Wall-clock seconds spent inside run loops since reset
    """
    registers: Registers = field(default_factory=Registers)
    cycle_count: int = 0
    elapsed_time: float = 0.0

    @property
    def accumulator(self) -> int:
        return self.registers.accumulator

    @property
    def program_counter(self) -> int:
        return self.registers.program_counter

    @property
    def halted(self) -> bool:
        return self.registers.halted

    def can_fetch(self, program_length: int) -> bool:
        """True while the loop may dereference the program counter."""
        return not self.halted and 0 <= self.program_counter < program_length
