"""
Accumulator CPU Engine
======================

Runs a fixed program against data memory with a fetch-decode-execute loop.

The loop condition is ``not halted and 0 <= pc < len(program)``. Each pass:

1. calls ``trace.before_cycle`` with the number of the coming cycle,
2. increments the cycle counter,
3. fetches ``program[pc]``,
4. executes it through the shared ``step`` function (which also advances pc),
5. emits a CycleEvent.

Executing HALT and running off the end of the program are both normal
termination and produce the same SummaryEvent.

Example:
    >>> from accsim.machine import CPU, Instruction, Opcode, RecordingTrace
    >>> trace = RecordingTrace()
    >>> cpu = CPU([Instruction(Opcode.LOAD, 0), Instruction(Opcode.HALT)],
    ...           trace=trace)
    >>> cpu.load_memory([42])
    >>> summary = cpu.run()
    >>> summary.accumulator, summary.cycles
    (42, 2)
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple

from .instruction import Instruction, Program, make_program
from .memory import DEFAULT_MEMORY_SIZE, Memory
from .state import ExecutionState, Registers
from .step import step
from .trace import CycleEvent, NullTrace, ResetEvent, SummaryEvent, TraceEmitter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunSummary:
    """
    Statistics returned by ``CPU.run()``.

    Carries the same content as the SummaryEvent emitted at the end of
    the run.
    """
    cycles: int
    elapsed_time: float
    accumulator: int
    program_counter: int
    memory: Tuple[int, ...]

    def to_event(self) -> SummaryEvent:
        return SummaryEvent(
            cycles=self.cycles,
            elapsed_time=self.elapsed_time,
            accumulator=self.accumulator,
            program_counter=self.program_counter,
            memory=self.memory,
        )


class CPU:
    """
    Single-accumulator CPU.

    Owns the data memory and the execution state exclusively. The program
    is stored as a tuple and never modified.

    Attributes:
        program: The loaded program
        memory: Data memory
        state: Registers and statistics
        trace: Event consumer
    """

    def __init__(
        self,
        program: Iterable[Instruction],
        memory_size: int = DEFAULT_MEMORY_SIZE,
        trace: Optional[TraceEmitter] = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        """
        Initialize the CPU.

        Args:
            program: Instructions to execute
            memory_size: Number of data memory cells
            trace: Event consumer (defaults to NullTrace)
            clock: Monotonic seconds source used for elapsed time
        """
        self._program: Program = make_program(program)
        self.memory = Memory(memory_size)
        self.state = ExecutionState()
        self.trace: TraceEmitter = trace if trace is not None else NullTrace()
        self._clock = clock

    # ========================================
    # Register Properties
    # ========================================

    @property
    def program(self) -> Program:
        return self._program

    @property
    def accumulator(self) -> int:
        return self.state.accumulator

    @property
    def program_counter(self) -> int:
        return self.state.program_counter

    @property
    def halted(self) -> bool:
        return self.state.halted

    @property
    def cycle_count(self) -> int:
        return self.state.cycle_count

    @property
    def elapsed_time(self) -> float:
        return self.state.elapsed_time

    @property
    def is_finished(self) -> bool:
        """True if the next ``run()`` would execute no cycles."""
        return not self.state.can_fetch(len(self._program))

    # ========================================
    # Memory Access
    # ========================================

    def load_memory(self, values: Iterable[int], start: int = 0) -> None:
        """
        Preload data memory cells.

        ``reset()`` clears them again.

        Raises:
            AddressOutOfRangeError: If a cell is outside memory
        """
        self.memory.load(values, start)

    # ========================================
    # Main Execution Loop
    # ========================================

    def run(self) -> RunSummary:
        """
        Execute from the current program counter until termination.

        Returns:
            RunSummary with cycle count, elapsed time, final registers and
            a full memory dump

        Raises:
            UnknownOpcodeError: If an instruction kind is not an Opcode
            AddressOutOfRangeError: If a memory operand is out of range

        Note:
            On error no SummaryEvent is emitted. The elapsed time of the
            aborted loop is still accumulated.
        """
        state = self.state
        program = self._program
        length = len(program)

        logger.debug(
            f"Run starting at pc={state.program_counter} "
            f"({length} instructions)"
        )

        start = self._clock()
        try:
            while state.can_fetch(length):
                self.trace.before_cycle(state.cycle_count + 1)
                state.cycle_count += 1
                pc = state.program_counter
                instruction = program[pc]
                state.registers, detail = step(
                    state.registers, self.memory, instruction
                )
                logger.debug(
                    f"Cycle {state.cycle_count}: pc={pc} {instruction} "
                    f"-> acc={state.accumulator}"
                )
                self.trace.emit(CycleEvent(state.cycle_count, pc, detail))
        finally:
            state.elapsed_time += self._clock() - start

        summary = RunSummary(
            cycles=state.cycle_count,
            elapsed_time=state.elapsed_time,
            accumulator=state.accumulator,
            program_counter=state.program_counter,
            memory=self.memory.dump(),
        )
        logger.debug(
            f"Run finished: {summary.cycles} cycles, "
            f"acc={summary.accumulator}, pc={summary.program_counter}"
        )
        self.trace.emit(summary.to_event())
        return summary

    # ========================================
    # Reset
    # ========================================

    def reset(self) -> None:
        """
        Restore power-on state.

        Clears registers, statistics and every memory cell. The program is
        kept.
        """
        logger.debug("Resetting CPU")
        self.trace.emit(ResetEvent())
        self.state.registers = Registers()
        self.state.cycle_count = 0
        self.state.elapsed_time = 0.0
        self.memory.clear()

    def __repr__(self) -> str:
        return (
            f"CPU(acc={self.accumulator}, pc={self.program_counter}, "
            f"halted={self.halted}, cycles={self.cycle_count})"
        )
