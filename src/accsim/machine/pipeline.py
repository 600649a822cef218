"""
Pipeline Walk
=============

Illustrative re-walk of a program with compact, cycle-by-cycle narration.

This is not a staged pipeline model: there are no hazards, stalls or
forwarding. It runs the same ``step`` function as the CPU engine on its own
zeroed memory and registers, so for a HALT-free program its cycle count and
final accumulator always match ``CPU.run()``.

Differences from the engine:
- a PipelineCycleEvent naming the instruction is emitted *before* each step,
  without per-opcode result detail;
- HALT stops the walk with a PipelineHaltEvent and no summary;
- running past the end emits a PipelineSummaryEvent.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from .instruction import Instruction, Opcode, make_program
from .memory import DEFAULT_MEMORY_SIZE, Memory
from .state import Registers
from .step import step
from .trace import (
    NullTrace,
    PipelineCycleEvent,
    PipelineHaltEvent,
    PipelineStartEvent,
    PipelineSummaryEvent,
    TraceEmitter,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """
    Outcome of a pipeline walk.

    Attributes:
        cycles: Instructions executed
        accumulator: Accumulator when the walk stopped
        halted: True if the walk stopped on HALT
    """
    cycles: int
    accumulator: int
    halted: bool


def run_pipeline(
    program: Iterable[Instruction],
    memory_size: int = DEFAULT_MEMORY_SIZE,
    trace: Optional[TraceEmitter] = None,
    initial_memory: Optional[Iterable[int]] = None,
) -> PipelineResult:
    """
    Walk a program from index 0 on fresh, private state.

    Args:
        program: Instructions to walk
        memory_size: Number of cells in the private memory
        trace: Event consumer (defaults to NullTrace)
        initial_memory: Optional values preloaded from address 0

    Returns:
        PipelineResult

    Raises:
        UnknownOpcodeError: If an instruction kind is not an Opcode
        AddressOutOfRangeError: If a memory operand is out of range
    """
    program = make_program(program)
    trace = trace if trace is not None else NullTrace()
    memory = Memory(memory_size)
    if initial_memory is not None:
        memory.load(initial_memory)
    registers = Registers()
    cycles = 0

    logger.debug(f"Pipeline walk starting ({len(program)} instructions)")
    trace.emit(PipelineStartEvent())

    while 0 <= registers.program_counter < len(program):
        trace.before_cycle(cycles + 1)
        cycles += 1
        instruction = program[registers.program_counter]
        trace.emit(PipelineCycleEvent(cycles, instruction))

        registers, _ = step(registers, memory, instruction)

        if instruction.kind is Opcode.HALT:
            logger.debug(f"Pipeline walk halted after {cycles} cycles")
            trace.emit(PipelineHaltEvent(cycles))
            return PipelineResult(cycles, registers.accumulator, halted=True)

    logger.debug(
        f"Pipeline walk finished: {cycles} cycles, "
        f"acc={registers.accumulator}"
    )
    trace.emit(PipelineSummaryEvent(cycles, registers.accumulator))
    return PipelineResult(cycles, registers.accumulator, halted=False)
