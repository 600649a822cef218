"""
Accumulator Machine
===================

A minimal single-accumulator processor:

- **Instruction set**: LOAD, STORE, ADD, SUB, JUMP (branch if zero), NOP, HALT
- **Memory**: fixed array of integer cells (16 by default), bounds-checked
- **CPU**: fetch-decode-execute loop with reset and cycle/time statistics
- **Pipeline walk**: compact re-walk of a program on private state
- **Tracing**: events describing every cycle, delivered to a caller-supplied
  emitter

Quick Start
-----------

    >>> from accsim.machine import CPU, RecordingTrace
    >>> from accsim.programs import SAMPLE_PROGRAM
    >>> cpu = CPU(SAMPLE_PROGRAM, trace=RecordingTrace())
    >>> summary = cpu.run()
    >>> summary.cycles
    7

Module Structure
----------------

- `instruction.py`: Opcode, Instruction, Program
- `memory.py`: checked data memory
- `state.py`: Registers and ExecutionState
- `step.py`: the shared opcode table
- `trace.py`: trace events and emitters
- `cpu.py`: the CPU engine
- `pipeline.py`: the pipeline walk
"""

# Instruction set
from .instruction import Instruction, Opcode, Program, make_program

# Memory and state
from .memory import DEFAULT_MEMORY_SIZE, Memory
from .state import ExecutionState, Registers

# Execution
from .step import StepDetail, step

# Tracing
from .trace import (
    ConsoleTrace,
    CycleEvent,
    CycleLimitTrace,
    LoggingTrace,
    NullTrace,
    PipelineCycleEvent,
    PipelineHaltEvent,
    PipelineStartEvent,
    PipelineSummaryEvent,
    RecordingTrace,
    ResetEvent,
    SummaryEvent,
    TraceEmitter,
    TraceEvent,
    format_event,
)

from .cpu import CPU, RunSummary
from .pipeline import PipelineResult, run_pipeline

__all__ = [
    # Instruction set
    "Instruction",
    "Opcode",
    "Program",
    "make_program",

    # Memory and state
    "DEFAULT_MEMORY_SIZE",
    "Memory",
    "ExecutionState",
    "Registers",

    # Execution
    "StepDetail",
    "step",
    "CPU",
    "RunSummary",
    "PipelineResult",
    "run_pipeline",

    # Tracing
    "ConsoleTrace",
    "CycleEvent",
    "CycleLimitTrace",
    "LoggingTrace",
    "NullTrace",
    "PipelineCycleEvent",
    "PipelineHaltEvent",
    "PipelineStartEvent",
    "PipelineSummaryEvent",
    "RecordingTrace",
    "ResetEvent",
    "SummaryEvent",
    "TraceEmitter",
    "TraceEvent",
    "format_event",
]
