"""
accsim - Single-Accumulator Processor Simulator
===============================================

This package simulates a minimal accumulator machine: a fixed program of
simple instructions runs against a small integer memory through a
fetch-decode-execute loop, and the simulator reports execution statistics.

Main Components
---------------
- **machine**: instruction set, memory, CPU engine, pipeline walk, tracing
- **session**: the interactive run / pipeline / reset loop
- **config**: SimulatorConfig (defaults, environment variables)
- **cli**: the ``accsim`` command-line tool

Quick Start
-----------
Run the sample program:
    >>> from accsim import CPU, RecordingTrace, SAMPLE_PROGRAM
    >>> trace = RecordingTrace()
    >>> cpu = CPU(SAMPLE_PROGRAM, trace=trace)
    >>> summary = cpu.run()
    >>> summary.cycles, summary.accumulator, summary.program_counter
    (7, 0, 7)

Walk it in pipeline mode:
    >>> from accsim import run_pipeline
    >>> run_pipeline(SAMPLE_PROGRAM).halted
    True

Or use the command-line tool:
    $ accsim --pipeline
    $ accsim --interactive
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from accsim.errors import (
    SimulatorError,
    ConfigurationError,
    ExecutionError,
    UnknownOpcodeError,
    AddressOutOfRangeError,
    CycleLimitExceeded,
)

from accsim.machine import (
    CPU,
    RunSummary,
    Instruction,
    Opcode,
    Program,
    Memory,
    Registers,
    ExecutionState,
    StepDetail,
    step,
    run_pipeline,
    PipelineResult,
    TraceEmitter,
    NullTrace,
    RecordingTrace,
    ConsoleTrace,
    LoggingTrace,
    CycleLimitTrace,
    format_event,
)

from accsim.config import SimulatorConfig
from accsim.programs import SAMPLE_PROGRAM
from accsim.session import Session

__all__ = [
    "__version__",
    # Errors
    "SimulatorError",
    "ConfigurationError",
    "ExecutionError",
    "UnknownOpcodeError",
    "AddressOutOfRangeError",
    "CycleLimitExceeded",
    # Machine
    "CPU",
    "RunSummary",
    "Instruction",
    "Opcode",
    "Program",
    "Memory",
    "Registers",
    "ExecutionState",
    "StepDetail",
    "step",
    "run_pipeline",
    "PipelineResult",
    # Tracing
    "TraceEmitter",
    "NullTrace",
    "RecordingTrace",
    "ConsoleTrace",
    "LoggingTrace",
    "CycleLimitTrace",
    "format_event",
    # Session
    "SimulatorConfig",
    "SAMPLE_PROGRAM",
    "Session",
]
