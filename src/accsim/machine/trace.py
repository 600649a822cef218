"""
Trace Events
============

The engine never prints. It reports what it does through a TraceEmitter
supplied by the caller, one event per executed cycle plus a terminal event:

    Event                  Emitted by        When
    ---------------------  ----------------  ------------------------------
    CycleEvent             CPU.run           after each executed instruction
    SummaryEvent           CPU.run           once, when the loop exits
    ResetEvent             CPU.reset         on every reset
    PipelineStartEvent     run_pipeline      before the first cycle
    PipelineCycleEvent     run_pipeline      before each executed instruction
    PipelineHaltEvent      run_pipeline      on HALT (no summary follows)
    PipelineSummaryEvent   run_pipeline      when the index leaves the program

Events define content only. ``format_event`` turns an event into console
lines; the emitters below decide where those lines go.

    >>> from accsim.machine import CPU, RecordingTrace
    >>> from accsim.machine import CPU
    >>> from accsim.programs import SAMPLE_PROGRAM
    >>> trace = RecordingTrace()
    >>> cpu = CPU(SAMPLE_PROGRAM, trace=trace)
    >>> summary = cpu.run()
    >>> [type(e).__name__ for e in trace.events][-1]
    'SummaryEvent'
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Tuple, Union

import click

from accsim.errors import CycleLimitExceeded

from .instruction import Instruction, Opcode
from .step import StepDetail


# =============================================================================
# Events
# =============================================================================

@dataclass(frozen=True)
class CycleEvent:
    """
    One executed engine cycle.

    Attributes:
        cycle: Cycle number (1-based, counted since reset)
        program_counter: Index the instruction was fetched from
        detail: Opcode-specific result
    """
    cycle: int
    program_counter: int
    detail: StepDetail


@dataclass(frozen=True)
class SummaryEvent:
    """
    Terminal statistics of a run.

    HALT and falling off the end of the program produce the same summary.

    Attributes:
        cycles: Total cycles since reset
        elapsed_time: Wall-clock seconds spent in run loops since reset
        accumulator: Final accumulator
        program_counter: Final program counter
        memory: Every memory cell in address order
    """
    cycles: int
    elapsed_time: float
    accumulator: int
    program_counter: int
    memory: Tuple[int, ...]


@dataclass(frozen=True)
class ResetEvent:
    """The engine was reset."""


@dataclass(frozen=True)
class PipelineStartEvent:
    """A pipeline walk is starting."""


@dataclass(frozen=True)
class PipelineCycleEvent:
    """One pipeline cycle, reported before the instruction executes."""
    cycle: int
    instruction: Instruction


@dataclass(frozen=True)
class PipelineHaltEvent:
    """The pipeline walk reached HALT and stopped."""
    cycle: int


@dataclass(frozen=True)
class PipelineSummaryEvent:
    """The pipeline walk ran past the end of the program."""
    cycles: int
    accumulator: int


TraceEvent = Union[
    CycleEvent,
    SummaryEvent,
    ResetEvent,
    PipelineStartEvent,
    PipelineCycleEvent,
    PipelineHaltEvent,
    PipelineSummaryEvent,
]


# =============================================================================
# Formatting
# =============================================================================

def describe_step(detail: StepDetail) -> str:
    """One-line description of what an instruction did."""
    addr = detail.operand
    match detail.opcode:
        case Opcode.LOAD:
            return f"Loaded {detail.value} from memory address {addr}"
        case Opcode.STORE:
            return f"Stored {detail.value} to memory address {addr}"
        case Opcode.ADD:
            return (
                f"Added {detail.value} to accumulator. "
                f"New AC = {detail.accumulator}"
            )
        case Opcode.SUB:
            return (
                f"Subtracted {detail.value} from accumulator. "
                f"New AC = {detail.accumulator}"
            )
        case Opcode.JUMP:
            if detail.jump_taken:
                return f"Jumping to instruction {addr}"
            return "Jump not taken, AC not zero."
        case Opcode.NOP:
            return "NOP: No operation."
        case Opcode.HALT:
            return "HALT: Stopping execution."
        case _:
            return f"Unknown instruction {detail.instruction.mnemonic}"


def format_event(event: TraceEvent) -> List[str]:
    """
    Render an event as console lines.

    Blank strings separate blocks of output.
    """
    match event:
        case CycleEvent(detail=detail):
            return [
                "",
                f"Executing instruction: {detail.instruction.mnemonic} "
                f"with operand {detail.operand}",
                describe_step(detail),
            ]
        case SummaryEvent():
            lines = [
                "",
                "Execution finished!",
                f"Total cycles: {event.cycles}",
                f"Execution time: {int(event.elapsed_time * 1000)} ms",
                f"Final accumulator (AC) value: {event.accumulator}",
                f"Final program counter (PC): {event.program_counter}",
                "Final memory state:",
            ]
            lines.extend(
                f"Memory[{addr}] = {value}"
                for addr, value in enumerate(event.memory)
            )
            return lines
        case ResetEvent():
            return ["", "--- Resetting CPU for new execution ---", ""]
        case PipelineStartEvent():
            return ["", "--- Starting Pipeline Simulation ---"]
        case PipelineCycleEvent(cycle=cycle, instruction=instruction):
            return [
                f"Cycle {cycle}: FDE - Instruction: {instruction.mnemonic} "
                f"Operand: {instruction.operand}"
            ]
        case PipelineHaltEvent():
            return ["Pipeline: HALT encountered. Stopping."]
        case PipelineSummaryEvent():
            return [
                f"Total pipeline cycles: {event.cycles}",
                f"Final accumulator value: {event.accumulator}",
            ]
        case _:
            raise TypeError(f"Unknown trace event: {event!r}")


# =============================================================================
# Emitters
# =============================================================================

class TraceEmitter(Protocol):
    """
    Protocol for trace consumers.

    The engine and the pipeline walk call ``before_cycle`` ahead of every
    fetch and ``emit`` for every event, synchronously and in order. An
    exception raised by either propagates out of the running loop; from
    ``before_cycle`` it stops the loop before that cycle has any effect.
    """

    def before_cycle(self, cycle: int) -> None:
        """Called with the number of the cycle about to be fetched."""
        ...

    def emit(self, event: TraceEvent) -> None:
        """Receive one event."""
        ...


class NullTrace:
    """Discards every event."""

    def before_cycle(self, cycle: int) -> None:
        pass

    def emit(self, event: TraceEvent) -> None:
        pass


class RecordingTrace(NullTrace):
    """
    Keeps every event in order.

    Attributes:
        events: Events received so far
    """

    def __init__(self) -> None:
        self.events: List[TraceEvent] = []

    def emit(self, event: TraceEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: type) -> List[TraceEvent]:
        """Events that are instances of ``event_type``."""
        return [e for e in self.events if isinstance(e, event_type)]

    def lines(self) -> List[str]:
        """All events rendered with ``format_event``."""
        result: List[str] = []
        for event in self.events:
            result.extend(format_event(event))
        return result

    def clear(self) -> None:
        self.events.clear()


class ConsoleTrace(NullTrace):
    """
    Renders events to the terminal with ``click.echo``.

    With ``show_cycles=False`` per-cycle narration is suppressed and only
    summaries, resets and pipeline banners are printed.
    """

    def __init__(self, show_cycles: bool = True, err: bool = False):
        self.show_cycles = show_cycles
        self.err = err

    def emit(self, event: TraceEvent) -> None:
        if not self.show_cycles and isinstance(
            event, (CycleEvent, PipelineCycleEvent)
        ):
            return
        for line in format_event(event):
            click.echo(line, err=self.err)


class LoggingTrace(NullTrace):
    """Renders events to a logger, one record per line."""

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        level: int = logging.INFO,
    ):
        self.logger = logger or logging.getLogger("accsim.trace")
        self.level = level

    def emit(self, event: TraceEvent) -> None:
        for line in format_event(event):
            if line:
                self.logger.log(self.level, line)


class CycleLimitTrace:
    """
    Forwards events to another emitter and enforces a cycle limit.

    The engine has no timeout of its own. Wrapping its emitter in a
    CycleLimitTrace stops a non-terminating program: fetching the cycle
    numbered above ``limit`` raises CycleLimitExceeded before that
    instruction executes, so exactly ``limit`` cycles take effect.
    """

    def __init__(self, inner: TraceEmitter, limit: int):
        if limit < 1:
            raise ValueError(f"Cycle limit must be >= 1, got {limit}")
        self.inner = inner
        self.limit = limit

    def before_cycle(self, cycle: int) -> None:
        if cycle > self.limit:
            raise CycleLimitExceeded(self.limit)
        self.inner.before_cycle(cycle)

    def emit(self, event: TraceEvent) -> None:
        self.inner.emit(event)
