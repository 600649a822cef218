"""
CPU Engine Unit Tests
=====================

Tests for the fetch-decode-execute loop, run statistics, the reset
lifecycle and the trace events produced along the way.
"""

import pytest

from accsim.errors import AddressOutOfRangeError, UnknownOpcodeError
from accsim.machine import (
    CPU,
    CycleEvent,
    Instruction,
    Opcode,
    RecordingTrace,
    ResetEvent,
    SummaryEvent,
)
from accsim.programs import SAMPLE_PROGRAM


LOAD, STORE, ADD, SUB = Opcode.LOAD, Opcode.STORE, Opcode.ADD, Opcode.SUB
JUMP, NOP, HALT = Opcode.JUMP, Opcode.NOP, Opcode.HALT


def program(*pairs):
    """Build a program from (opcode, operand) pairs."""
    return [Instruction(kind, operand) for kind, operand in pairs]


class FakeClock:
    """Clock that advances by a fixed step on every call."""

    def __init__(self, step: float = 0.0, start: float = 100.0):
        self.now = start
        self.step = step

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        return value


def fetched_indices(trace):
    """Program counters of every executed cycle, in order."""
    return [e.program_counter for e in trace.of_type(CycleEvent)]


@pytest.fixture
def trace():
    return RecordingTrace()


# =============================================================================
# Reference Scenario
# =============================================================================

SAMPLE_TRACE = [
    "",
    "Executing instruction: LOAD with operand 0",
    "Loaded 0 from memory address 0",
    "",
    "Executing instruction: ADD with operand 1",
    "Added 0 to accumulator. New AC = 0",
    "",
    "Executing instruction: STORE with operand 2",
    "Stored 0 to memory address 2",
    "",
    "Executing instruction: SUB with operand 3",
    "Subtracted 0 from accumulator. New AC = 0",
    "",
    "Executing instruction: JUMP with operand 5",
    "Jumping to instruction 5",
    "",
    "Executing instruction: NOP with operand 0",
    "NOP: No operation.",
    "",
    "Executing instruction: HALT with operand 0",
    "HALT: Stopping execution.",
    "",
    "Execution finished!",
    "Total cycles: 7",
    "Execution time: 0 ms",
    "Final accumulator (AC) value: 0",
    "Final program counter (PC): 7",
    "Final memory state:",
] + [f"Memory[{i}] = 0" for i in range(16)]


class TestSampleProgram:
    """The built-in demonstration program."""

    def test_final_state(self, trace):
        """7 cycles, acc 0, pc 7 after HALT's increment, memory zero."""
        cpu = CPU(SAMPLE_PROGRAM, trace=trace)
        summary = cpu.run()

        assert summary.cycles == 7
        assert summary.accumulator == 0
        assert summary.program_counter == 7
        assert summary.memory == (0,) * 16
        assert cpu.halted is True
        assert cpu.cycle_count == 7

    def test_control_flow(self, trace):
        """The taken JUMP at index 4 continues at index 5."""
        cpu = CPU(SAMPLE_PROGRAM, trace=trace)
        cpu.run()

        assert fetched_indices(trace) == [0, 1, 2, 3, 4, 5, 6]
        jump = trace.of_type(CycleEvent)[4]
        assert jump.detail.opcode is JUMP
        assert jump.detail.jump_taken is True

    def test_reference_trace(self, trace):
        """The rendered trace matches the reference fixture exactly."""
        cpu = CPU(SAMPLE_PROGRAM, trace=trace, clock=FakeClock())
        cpu.run()
        assert trace.lines() == SAMPLE_TRACE


# =============================================================================
# Opcode Properties
# =============================================================================

class TestRunProperties:
    """Properties of complete runs."""

    @pytest.mark.parametrize("nops", [0, 1, 3, 8])
    def test_nop_then_halt(self, nops):
        """NOP* HALT runs len(program) cycles and leaves memory alone."""
        prog = program(*([(NOP, 0)] * nops), (HALT, 0))
        cpu = CPU(prog)
        cpu.load_memory([5, -6, 7])
        before = cpu.memory.dump()

        cpu.run()

        assert cpu.cycle_count == len(prog)
        assert cpu.accumulator == 0
        assert cpu.memory.dump() == before

    @pytest.mark.parametrize("value", [0, 1, -17, 2**40])
    def test_load_store_round_trip(self, value):
        """[LOAD a, STORE b] copies memory[a] to memory[b]."""
        cpu = CPU(program((LOAD, 3), (STORE, 9)))
        cpu.memory.write(3, value)

        summary = cpu.run()

        assert cpu.memory.read(9) == value
        assert cpu.accumulator == value
        assert summary.cycles == 2

    @pytest.mark.parametrize("a,b", [(0, 0), (5, 3), (-8, 20), (7, -7)])
    def test_add_sub_inverse(self, a, b):
        """[LOAD a, ADD b, SUB b] leaves the accumulator at memory[a]."""
        cpu = CPU(program((LOAD, 0), (ADD, 1), (SUB, 1)))
        cpu.load_memory([a, b])
        cpu.run()
        assert cpu.accumulator == a

    def test_jump_taken_on_zero(self, trace):
        """With acc == 0, JUMP t at index i is followed by program[t]."""
        cpu = CPU(
            program((JUMP, 3), (NOP, 0), (NOP, 0), (HALT, 0)),
            trace=trace,
        )
        cpu.run()
        assert fetched_indices(trace) == [0, 3]
        assert cpu.cycle_count == 2

    def test_jump_not_taken_on_nonzero(self, trace):
        """With acc != 0, JUMP is followed by program[i + 1]."""
        cpu = CPU(
            program((LOAD, 0), (JUMP, 4), (NOP, 0), (HALT, 0), (NOP, 0)),
            trace=trace,
        )
        cpu.load_memory([1])
        cpu.run()
        assert fetched_indices(trace) == [0, 1, 2, 3]
        assert trace.of_type(CycleEvent)[1].detail.jump_taken is False

    def test_jump_depends_on_current_accumulator(self, trace):
        """The same program takes one JUMP and falls through another."""
        # acc 0 at index 1 skips the HALT; after ADD, acc 1 ignores JUMP 0
        cpu = CPU(
            program((NOP, 0), (JUMP, 3), (HALT, 0), (ADD, 0), (JUMP, 0), (HALT, 0)),
            trace=trace,
        )
        cpu.load_memory([1])
        cpu.run()
        assert fetched_indices(trace) == [0, 1, 3, 4, 5]
        assert cpu.accumulator == 1

    def test_jump_past_end_terminates(self, trace):
        """A jump target past the program ends the run normally."""
        cpu = CPU(program((JUMP, 10), (HALT, 0)), trace=trace)
        summary = cpu.run()
        assert summary.cycles == 1
        assert summary.program_counter == 10
        assert cpu.halted is False
        assert len(trace.of_type(SummaryEvent)) == 1

    def test_negative_jump_terminates(self):
        """A negative jump target ends the run normally."""
        cpu = CPU(program((JUMP, -3), (HALT, 0)))
        summary = cpu.run()
        assert summary.cycles == 1
        assert summary.program_counter == -3

    def test_fall_off_end(self):
        """A program without HALT stops at its end, not halted."""
        cpu = CPU(program((NOP, 0), (NOP, 0)))
        summary = cpu.run()
        assert summary.cycles == 2
        assert summary.program_counter == 2
        assert cpu.halted is False

    def test_empty_program(self, trace):
        """An empty program runs zero cycles and still reports."""
        cpu = CPU([], trace=trace)
        summary = cpu.run()
        assert summary.cycles == 0
        assert trace.of_type(CycleEvent) == []
        assert len(trace.of_type(SummaryEvent)) == 1

    def test_custom_memory_size(self):
        """memory_size controls the number of cells and the summary dump."""
        cpu = CPU(program((LOAD, 31), (HALT, 0)), memory_size=32)
        summary = cpu.run()
        assert len(summary.memory) == 32

    def test_zero_memory_without_memory_ops(self):
        """Zero cells are fine for programs that never touch memory."""
        cpu = CPU(program((NOP, 0), (HALT, 0)), memory_size=0)
        assert cpu.run().memory == ()

    def test_program_is_not_mutated(self):
        """The CPU keeps its own tuple of the program."""
        source = program((NOP, 0), (HALT, 0))
        cpu = CPU(source)
        source.clear()
        assert len(cpu.program) == 2
        assert isinstance(cpu.program, tuple)


# =============================================================================
# Statistics and Events
# =============================================================================

class TestStatistics:
    """Test cycle counting, elapsed time and emitted events."""

    def test_one_cycle_event_per_instruction(self, trace):
        """Cycle events are numbered from 1."""
        cpu = CPU(program((NOP, 0), (NOP, 0), (HALT, 0)), trace=trace)
        cpu.run()
        cycles = [e.cycle for e in trace.of_type(CycleEvent)]
        assert cycles == [1, 2, 3]
        assert isinstance(trace.events[-1], SummaryEvent)

    def test_elapsed_time_from_clock(self):
        """Elapsed time is the clock difference across the loop."""
        cpu = CPU(program((HALT, 0)), clock=FakeClock(step=0.25))
        summary = cpu.run()
        assert summary.elapsed_time == pytest.approx(0.25)

    def test_elapsed_time_accumulates_until_reset(self):
        """Repeated runs add to elapsed time; reset clears it."""
        cpu = CPU(program((HALT, 0)), clock=FakeClock(step=0.5))
        cpu.run()
        cpu.run()
        assert cpu.elapsed_time == pytest.approx(1.0)
        cpu.reset()
        assert cpu.elapsed_time == 0.0

    def test_run_after_halt_executes_nothing(self, trace):
        """Running a halted CPU again only re-emits the summary."""
        cpu = CPU(SAMPLE_PROGRAM, trace=trace)
        first = cpu.run()
        trace.clear()

        second = cpu.run()

        assert trace.of_type(CycleEvent) == []
        assert len(trace.of_type(SummaryEvent)) == 1
        assert second.cycles == first.cycles
        assert second.program_counter == first.program_counter

    def test_summary_event_matches_return_value(self, trace):
        """The emitted SummaryEvent carries the returned summary."""
        cpu = CPU(SAMPLE_PROGRAM, trace=trace)
        summary = cpu.run()
        assert trace.events[-1] == summary.to_event()

    def test_is_finished(self):
        """is_finished reflects the loop predicate."""
        cpu = CPU(program((HALT, 0)))
        assert cpu.is_finished is False
        cpu.run()
        assert cpu.is_finished is True


# =============================================================================
# Reset Tests
# =============================================================================

class TestReset:
    """Test the reset lifecycle."""

    def test_reset_restores_initial_state(self, trace):
        """reset() clears registers, statistics and memory."""
        cpu = CPU(program((LOAD, 0), (STORE, 5), (HALT, 0)), trace=trace)
        cpu.load_memory([9])
        cpu.run()
        assert cpu.memory.read(5) == 9

        cpu.reset()

        assert cpu.accumulator == 0
        assert cpu.program_counter == 0
        assert cpu.halted is False
        assert cpu.cycle_count == 0
        assert cpu.elapsed_time == 0.0
        assert cpu.memory.dump() == (0,) * 16
        assert isinstance(trace.events[-1], ResetEvent)

    def test_reset_keeps_program(self):
        """The program survives a reset."""
        cpu = CPU(SAMPLE_PROGRAM)
        cpu.run()
        cpu.reset()
        assert cpu.program == SAMPLE_PROGRAM

    def test_reset_right_after_construction(self, trace):
        """reset() is safe before any run."""
        cpu = CPU(SAMPLE_PROGRAM, trace=trace)
        cpu.reset()
        assert cpu.cycle_count == 0
        assert trace.events == [ResetEvent()]

    @pytest.mark.parametrize("prog", [
        SAMPLE_PROGRAM,
        tuple(program((NOP, 0), (LOAD, 2), (ADD, 3), (STORE, 4))),
    ])
    def test_reset_then_run_matches_fresh_run(self, prog):
        """reset + run reproduces a fresh run's state and trace."""
        fresh_trace = RecordingTrace()
        fresh = CPU(prog, trace=fresh_trace, clock=FakeClock())
        fresh.run()

        reused_trace = RecordingTrace()
        reused = CPU(prog, trace=reused_trace, clock=FakeClock())
        reused.run()
        reused.reset()
        reused_trace.clear()
        reused.run()

        assert reused.state == fresh.state
        assert reused.memory.dump() == fresh.memory.dump()
        assert reused_trace.events == fresh_trace.events


# =============================================================================
# Error Handling
# =============================================================================

class TestErrors:
    """Fatal errors propagate out of run()."""

    def test_unknown_opcode_stops_run(self, trace):
        """An unknown kind aborts the run without a summary."""
        cpu = CPU(
            [Instruction(NOP), Instruction("JMP", 0), Instruction(HALT)],
            trace=trace,
        )
        with pytest.raises(UnknownOpcodeError) as exc_info:
            cpu.run()

        assert exc_info.value.program_counter == 1
        assert trace.of_type(SummaryEvent) == []
        assert fetched_indices(trace) == [0]
        # The failing fetch is counted; registers stay before the failure
        assert cpu.cycle_count == 2
        assert cpu.program_counter == 1

    def test_out_of_range_address(self, trace):
        """An out-of-range operand raises AddressOutOfRangeError."""
        cpu = CPU(program((NOP, 0), (STORE, 16), (HALT, 0)), trace=trace)
        with pytest.raises(AddressOutOfRangeError) as exc_info:
            cpu.run()

        assert exc_info.value.address == 16
        assert exc_info.value.program_counter == 1
        assert cpu.memory.dump() == (0,) * 16
        assert trace.of_type(SummaryEvent) == []

    def test_elapsed_time_recorded_on_error(self):
        """The aborted loop's time is still accumulated."""
        cpu = CPU(program((LOAD, 99),), clock=FakeClock(step=0.5))
        with pytest.raises(AddressOutOfRangeError):
            cpu.run()
        assert cpu.elapsed_time == pytest.approx(0.5)

    def test_load_memory_out_of_range(self):
        """Preloading past the end of memory is rejected."""
        cpu = CPU(SAMPLE_PROGRAM, memory_size=2)
        with pytest.raises(AddressOutOfRangeError):
            cpu.load_memory([1, 2, 3])
        assert cpu.memory.dump() == (0, 0)
