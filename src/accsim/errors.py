"""
accsim Error Hierarchy
======================

This module defines the exception hierarchy for the simulator.
All exceptions inherit from SimulatorError, allowing callers to catch all
simulator errors with a single except clause if desired.

Exception Hierarchy
-------------------
SimulatorError (base)
├── ConfigurationError - invalid configuration value
├── ExecutionError (fatal failure while executing a cycle)
│   ├── UnknownOpcodeError - instruction kind outside the opcode set
│   └── AddressOutOfRangeError - memory operand outside the memory array
└── CycleLimitExceeded - session cycle guard tripped

Execution errors are never recovered from inside the engine. They propagate
out of ``CPU.run()`` and terminate the run; no summary is produced.

Error messages follow this format:
    pc=4: error: description
    hint: suggestion for fixing (when available)
"""

from typing import Any, Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class SimulatorError(Exception):
    """
    Base exception for all simulator errors.

        try:
            cpu.run()
        except SimulatorError as e:
            print(f"Error: {e}")
    """
    pass


class ConfigurationError(SimulatorError):
    """
    Invalid configuration value.

    Raised by SimulatorConfig when a value cannot describe a usable
    machine, e.g. a negative memory size.
    """
    pass


# =============================================================================
# Execution Exceptions
# =============================================================================

class ExecutionError(SimulatorError):
    """
    Base exception for fatal errors raised while executing a cycle.

    Attributes:
        message: The error description
        program_counter: Index of the failing instruction (optional)
        hint: A suggestion for fixing the error (optional)
    """

    def __init__(
        self,
        message: str,
        program_counter: Optional[int] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.program_counter = program_counter
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with the program counter and hint.

        Example output:
            pc=3: error: address 16 out of range for memory of 16 cells
            hint: valid addresses are 0-15
        """
        if self.program_counter is not None:
            parts = [f"pc={self.program_counter}: error: {self.message}"]
        else:
            parts = [f"error: {self.message}"]

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)

    def at(self, program_counter: int) -> "ExecutionError":
        """Attach the program counter of the failing instruction."""
        self.program_counter = program_counter
        self.args = (self._format_message(),)
        return self


class UnknownOpcodeError(ExecutionError):
    """
    Instruction kind outside the recognized opcode set.

    This is a data error in the supplied program. The engine stops
    immediately instead of skipping the instruction.
    """

    def __init__(
        self,
        kind: Any,
        program_counter: Optional[int] = None,
    ):
        self.kind = kind
        super().__init__(
            f"unknown instruction {kind!r}",
            program_counter=program_counter,
            hint="valid opcodes are LOAD, STORE, ADD, SUB, JUMP, NOP, HALT",
        )


class AddressOutOfRangeError(ExecutionError):
    """
    Memory operand outside ``[0, memory_size)``.

    Raised by the checked Memory accessors at the point of access.
    Negative addresses are rejected too rather than wrapping around.
    """

    def __init__(
        self,
        address: int,
        size: int,
        program_counter: Optional[int] = None,
    ):
        self.address = address
        self.size = size

        if size > 0:
            hint = f"valid addresses are 0-{size - 1}"
        else:
            hint = "memory has no cells; configure a larger memory_size"

        super().__init__(
            f"address {address} out of range for memory of {size} cells",
            program_counter=program_counter,
            hint=hint,
        )


# =============================================================================
# Session Exceptions
# =============================================================================

class CycleLimitExceeded(SimulatorError):
    """
    Cycle guard tripped.

    The engine itself has no timeout: a JUMP loop on a zero accumulator
    runs forever. Session tooling can wrap the trace emitter in a
    CycleLimitTrace, which raises this error before fetching the first
    cycle past the limit.
    """

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"execution exceeded {limit} cycles")
