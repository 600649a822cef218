"""
Fetch-Decode-Execute Step
=========================

The single opcode table shared by the CPU engine and the pipeline walk.

``step(registers, memory, instruction)`` decodes one instruction, applies its
effect and returns the new registers together with a StepDetail describing
what happened. Memory is only touched through its checked accessors.

Program counter convention
--------------------------
Every opcode ends with an unconditional ``pc += 1``, JUMP and HALT included.
A taken ``JUMP t`` therefore sets ``pc = t - 1`` so that the shared increment
leaves ``pc == t``, and the next fetch is ``program[t]``.
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from accsim.errors import ExecutionError, UnknownOpcodeError

from .instruction import Instruction, Opcode
from .memory import Memory
from .state import Registers


@dataclass(frozen=True)
class StepDetail:
    """
    Opcode-specific result of one step.

    Attributes:
        instruction: The instruction that was executed
        accumulator: Accumulator after the step
        value: Memory value involved (LOAD/STORE/ADD/SUB), else None
        jump_taken: Whether a JUMP was taken, else None
    """
    instruction: Instruction
    accumulator: int
    value: Optional[int] = None
    jump_taken: Optional[bool] = None

    @property
    def opcode(self) -> Opcode:
        return self.instruction.kind

    @property
    def operand(self) -> int:
        return self.instruction.operand


def step(
    registers: Registers,
    memory: Memory,
    instruction: Instruction,
) -> Tuple[Registers, StepDetail]:
    """
    Execute one instruction.

    Args:
        registers: Registers before the step
        memory: Data memory (written by STORE)
        instruction: Instruction fetched at registers.program_counter

    Returns:
        (new registers, step detail)

    Raises:
        UnknownOpcodeError: If instruction.kind is not an Opcode
        AddressOutOfRangeError: If a memory operand is out of range
    """
    pc = registers.program_counter
    acc = registers.accumulator
    halted = registers.halted
    addr = instruction.operand
    value: Optional[int] = None
    jump_taken: Optional[bool] = None

    try:
        match instruction.kind:
            case Opcode.LOAD:
                value = memory.read(addr)
                acc = value
            case Opcode.STORE:
                value = acc
                memory.write(addr, acc)
            case Opcode.ADD:
                value = memory.read(addr)
                acc += value
            case Opcode.SUB:
                value = memory.read(addr)
                acc -= value
            case Opcode.JUMP:
                jump_taken = acc == 0
                if jump_taken:
                    pc = instruction.operand - 1
            case Opcode.NOP:
                pass
            case Opcode.HALT:
                halted = True
            case _:
                raise UnknownOpcodeError(instruction.kind)
    except ExecutionError as e:
        raise e.at(registers.program_counter)

    new_registers = replace(
        registers,
        accumulator=acc,
        program_counter=pc + 1,
        halted=halted,
    )
    detail = StepDetail(
        instruction=instruction,
        accumulator=acc,
        value=value,
        jump_taken=jump_taken,
    )
    return new_registers, detail
