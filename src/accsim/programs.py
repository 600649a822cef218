"""
Built-in programs.

SAMPLE_PROGRAM is the demonstration run by the ``accsim`` command. With all
memory zero the accumulator stays 0, so the JUMP at index 4 is taken: it sets
pc to 4 and the shared increment continues at index 5 (NOP), then HALT.
Seven cycles, final pc 7.
"""

from typing import Dict

from accsim.machine.instruction import Instruction, Opcode, Program


SAMPLE_PROGRAM: Program = (
    Instruction(Opcode.LOAD, 0),
    Instruction(Opcode.ADD, 1),
    Instruction(Opcode.STORE, 2),
    Instruction(Opcode.SUB, 3),
    Instruction(Opcode.JUMP, 5),
    Instruction(Opcode.NOP, 0),
    Instruction(Opcode.HALT, 0),
)

# Runs forever on zeroed memory; used to exercise the cycle guard.
SPIN_PROGRAM: Program = (
    Instruction(Opcode.NOP, 0),
    Instruction(Opcode.JUMP, 0),
)

PROGRAMS: Dict[str, Program] = {
    "sample": SAMPLE_PROGRAM,
    "spin": SPIN_PROGRAM,
}
