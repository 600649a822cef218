"""
Simulation Session
==================

Drives the CPU through the interactive demonstration loop:

    run -> "see the pipeline?" -> "reset and run again?" -> reset -> run ...

The session owns no machine state of its own. It calls ``CPU.run``,
``run_pipeline`` and ``CPU.reset`` based on answers from an ``ask``
callable, so it can be driven by ``click.confirm`` on a terminal or by a
scripted list of answers in tests.
"""

import logging
from typing import Callable, Iterable, Iterator, List, Optional

from accsim.config import SimulatorConfig
from accsim.machine import (
    CPU,
    CycleLimitTrace,
    Instruction,
    NullTrace,
    PipelineResult,
    RunSummary,
    TraceEmitter,
    run_pipeline,
)

logger = logging.getLogger(__name__)


PIPELINE_PROMPT = "Would you like to see the implemented pipeline?"
RERUN_PROMPT = "Would you like to reset the CPU and run the simulation again?"

AskFunction = Callable[[str], bool]


def scripted_answers(answers: Iterable[bool]) -> AskFunction:
    """
    Build an ``ask`` callable that replays fixed answers.

    Once the answers run out every further question is answered False,
    which ends the session.
    """
    iterator: Iterator[bool] = iter(answers)

    def ask(prompt: str) -> bool:
        return next(iterator, False)

    return ask


class Session:
    """
    Interactive run/pipeline/reset loop around one CPU.

    Attributes:
        cpu: The engine being driven
        program: Program shared with the pipeline walk
        config: Session configuration
        trace: Emitter used by both the CPU and the pipeline walk
        summaries: RunSummary of every completed run
        pipeline_results: PipelineResult of every pipeline walk
    """

    def __init__(
        self,
        program: Iterable[Instruction],
        config: Optional[SimulatorConfig] = None,
        trace: Optional[TraceEmitter] = None,
    ):
        self.config = config or SimulatorConfig()
        trace = trace if trace is not None else NullTrace()
        if self.config.max_cycles is not None:
            trace = CycleLimitTrace(trace, self.config.max_cycles)
        self.trace: TraceEmitter = trace
        self.cpu = CPU(
            program,
            memory_size=self.config.memory_size,
            trace=self.trace,
        )
        self.program = self.cpu.program
        self.summaries: List[RunSummary] = []
        self.pipeline_results: List[PipelineResult] = []

    def run_once(self) -> RunSummary:
        """Run the CPU and record the summary."""
        summary = self.cpu.run()
        self.summaries.append(summary)
        return summary

    def run_pipeline(self) -> PipelineResult:
        """Walk the program in pipeline mode on private state."""
        result = run_pipeline(
            self.program,
            memory_size=self.config.memory_size,
            trace=self.trace,
        )
        self.pipeline_results.append(result)
        return result

    def loop(self, ask: AskFunction) -> int:
        """
        Run the interactive loop until ``ask`` declines a rerun.

        Args:
            ask: Callable answering a yes/no prompt

        Returns:
            Number of CPU runs performed
        """
        runs = 0
        while True:
            self.run_once()
            runs += 1

            if ask(PIPELINE_PROMPT):
                self.run_pipeline()

            if not ask(RERUN_PROMPT):
                break

            self.cpu.reset()

        logger.debug(f"Session finished after {runs} run(s)")
        return runs
