"""
accsim - Accumulator Simulator Command-Line Interface
=====================================================

Runs a built-in program on the accumulator CPU and narrates every
fetch-decode-execute cycle.

Usage Examples
--------------
Run the sample program:
    $ accsim

Run it, then walk it in pipeline mode:
    $ accsim --pipeline

Ask after every run whether to show the pipeline and whether to rerun:
    $ accsim --interactive

Summary only, with a larger memory:
    $ accsim --quiet --memory-size 32

Guard against a program that never terminates:
    $ accsim --program spin --max-cycles 1000
"""

import logging
from typing import Optional

import click

from accsim import __version__
from accsim.cli.errors import handle_cli_exception
from accsim.config import SimulatorConfig
from accsim.machine import ConsoleTrace
from accsim.programs import PROGRAMS
from accsim.session import PIPELINE_PROMPT, Session

logger = logging.getLogger(__name__)


WELCOME = "Welcome to the Processor Simulation with Fetch-Decode-Execute Cycle!"


def setup_logging(config: SimulatorConfig, verbose: bool) -> None:
    """Configure logging from the config level, or DEBUG when verbose."""
    level = logging.DEBUG if verbose else config.log_level_number
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.option(
    "-p", "--program",
    "program_name",
    type=click.Choice(sorted(PROGRAMS)),
    default="sample",
    show_default=True,
    help="Built-in program to run",
)
@click.option(
    "-m", "--memory-size",
    type=click.IntRange(min=0),
    default=None,
    help="Number of data memory cells (default: 16 or ACCSIM_MEMORY_SIZE)",
)
@click.option(
    "--pipeline/--no-pipeline",
    default=False,
    help="Walk the program in pipeline mode after the run",
)
@click.option(
    "-i", "--interactive",
    is_flag=True,
    help="Ask after each run whether to show the pipeline and rerun",
)
@click.option(
    "--max-cycles",
    type=click.IntRange(min=1),
    default=None,
    help="Abort a run after this many cycles (default: no limit)",
)
@click.option(
    "-q", "--quiet",
    is_flag=True,
    help="Print only summaries, not every cycle",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging)",
)
@click.version_option(version=__version__, prog_name="accsim")
def main(
    program_name: str,
    memory_size: Optional[int],
    pipeline: bool,
    interactive: bool,
    max_cycles: Optional[int],
    quiet: bool,
    verbose: bool,
) -> None:
    """
    Simulate a single-accumulator processor.

    Runs the selected built-in program through the fetch-decode-execute
    cycle and prints the final registers and memory.

    Examples:

        # Run the sample program and show the pipeline walk
        accsim --pipeline

        # Interactive reset/re-run loop
        accsim --interactive
    """
    try:
        config = SimulatorConfig.from_env().with_overrides(
            memory_size=memory_size,
            max_cycles=max_cycles,
        )
    except Exception as e:
        handle_cli_exception(e, verbose)

    setup_logging(config, verbose)

    click.echo(WELCOME)

    session = Session(
        PROGRAMS[program_name],
        config=config,
        trace=ConsoleTrace(show_cycles=not quiet),
    )
    logger.debug(
        f"Program '{program_name}': {len(session.program)} instructions, "
        f"{config.memory_size} memory cells"
    )

    try:
        if interactive:
            def ask(prompt: str) -> bool:
                if pipeline and prompt == PIPELINE_PROMPT:
                    return True
                click.echo()
                return click.confirm(prompt, default=False)

            session.loop(ask)
        else:
            session.run_once()
            if pipeline:
                session.run_pipeline()
    except click.Abort:
        # Ctrl+C or end of input at a prompt ends the session
        click.echo("\nAborted by user")
    except Exception as e:
        handle_cli_exception(e, verbose)

    click.echo()
    click.echo("Exiting simulation.")


if __name__ == "__main__":
    main()
