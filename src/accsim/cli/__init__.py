"""
accsim Command-Line Interface
=============================

This package provides the command-line tool for the simulator:

- **accsim**: run a built-in program, optionally walk it in pipeline mode,
  and offer the interactive reset/re-run loop

The tool is a single Click command; see ``accsim --help``.
"""

__all__ = ["accsim"]
