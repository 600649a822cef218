"""
Simulator Configuration
=======================

Configuration can come from:
- Default values (defined here)
- Environment variables (``SimulatorConfig.from_env``)
- Command-line options (the ``accsim`` CLI overrides individual fields)

Environment variables (all optional):
    ACCSIM_MEMORY_SIZE: Number of data memory cells (integer >= 0)
    ACCSIM_LOG_LEVEL: Logging level name (DEBUG, INFO, WARNING, ...)
    ACCSIM_MAX_CYCLES: Cycle guard for sessions (integer >= 1)
"""

import logging
import os
from dataclasses import dataclass, replace
from typing import Optional

from accsim.errors import ConfigurationError
from accsim.machine.memory import DEFAULT_MEMORY_SIZE


VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class SimulatorConfig:
    """
    Configuration for a simulation session.

    Attributes:
        memory_size: Number of data memory cells. Programs using LOAD,
                     STORE, ADD or SUB need at least one cell.
        log_level: Logging level name for the ``accsim`` logger hierarchy
        max_cycles: Optional cycle guard; None runs without a limit

    Example:
        >>> config = SimulatorConfig(memory_size=32)
        >>> config = SimulatorConfig.from_env().with_overrides(max_cycles=1000)
    """
    memory_size: int = DEFAULT_MEMORY_SIZE
    log_level: str = "WARNING"
    max_cycles: Optional[int] = None

    def __post_init__(self) -> None:
        if self.memory_size < 0:
            raise ConfigurationError(
                f"memory_size must be >= 0, got {self.memory_size}"
            )
        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"log_level must be one of {', '.join(VALID_LOG_LEVELS)}, "
                f"got {self.log_level!r}"
            )
        if self.max_cycles is not None and self.max_cycles < 1:
            raise ConfigurationError(
                f"max_cycles must be >= 1, got {self.max_cycles}"
            )

    @property
    def log_level_number(self) -> int:
        """Numeric logging level."""
        return getattr(logging, self.log_level.upper())

    @classmethod
    def from_env(cls) -> "SimulatorConfig":
        """
        Create SimulatorConfig from environment variables.

        Invalid values are ignored and the default is kept.
        """
        config = cls()

        if memory_size := os.environ.get("ACCSIM_MEMORY_SIZE"):
            try:
                config = config.with_overrides(memory_size=int(memory_size))
            except (ValueError, ConfigurationError):
                pass

        if log_level := os.environ.get("ACCSIM_LOG_LEVEL"):
            if log_level.upper() in VALID_LOG_LEVELS:
                config = config.with_overrides(log_level=log_level.upper())

        if max_cycles := os.environ.get("ACCSIM_MAX_CYCLES"):
            try:
                config = config.with_overrides(max_cycles=int(max_cycles))
            except (ValueError, ConfigurationError):
                pass

        return config

    def with_overrides(self, **changes) -> "SimulatorConfig":
        """
        Return a copy with the given fields replaced.

        Fields passed as None are left unchanged, so CLI options that were
        not supplied can be forwarded directly.
        """
        changes = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **changes)
