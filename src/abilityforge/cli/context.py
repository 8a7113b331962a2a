"""CLI context and exit codes for abilityforge."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

from abilityforge.config import AbilityForgeConfig

__all__ = [
    "ExitCode",
    "CLIContext",
]


class ExitCode(IntEnum):
    """Exit codes for the abilityforge CLI.

    - 0 for success
    - 1 for failure (invalid document, unreadable input)
    """

    SUCCESS = 0
    FAILURE = 1


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Global options and configuration shared by subcommands.

    Attributes:
        config: Loaded configuration.
        config_path: Path to config file (if specified via --config).
        verbosity: Verbosity level (0=default, 1=INFO, 2+=DEBUG).
        quiet: Suppress non-essential output.
    """

    config: AbilityForgeConfig
    config_path: Path | None = None
    verbosity: int = 0
    quiet: bool = False
