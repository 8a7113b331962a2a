"""abilityforge subcommands."""

from __future__ import annotations

from abilityforge.cli.commands.normalize import normalize
from abilityforge.cli.commands.show import show
from abilityforge.cli.commands.validate import validate

__all__ = ["normalize", "show", "validate"]
