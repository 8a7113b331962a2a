"""abilityforge exception hierarchy.

Pipeline-specific errors live in :mod:`abilityforge.pipeline.errors`; this
package holds the shared base and configuration errors.
"""

from __future__ import annotations

from abilityforge.exceptions.base import AbilityForgeError
from abilityforge.exceptions.config import ConfigError

__all__ = [
    "AbilityForgeError",
    "ConfigError",
]
