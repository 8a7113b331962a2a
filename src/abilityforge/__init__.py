"""abilityforge - ability-effect pipeline compiler.

Translates visually edited ability programs (chains of effect and gate
blocks, gates carrying pass/fail branches) into the order-preserving
pipeline documents consumed by the game's ability engine, and back again.

Usage:
    from abilityforge import EffectRegistry, PipelineSerializer

    registry = EffectRegistry()
    registry.populate({"effects": [...]})
    document = PipelineSerializer(registry).serialize(program)
"""

from __future__ import annotations

from abilityforge.pipeline import (
    EffectInvocation,
    Gate,
    PipelineDeserializer,
    PipelineDocument,
    PipelineSerializer,
    PipelineValidator,
    ValidationResult,
)
from abilityforge.registry import EffectRegistry, FieldSchemaResolver
from abilityforge.visual import Block, VisualProgram

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Block",
    "EffectInvocation",
    "EffectRegistry",
    "FieldSchemaResolver",
    "Gate",
    "PipelineDeserializer",
    "PipelineDocument",
    "PipelineSerializer",
    "PipelineValidator",
    "ValidationResult",
    "VisualProgram",
]
