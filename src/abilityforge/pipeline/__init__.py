"""Pipeline document compiler.

This package provides both directions of the compiler plus validation:
- PipelineSerializer: Visual program -> PipelineDocument
- PipelineDeserializer: PipelineDocument -> visual program
- PipelineValidator: Structural and schema checks with coded findings
- PipelineWriter / parse_document: Wire form (JSON/YAML arrays)
- EditorSession: Edit loop with last-known-good retention and save gating
"""

from __future__ import annotations

from abilityforge.pipeline.composites import (
    COMPOSITE_RULES,
    CompositeRule,
    CoordinateComposite,
    DamageComponentsComposite,
    ZoneRefComposite,
    format_zone_ref,
    parse_zone_ref,
)
from abilityforge.pipeline.config import DEFAULTS, PipelineDefaults
from abilityforge.pipeline.deserializer import (
    PipelineDeserializer,
    deserialize_document,
)
from abilityforge.pipeline.errors import (
    DocumentParseError,
    DuplicateEffectError,
    PipelineDefinitionError,
    PipelineError,
    UnknownReferenceKindError,
)
from abilityforge.pipeline.param_rules import (
    DEFAULT_PARAM_RULES,
    ParamRule,
    ParamRuleTable,
)
from abilityforge.pipeline.parser import (
    parse_document,
    parse_json,
    parse_yaml,
    read_document,
)
from abilityforge.pipeline.schema import (
    EffectInvocation,
    Gate,
    PipelineDocument,
    PipelineNode,
    Severity,
    ValidationIssue,
    ValidationResult,
)
from abilityforge.pipeline.serializer import PipelineSerializer, serialize_program
from abilityforge.pipeline.session import EditorSession, SaveResult
from abilityforge.pipeline.types import GateType, Trigger
from abilityforge.pipeline.validation import (
    DAMAGE_TYPES,
    PipelineValidator,
    format_issues,
    validate_pipeline,
)
from abilityforge.pipeline.writer import PipelineWriter

__all__ = [
    # Document model
    "EffectInvocation",
    "Gate",
    "PipelineNode",
    "PipelineDocument",
    "GateType",
    "Trigger",
    # Compiler
    "PipelineSerializer",
    "PipelineDeserializer",
    "serialize_program",
    "deserialize_document",
    # Composite rules
    "CompositeRule",
    "ZoneRefComposite",
    "CoordinateComposite",
    "DamageComponentsComposite",
    "COMPOSITE_RULES",
    "parse_zone_ref",
    "format_zone_ref",
    # Wire form
    "PipelineWriter",
    "parse_document",
    "parse_json",
    "parse_yaml",
    "read_document",
    # Validation
    "PipelineValidator",
    "validate_pipeline",
    "format_issues",
    "ValidationIssue",
    "ValidationResult",
    "Severity",
    "DAMAGE_TYPES",
    "ParamRule",
    "ParamRuleTable",
    "DEFAULT_PARAM_RULES",
    # Session
    "EditorSession",
    "SaveResult",
    # Constants
    "DEFAULTS",
    "PipelineDefaults",
    # Errors
    "PipelineError",
    "PipelineDefinitionError",
    "DocumentParseError",
    "DuplicateEffectError",
    "UnknownReferenceKindError",
]
