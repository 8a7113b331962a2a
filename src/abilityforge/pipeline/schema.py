"""Pydantic models for pipeline documents.

This module defines the typed form of a pipeline document:
- EffectInvocation: One effect applied by the ability
- Gate: A conditional node with pass/fail branches
- PipelineDocument: Ordered top-level nodes
- ValidationIssue / ValidationResult: Validator findings

Gate branches are first-class ``on_pass`` / ``on_fail`` fields here. The
wire form nests them under ``overrideParams.onPass`` / ``onFail``; that
translation happens only in :mod:`abilityforge.pipeline.writer` and
:mod:`abilityforge.pipeline.parser`.

Models check types but not ranges: a chancePct of 150 is representable so
the validator can report it.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

from abilityforge.pipeline.config import DEFAULTS
from abilityforge.pipeline.types import GateType, OverrideParams

__all__ = [
    # Node models
    "EffectInvocation",
    "Gate",
    "PipelineNode",
    # Document
    "PipelineDocument",
    # Validation results
    "Severity",
    "ValidationIssue",
    "ValidationResult",
]


# =============================================================================
# Node Models
# =============================================================================


class _NodeModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    override_params: OverrideParams = Field(
        default_factory=dict, alias="overrideParams"
    )
    order: int
    chance_pct: int = Field(default=DEFAULTS.DEFAULT_CHANCE_PCT, alias="chancePct")


class EffectInvocation(_NodeModel):
    """Invocation of a registry effect.

    Fields:
        effect_id: Registry effect id (``effectId`` on the wire)
        override_params: Parameter values overriding the effect's defaults
        order: Position in the document-wide execution order
        trigger: When the effect fires (``on_cast``, ``on_hit``, ...)
        chance_pct: Probability in percent that the effect fires
    """

    effect_id: int = Field(alias="effectId")
    trigger: str | None = None


class Gate(_NodeModel):
    """Conditional node.

    Fields:
        gate_type: Gate kind (``gateType`` on the wire)
        override_params: Gate parameters (``percentage``, ``dc``, ...),
            never containing the branch keys
        order: Position in the execution order, after all branch contents
        chance_pct: Always 100 for gates produced by the serializer
        on_pass: Nodes run when the gate passes
        on_fail: Nodes run when the gate fails
    """

    gate_type: GateType = Field(alias="gateType")
    on_pass: list[PipelineNode] = Field(default_factory=list, alias="onPass")
    on_fail: list[PipelineNode] = Field(default_factory=list, alias="onFail")

    def branches(self) -> Iterator[tuple[str, list[PipelineNode]]]:
        yield "onPass", self.on_pass
        yield "onFail", self.on_fail


PipelineNode = Union[EffectInvocation, Gate]

Gate.model_rebuild()


# =============================================================================
# Document
# =============================================================================


class PipelineDocument(BaseModel):
    """Ordered sequence of top-level pipeline nodes.

    Convenience Methods:
        - walk(): Depth-first (node, path) pairs, branches after their gate
        - to_wire(): Wire-form list of dicts
        - to_json(): JSON text
        - from_wire(): Lenient read of a wire-form list
    """

    nodes: list[PipelineNode] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.nodes)

    def walk(self) -> Iterator[tuple[PipelineNode, str]]:
        """Yield every node with its ``Effect[i].onPass[j]`` style path."""

        def visit(
            nodes: list[PipelineNode], prefix: str
        ) -> Iterator[tuple[PipelineNode, str]]:
            for i, node in enumerate(nodes):
                path = f"{prefix}[{i}]"
                yield node, path
                if isinstance(node, Gate):
                    for key, branch in node.branches():
                        yield from visit(branch, f"{path}.{key}")

        yield from visit(self.nodes, "Effect")

    def count_nodes(self) -> int:
        return sum(1 for _ in self.walk())

    def to_wire(self) -> list[dict[str, Any]]:
        # Import here to avoid circular imports
        from abilityforge.pipeline.writer import PipelineWriter

        return PipelineWriter().to_wire(self)

    def to_json(self, indent: int | None = 2) -> str:
        from abilityforge.pipeline.writer import PipelineWriter

        return PipelineWriter().to_json(self, indent=indent)

    @classmethod
    def from_wire(cls, data: list[Any]) -> PipelineDocument:
        from abilityforge.pipeline.parser import read_document

        return read_document(data)


# =============================================================================
# Validation Result Models
# =============================================================================


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """One validator finding.

    Fields:
        code: Finding code (``E001``..., ``W001``...)
        message: Human-readable message
        path: Node location, e.g. ``Effect[2].onPass[0]``
        severity: ERROR blocks saving; WARNING does not
        field: Offending node attribute or parameter, if any
        index: Index of the enclosing top-level node
        effect_id: effectId of the node, if it has one
    """

    code: str
    message: str
    path: str
    severity: Severity = Severity.ERROR
    field: str | None = None
    index: int | None = None
    effect_id: int | None = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "severity": self.severity.value,
            "path": self.path,
            "field": self.field,
            "index": self.index,
            "effectId": self.effect_id,
            "message": self.message,
        }


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Result of validating a pipeline document.

    Fields:
        valid: True if no errors were found
        errors: Error findings (empty if valid)
        warnings: Warning findings (may be non-empty even if valid)
    """

    valid: bool
    errors: tuple[ValidationIssue, ...]
    warnings: tuple[ValidationIssue, ...]

    @property
    def issues(self) -> tuple[ValidationIssue, ...]:
        return self.errors + self.warnings
