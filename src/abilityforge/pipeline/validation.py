"""Validation of pipeline documents.

The validator checks a document in wire form so it can report problems the
typed model cannot even represent (a node with both ``effectId`` and
``gateType``, a branch entry that is not an object). It checks:

- Node structure: exactly one of effectId/gateType, positive and known
  effect ids, known gate types, chancePct range, non-negative order,
  known trigger values (E001-E007)
- Damage components: known damage types, percent range, 100% total
  (E008, E009, W002)
- Gate branches, recursively, with ``Effect[i].onPass[j]`` paths (E010 for
  malformed entries)
- The legacy parameter rule table (W001, E011)
- The registry's parameter schema ``required`` lists (W003)
- Disagreement between the rule table and the registry about an id (W004)
- Duplicate ``order`` values anywhere in the document (W005)

Errors make a document invalid; warnings do not.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from abilityforge.pipeline.config import DEFAULTS
from abilityforge.pipeline.param_rules import DEFAULT_PARAM_RULES, ParamRuleTable
from abilityforge.pipeline.schema import (
    PipelineDocument,
    Severity,
    ValidationIssue,
    ValidationResult,
)
from abilityforge.pipeline.types import BRANCH_KEYS, COMPONENTS_SLOT, GateType, Trigger
from abilityforge.pipeline.writer import PipelineWriter

if TYPE_CHECKING:
    from abilityforge.registry.catalog import EffectRegistry

__all__ = [
    "DAMAGE_TYPES",
    "PipelineValidator",
    "validate_pipeline",
    "format_issues",
]

DAMAGE_TYPES: frozenset[str] = frozenset(
    {
        "physical",
        "fire",
        "cold",
        "shock",
        "acid",
        "poison",
        "holy",
        "unholy",
        "force",
        "sonic",
        "bleed",
        "water",
        "earth",
        "air",
        "radiant",
        "shadow",
        "necrotic",
        "mental",
        "nature",
        "magic",
        "lifesteal",
    }
)

_GATE_TYPES = frozenset(gate.value for gate in GateType)
_TRIGGERS = frozenset(trigger.value for trigger in Trigger)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class _Run:
    """Mutable state for one validate() call."""

    issues: list[ValidationIssue] = field(default_factory=list)
    orders: dict[int, str] = field(default_factory=dict)
    drift_reported: set[int] = field(default_factory=set)


@dataclass(frozen=True)
class _Where:
    path: str
    index: int
    effect_id: int | None = None


class PipelineValidator:
    """Validate pipeline documents.

    Args:
        registry: Optional registry. Unknown-id and registry-schema checks
            run only when it is given and ready.
        rules: Legacy per-effect parameter rules.

    Example:
        ```python
        validator = PipelineValidator(registry)
        result = validator.validate(document)
        if not result.valid:
            for line in format_issues(result.errors):
                print(line)
        ```
    """

    def __init__(
        self,
        registry: EffectRegistry | None = None,
        rules: ParamRuleTable = DEFAULT_PARAM_RULES,
    ) -> None:
        self._registry = registry
        self._rules = rules

    def validate(self, document: PipelineDocument | Sequence[Any]) -> ValidationResult:
        """Run all checks on a typed document or a wire-form list."""
        if isinstance(document, PipelineDocument):
            nodes: Sequence[Any] = PipelineWriter().to_wire(document)
        else:
            nodes = document

        run = _Run()
        for i, raw in enumerate(nodes):
            where = _Where(path=f"Effect[{i}]", index=i)
            if not isinstance(raw, dict):
                self._error(run, "E010", "Node must be an object", where)
                continue
            self._check_node(run, raw, where)

        errors = tuple(issue for issue in run.issues if issue.is_error)
        warnings = tuple(issue for issue in run.issues if not issue.is_error)
        return ValidationResult(valid=not errors, errors=errors, warnings=warnings)

    # ------------------------------------------------------------------
    # Node checks
    # ------------------------------------------------------------------

    def _check_node(self, run: _Run, raw: dict[str, Any], where: _Where) -> None:
        effect_id = raw.get("effectId")
        gate_type = raw.get("gateType")
        has_effect = effect_id is not None
        has_gate = gate_type is not None
        if _is_int(effect_id):
            where = _Where(where.path, where.index, effect_id)

        if not has_effect and not has_gate:
            self._error(run, "E001", "Missing both effectId and gateType", where)
        elif has_effect and has_gate:
            self._error(run, "E001", "Node has both effectId and gateType", where)

        params = raw.get("overrideParams", {})
        if params is None:
            params = {}
        if not isinstance(params, dict):
            self._error(
                run,
                "E010",
                "overrideParams must be an object",
                where,
                field="overrideParams",
            )
            params = {}

        if has_effect:
            self._check_effect(run, effect_id, params, where)
        if has_gate:
            self._check_gate(run, gate_type, params, where)

        self._check_common(run, raw, where)

    def _check_effect(
        self, run: _Run, effect_id: Any, params: dict[str, Any], where: _Where
    ) -> None:
        if not _is_int(effect_id) or effect_id <= 0:
            self._error(
                run, "E002", f"Invalid effectId {effect_id!r}", where, field="effectId"
            )
            return

        registry = self._registry
        ready = registry is not None and registry.is_ready()
        if ready and registry.definition_for_id(effect_id) is None:
            self._error(
                run, "E003", f"Unknown effectId {effect_id}", where, field="effectId"
            )

        components = params.get(COMPONENTS_SLOT)
        if isinstance(components, list):
            self._check_components(run, components, where)

        self._check_param_rules(run, effect_id, params, where)
        if ready:
            self._check_registry_schema(run, effect_id, params, where)

    def _check_gate(
        self, run: _Run, gate_type: Any, params: dict[str, Any], where: _Where
    ) -> None:
        if not isinstance(gate_type, str) or gate_type not in _GATE_TYPES:
            self._error(
                run, "E004", f"Invalid gateType {gate_type!r}", where, field="gateType"
            )

        for key in BRANCH_KEYS:
            branch = params.get(key)
            if branch is None:
                continue
            branch_path = f"{where.path}.{key}"
            if not isinstance(branch, list):
                self._error(
                    run,
                    "E010",
                    f"{key} must be an array of nodes",
                    _Where(branch_path, where.index),
                    field=key,
                )
                continue
            for j, entry in enumerate(branch):
                nested = _Where(f"{branch_path}[{j}]", where.index)
                if not isinstance(entry, dict):
                    self._error(run, "E010", "Branch entry must be an object", nested)
                    continue
                self._check_node(run, entry, nested)

    def _check_common(self, run: _Run, raw: dict[str, Any], where: _Where) -> None:
        chance = raw.get("chancePct", DEFAULTS.DEFAULT_CHANCE_PCT)
        if not _is_number(chance) or not (
            DEFAULTS.MIN_CHANCE_PCT <= chance <= DEFAULTS.MAX_CHANCE_PCT
        ):
            self._error(
                run,
                "E005",
                f"chancePct must be between {DEFAULTS.MIN_CHANCE_PCT} and "
                f"{DEFAULTS.MAX_CHANCE_PCT} (got {chance!r})",
                where,
                field="chancePct",
            )

        order = raw.get("order")
        if not _is_int(order) or order < 0:
            self._error(
                run,
                "E006",
                f"order must be a non-negative integer (got {order!r})",
                where,
                field="order",
            )
        elif order in run.orders:
            self._warning(
                run,
                "W005",
                f"order {order} is also used by {run.orders[order]}",
                where,
                field="order",
            )
        else:
            run.orders[order] = where.path

        trigger = raw.get("trigger")
        if trigger is not None and (
            not isinstance(trigger, str) or trigger not in _TRIGGERS
        ):
            self._error(
                run, "E007", f"Invalid trigger {trigger!r}", where, field="trigger"
            )

    def _check_components(
        self, run: _Run, components: list[Any], where: _Where
    ) -> None:
        total: float = 0
        for k, component in enumerate(components):
            if not isinstance(component, dict):
                self._error(
                    run,
                    "E008",
                    f"Damage component {k} must be an object",
                    where,
                    field=COMPONENTS_SLOT,
                )
                continue
            damage_type = component.get("type")
            percent = component.get("percent")
            if not isinstance(damage_type, str) or damage_type not in DAMAGE_TYPES:
                self._error(
                    run,
                    "E008",
                    f'Invalid damage component type "{damage_type}"',
                    where,
                    field=COMPONENTS_SLOT,
                )
            if not _is_number(percent) or not 1 <= percent <= 100:
                self._error(
                    run,
                    "E009",
                    "Damage component percent must be between 1 and 100",
                    where,
                    field=COMPONENTS_SLOT,
                )
            if _is_number(percent):
                total += percent

        if total != DEFAULTS.COMPONENT_PERCENT_TOTAL:
            self._warning(
                run,
                "W002",
                f"Damage components sum to {total:g}%, should be "
                f"{DEFAULTS.COMPONENT_PERCENT_TOTAL}%",
                where,
                field=COMPONENTS_SLOT,
            )

    def _check_param_rules(
        self, run: _Run, effect_id: int, params: dict[str, Any], where: _Where
    ) -> None:
        rule = self._rules.get(effect_id)
        if rule is None:
            return
        for name in rule.missing_params(params):
            self._warning(
                run, "W001", f"Missing required parameter: {name}", where, field=name
            )
        for name in rule.rejected_params(params):
            self._error(
                run,
                "E011",
                f"Invalid value for {name}: {params[name]!r}",
                where,
                field=name,
            )

    def _check_registry_schema(
        self, run: _Run, effect_id: int, params: dict[str, Any], where: _Where
    ) -> None:
        if self._registry is None:
            return
        definition = self._registry.definition_for_id(effect_id)
        if definition is None:
            return

        if definition.param_schema is not None:
            for name in definition.param_schema.required:
                if name not in params:
                    self._warning(
                        run,
                        "W003",
                        f"Missing parameter required by {definition.name}: {name}",
                        where,
                        field=name,
                    )

        rule = self._rules.get(effect_id)
        if (
            rule is not None
            and rule.name.lower() != definition.name.lower()
            and effect_id not in run.drift_reported
        ):
            run.drift_reported.add(effect_id)
            self._warning(
                run,
                "W004",
                f"Parameter rules describe effect {effect_id} as '{rule.name}' "
                f"but the registry names it '{definition.name}'",
                where,
                field="effectId",
            )

    # ------------------------------------------------------------------
    # Finding helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _issue(
        severity: Severity,
        code: str,
        message: str,
        where: _Where,
        field: str | None,
    ) -> ValidationIssue:
        return ValidationIssue(
            code=code,
            message=message,
            path=where.path,
            severity=severity,
            field=field,
            index=where.index,
            effect_id=where.effect_id,
        )

    def _error(
        self,
        run: _Run,
        code: str,
        message: str,
        where: _Where,
        field: str | None = None,
    ) -> None:
        run.issues.append(self._issue(Severity.ERROR, code, message, where, field))

    def _warning(
        self,
        run: _Run,
        code: str,
        message: str,
        where: _Where,
        field: str | None = None,
    ) -> None:
        run.issues.append(self._issue(Severity.WARNING, code, message, where, field))


def validate_pipeline(
    document: PipelineDocument | Sequence[Any],
    registry: EffectRegistry | None = None,
    rules: ParamRuleTable = DEFAULT_PARAM_RULES,
) -> ValidationResult:
    """Convenience wrapper around :class:`PipelineValidator`."""
    return PipelineValidator(registry, rules).validate(document)


def format_issues(issues: Sequence[ValidationIssue]) -> list[str]:
    """Render findings as display lines.

    Examples:
        >>> format_issues(result.errors)
        ['[ERROR] Effect[0] (ID: 3): chancePct must be between 0 and 100 (got 150)']
    """
    lines = []
    for issue in issues:
        label = issue.path
        if issue.effect_id is not None:
            label = f"{label} (ID: {issue.effect_id})"
        lines.append(f"[{issue.severity.value.upper()}] {label}: {issue.message}")
    return lines
