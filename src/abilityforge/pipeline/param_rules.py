"""Hardcoded per-effect parameter rules (effects IDL v1).

This table predates the registry's parameter schemas and is keyed by
effect id. It is kept separate from :class:`EffectRegistry` on purpose:
the two can disagree about which effect an id names, and the validator
reports that drift instead of silently preferring one source.

A missing required parameter is a warning (editor blocks supply
defaults); a value rejected by a parameter validator is an error.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "ParamValidator",
    "ParamRule",
    "ParamRuleTable",
    "DAMAGE_TYPES_V1",
    "STAT_TYPES",
    "DEFAULT_PARAM_RULES",
]

ParamValidator = Callable[[Any], bool]

DAMAGE_TYPES_V1: tuple[str, ...] = (
    "physical",
    "fire",
    "cold",
    "lightning",
    "acid",
    "poison",
    "holy",
    "unholy",
    "force",
    "psychic",
)

STAT_TYPES: tuple[str, ...] = (
    "str",
    "dex",
    "con",
    "int",
    "wis",
    "cha",
    "acc",
    "damroll",
    "eva",
    "ward",
    "focus",
    "perception",
)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and len(value) > 0


def one_of(*choices: str) -> ParamValidator:
    allowed = frozenset(choices)
    return lambda value: isinstance(value, str) and value in allowed


def number(
    minimum: float | None = None,
    maximum: float | None = None,
    *,
    exclusive_minimum: bool = False,
) -> ParamValidator:
    """Build a numeric validator; booleans are never numbers here."""

    def check(value: Any) -> bool:
        if not _is_number(value):
            return False
        if minimum is not None:
            if exclusive_minimum and value <= minimum:
                return False
            if not exclusive_minimum and value < minimum:
                return False
        return maximum is None or value <= maximum

    return check


def boolean(value: Any) -> bool:
    return isinstance(value, bool)


@dataclass(frozen=True)
class ParamRule:
    """Parameter rules for one effect id.

    Attributes:
        effect_id: Effect id the rule applies to.
        name: Effect name as this table knows it.
        category: Loose grouping (damage, stats, protection, special).
        required_params: Parameters expected in overrideParams.
        optional_params: Parameters that may appear.
        validators: Per-parameter value checks.
    """

    effect_id: int
    name: str
    category: str
    required_params: tuple[str, ...] = ()
    optional_params: tuple[str, ...] = ()
    validators: Mapping[str, ParamValidator] = field(default_factory=dict)

    def missing_params(self, params: Mapping[str, Any]) -> list[str]:
        return [name for name in self.required_params if name not in params]

    def rejected_params(self, params: Mapping[str, Any]) -> list[str]:
        """Names of parameters whose values fail their validator."""
        return [
            name
            for name, value in params.items()
            if name in self.validators and not self.validators[name](value)
        ]


class ParamRuleTable:
    """Lookup of :class:`ParamRule` by effect id."""

    def __init__(self, rules: Iterable[ParamRule] = ()) -> None:
        self._rules: dict[int, ParamRule] = {}
        for rule in rules:
            self._rules[rule.effect_id] = rule

    def get(self, effect_id: int) -> ParamRule | None:
        return self._rules.get(effect_id)

    def __contains__(self, effect_id: object) -> bool:
        return effect_id in self._rules

    def __iter__(self) -> Iterator[ParamRule]:
        return iter(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)


DEFAULT_PARAM_RULES = ParamRuleTable(
    [
        ParamRule(
            effect_id=1,
            name="damage",
            category="damage",
            required_params=("damageType", "formula"),
            optional_params=("canCrit", "ignoreArmor"),
            validators={
                "damageType": one_of(*DAMAGE_TYPES_V1),
                "formula": non_empty_string,
                "canCrit": boolean,
                "ignoreArmor": boolean,
            },
        ),
        ParamRule(
            effect_id=2,
            name="heal",
            category="damage",
            required_params=("formula",),
            optional_params=("healType",),
            validators={
                "formula": non_empty_string,
                "healType": one_of("standard", "regen", "lifesteal"),
            },
        ),
        ParamRule(
            effect_id=3,
            name="dot",
            category="damage",
            required_params=("damageType", "formula", "tickInterval", "duration"),
            validators={
                "damageType": one_of(*DAMAGE_TYPES_V1),
                "formula": non_empty_string,
                "tickInterval": number(0, exclusive_minimum=True),
                "duration": number(0, exclusive_minimum=True),
            },
        ),
        ParamRule(
            effect_id=10,
            name="stat_mod",
            category="stats",
            required_params=("stat", "modifier"),
            optional_params=("duration", "stacking"),
            validators={
                "stat": one_of(*STAT_TYPES),
                "modifier": number(),
                "duration": number(0),
                "stacking": one_of("replace", "stack", "max", "refresh"),
            },
        ),
        ParamRule(
            effect_id=12,
            name="protection",
            category="protection",
            required_params=("damageTypes", "percentage"),
            optional_params=("duration",),
            validators={
                "damageTypes": one_of(*DAMAGE_TYPES_V1),
                "percentage": number(0, 100, exclusive_minimum=True),
                "duration": number(0),
            },
        ),
        ParamRule(
            effect_id=24,
            name="resurrect",
            category="special",
            required_params=("kind",),
            optional_params=("hpPercentage",),
            validators={
                "kind": one_of("revive", "raise", "resurrection", "true_resurrection"),
                "hpPercentage": number(0, 100, exclusive_minimum=True),
            },
        ),
    ]
)
