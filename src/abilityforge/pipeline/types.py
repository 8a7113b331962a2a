"""Type definitions shared by the pipeline compiler.

Block type tags follow two prefixes: ``effect_<name>`` for effect blocks
(resolved dynamically against the registry) and ``gate_<kind>`` for the
fixed set of conditional gates.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, TypeAlias

EFFECT_PREFIX = "effect_"
GATE_PREFIX = "gate_"

#: Reserved overrideParams keys carrying gate branches on the wire.
ON_PASS = "onPass"
ON_FAIL = "onFail"
BRANCH_KEYS: tuple[str, str] = (ON_PASS, ON_FAIL)

#: Nested-chain slot holding damage component blocks on effect_damage.
COMPONENTS_SLOT = "components"
DAMAGE_COMPONENT_TAG = "damage_component"

#: Dedicated block fields copied to/from node attributes rather than params.
TRIGGER_FIELD = "trigger"
CHANCE_FIELD = "chancePct"

OverrideParams: TypeAlias = dict[str, Any]
WireNode: TypeAlias = dict[str, Any]


class GateType(str, Enum):
    """Conditional gate kinds."""

    CHECK = "check"
    CHANCE = "chance"
    SAVING_THROW = "saving_throw"
    ATTACK_ROLL = "attack_roll"
    CONTEST = "contest"

    @property
    def block_type(self) -> str:
        return f"{GATE_PREFIX}{self.value}"

    @classmethod
    def from_block_type(cls, block_type: str) -> GateType | None:
        """Map ``gate_chance`` style tags back to a GateType, or None."""
        if not block_type.startswith(GATE_PREFIX):
            return None
        try:
            return cls(block_type[len(GATE_PREFIX) :])
        except ValueError:
            return None


class Trigger(str, Enum):
    """When an effect fires relative to the ability's resolution."""

    ON_CAST = "on_cast"
    ON_HIT = "on_hit"
    ON_MISS = "on_miss"
    ON_CRIT = "on_crit"
    ON_KILL = "on_kill"
    ON_TAKE_DAMAGE = "on_take_damage"
    ON_TICK = "on_tick"


def effect_block_type(name: str) -> str:
    """Derive an effect block tag from a registry effect name."""
    return f"{EFFECT_PREFIX}{name.lower()}"


def is_gate_block_type(block_type: str) -> bool:
    return block_type.startswith(GATE_PREFIX)


def is_effect_block_type(block_type: str) -> bool:
    return block_type.startswith(EFFECT_PREFIX)
