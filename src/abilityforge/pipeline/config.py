"""Compiler constants.

Values that shape the wire format or the placeholder behavior of the
compiler live here so the serializer, deserializer, and validator agree.
Runtime-tunable settings (layout origin, JSON indent) are in
:mod:`abilityforge.config`.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "PipelineDefaults",
    "DEFAULTS",
]


@dataclass(frozen=True, slots=True)
class PipelineDefaults:
    """Default values for pipeline compilation.

    Attributes:
        ORDER_START: First value of the shared order counter.
        DEFAULT_CHANCE_PCT: chancePct of effects without an explicit chance,
            and the fixed chancePct of every gate.
        MIN_CHANCE_PCT / MAX_CHANCE_PCT: Inclusive chancePct bounds.
        PLACEHOLDER_EFFECT_ID: Id shown for effect options before the
            registry is populated. Never a valid effectId.
        EFFECTS_NOT_LOADED_LABEL: Display label paired with the placeholder id.
        LAYOUT_ORIGIN_X / LAYOUT_ORIGIN_Y: Where the first deserialized
            block is placed.
        ALL_ZONES: Zone filter value meaning "no zone filter".
        COMPONENT_PERCENT_TOTAL: Expected sum of damage component percents.
    """

    ORDER_START: int = 0
    DEFAULT_CHANCE_PCT: int = 100
    MIN_CHANCE_PCT: int = 0
    MAX_CHANCE_PCT: int = 100
    PLACEHOLDER_EFFECT_ID: int = 0
    EFFECTS_NOT_LOADED_LABEL: str = "(No effects loaded)"
    LAYOUT_ORIGIN_X: int = 50
    LAYOUT_ORIGIN_Y: int = 50
    ALL_ZONES: int = -1
    COMPONENT_PERCENT_TOTAL: int = 100


DEFAULTS = PipelineDefaults()
