"""Field schema resolution for block type tags.

Effect blocks take their field list from the registry's parameter schema
(declaration order), extended with a few editor-only fields that the
serializer folds into wire parameters. Gate blocks are not registry
effects, so their fields come from a fixed table.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from abilityforge.pipeline.types import is_gate_block_type

if TYPE_CHECKING:
    from abilityforge.registry.catalog import EffectRegistry

__all__ = [
    "GATE_FIELDS",
    "UI_EXTRA_FIELDS",
    "OPTIONAL_FIELDS",
    "OPTIONAL_EMPTY",
    "FieldSchemaResolver",
    "is_optional_field",
]

GATE_FIELDS: dict[str, tuple[str, ...]] = {
    "gate_check": ("condition",),
    "gate_chance": ("percentage",),
    "gate_saving_throw": ("saveType", "dc"),
    "gate_attack_roll": ("bonus",),
    "gate_contest": ("casterStat", "targetStat"),
}

# Editor-only fields absent from the registry schema; folded on serialize.
UI_EXTRA_FIELDS: dict[str, tuple[str, ...]] = {
    "effect_teleport": ("targetRoomZoneId", "targetRoomId"),
    "effect_create": ("objectRef",),
    "effect_summon": ("mobRef",),
    "effect_script": ("scriptId", "args"),
    "effect_portal": ("objectRef", "decay"),
}

OPTIONAL_FIELDS: dict[str, frozenset[str]] = {
    "effect_status": frozenset({"type", "contestedBy", "source"}),
    "effect_enchant": frozenset({"flag"}),
    "effect_damage": frozenset(
        {"type", "interval", "duration", "maxJumps", "attenuation"}
    ),
    # summons may name only a mob type, creates only an object type
    "effect_summon": frozenset({"mobRef", "mobZoneFilter"}),
    "effect_create": frozenset({"objectRef", "objectZoneFilter"}),
}

#: Value an optional field holds when the user left it unset.
OPTIONAL_EMPTY = ""


def is_optional_field(block_type: str, field_name: str) -> bool:
    """Whether ``field_name`` may be left empty on ``block_type``."""
    return field_name in OPTIONAL_FIELDS.get(block_type, frozenset())


class FieldSchemaResolver:
    """Resolve block type tags to their ordered field names.

    Args:
        registry: Registry used to look up effect parameter schemas.
    """

    def __init__(self, registry: EffectRegistry) -> None:
        self._registry = registry

    def schema_field_names(self, block_type: str) -> tuple[str, ...]:
        """Parameter names from the registry schema only (no editor extras)."""
        if is_gate_block_type(block_type):
            return GATE_FIELDS.get(block_type, ())
        definition = self._registry.find_definition(block_type)
        if definition is None:
            return ()
        return definition.parameter_names

    def field_names(self, block_type: str) -> tuple[str, ...]:
        """Return the ordered, duplicate-free field names for ``block_type``.

        Unknown effect tags, and effects without a parameter schema, resolve
        to their editor extras alone (often nothing); this is not an error.
        """
        names = list(self.schema_field_names(block_type))
        if is_gate_block_type(block_type):
            return tuple(names)
        for extra in UI_EXTRA_FIELDS.get(block_type, ()):
            if extra not in names:
                names.append(extra)
        return tuple(names)

    def is_optional_field(self, block_type: str, field_name: str) -> bool:
        return is_optional_field(block_type, field_name)
