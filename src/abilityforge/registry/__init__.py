"""Effect registry and field schema resolution.

This package provides the registry side of the pipeline compiler:
- EffectRegistry: Snapshot-backed catalog of effect definitions and
  reference tables (mobs, objects, triggers, zones)
- FieldSchemaResolver: Block type tag -> ordered field names
- load_snapshot: Read a registry snapshot from YAML/JSON

Compiler components receive a registry instance explicitly. The module-level
``effect_registry`` exists for the command line tools.
"""

from __future__ import annotations

from abilityforge.registry.catalog import REFERENCE_KINDS, EffectRegistry
from abilityforge.registry.fields import (
    GATE_FIELDS,
    OPTIONAL_EMPTY,
    OPTIONAL_FIELDS,
    UI_EXTRA_FIELDS,
    FieldSchemaResolver,
    is_optional_field,
)
from abilityforge.registry.loader import load_snapshot, parse_snapshot
from abilityforge.registry.options import MenuOption, strip_ansi, to_title_case
from abilityforge.registry.snapshot import (
    EffectDefinition,
    MobEntry,
    ObjectEntry,
    ParamSchema,
    RegistrySnapshot,
    TriggerEntry,
    ZonedEntity,
    ZoneEntry,
)

#: Process-wide registry used by the CLI
effect_registry = EffectRegistry()

__all__ = [
    # Registry
    "EffectRegistry",
    "REFERENCE_KINDS",
    "effect_registry",
    # Snapshot models
    "RegistrySnapshot",
    "EffectDefinition",
    "ParamSchema",
    "ZonedEntity",
    "MobEntry",
    "ObjectEntry",
    "TriggerEntry",
    "ZoneEntry",
    # Field schema
    "FieldSchemaResolver",
    "GATE_FIELDS",
    "UI_EXTRA_FIELDS",
    "OPTIONAL_FIELDS",
    "OPTIONAL_EMPTY",
    "is_optional_field",
    # Loading
    "load_snapshot",
    "parse_snapshot",
    # Options
    "MenuOption",
    "strip_ansi",
    "to_title_case",
]
