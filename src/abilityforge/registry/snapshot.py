"""Registry snapshot models.

A snapshot is the complete, immutable payload the editing surface fetches
from the backend: effect definitions plus the reference tables (mobs,
objects, triggers, zones) used to resolve cross-references. Field names
accept both the camelCase wire spelling and snake_case.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from abilityforge.pipeline.types import effect_block_type

__all__ = [
    "ParamSchema",
    "EffectDefinition",
    "ZonedEntity",
    "MobEntry",
    "ObjectEntry",
    "TriggerEntry",
    "ZoneEntry",
    "RegistrySnapshot",
    "dedupe_by_zone_key",
    "sort_current_zone_first",
]


class _SnapshotModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class ParamSchema(_SnapshotModel):
    """JSON-schema-like description of an effect's parameters.

    Only ``properties`` (parameter name -> nested description, in
    declaration order) and ``required`` are interpreted by the compiler.
    """

    type: str = "object"
    properties: dict[str, Any] = Field(default_factory=dict)
    required: tuple[str, ...] = ()


class EffectDefinition(_SnapshotModel):
    """One entry of the effect catalog.

    The block type tag is ``effect_<lowercased name>``.
    """

    id: int
    name: str
    effect_type: str = Field(default="", alias="effectType")
    param_schema: ParamSchema | None = Field(default=None, alias="paramSchema")

    @property
    def block_type(self) -> str:
        return effect_block_type(self.name)

    @property
    def parameter_names(self) -> tuple[str, ...]:
        if self.param_schema is None:
            return ()
        return tuple(self.param_schema.properties)


class ZonedEntity(_SnapshotModel):
    """An entity addressed by a ``zoneId:id`` composite key."""

    id: int
    zone_id: int = Field(alias="zoneId")
    name: str

    @property
    def zone_key(self) -> str:
        return f"{self.zone_id}:{self.id}"


class MobEntry(ZonedEntity):
    """A creature template."""


class ObjectEntry(ZonedEntity):
    """An item template."""


class TriggerEntry(_SnapshotModel):
    """A script that effect_script blocks can invoke."""

    id: int
    name: str
    zone_id: int = Field(default=0, alias="zoneId")


class ZoneEntry(_SnapshotModel):
    id: int
    name: str


class RegistrySnapshot(_SnapshotModel):
    """Complete registry contents at one point in time."""

    effects: tuple[EffectDefinition, ...] = ()
    mobs: tuple[MobEntry, ...] = ()
    objects: tuple[ObjectEntry, ...] = ()
    triggers: tuple[TriggerEntry, ...] = ()
    zones: tuple[ZoneEntry, ...] = ()
    current_zone_id: int | None = Field(default=None, alias="currentZoneId")


Z = TypeVar("Z", bound=ZonedEntity)


def dedupe_by_zone_key(items: Iterable[Z]) -> list[Z]:
    """Keep the first entry for each ``zoneId:id`` key, preserving order."""
    seen: set[str] = set()
    result: list[Z] = []
    for item in items:
        if item.zone_key in seen:
            continue
        seen.add(item.zone_key)
        result.append(item)
    return result


def sort_current_zone_first(
    items: Iterable[Z], current_zone_id: int | None
) -> list[Z]:
    """Sort entries of the current zone first, then alphabetically by name."""

    def key(item: Z) -> tuple[int, str]:
        in_zone = current_zone_id is not None and item.zone_id == current_zone_id
        return (0 if in_zone else 1, item.name.casefold())

    return sorted(items, key=key)
