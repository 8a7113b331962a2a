"""Dropdown option lists derived from a registry snapshot.

Each option is a ``(label, value)`` pair. Empty tables yield a single
placeholder option so the editing surface always has something to show
before the registry finishes loading.
"""

from __future__ import annotations

import re
from typing import TypeAlias

from abilityforge.pipeline.config import DEFAULTS
from abilityforge.registry.snapshot import RegistrySnapshot, ZonedEntity

__all__ = [
    "MenuOption",
    "NO_SPECIFIC_MOB",
    "strip_ansi",
    "to_title_case",
    "effect_options",
    "effect_options_by_type",
    "mob_options",
    "object_options",
    "trigger_options",
    "zone_options",
]

MenuOption: TypeAlias = tuple[str, str]

#: Leading mob option; summons may name a mob type without a template.
NO_SPECIFIC_MOB: MenuOption = ("(No specific mob)", "")

_ANSI_PATTERN = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(text: str) -> str:
    """Remove ANSI color codes (game names carry them)."""
    return _ANSI_PATTERN.sub("", text)


def to_title_case(text: str) -> str:
    """``fire_bolt`` / ``fire-bolt`` -> ``Fire Bolt``."""
    spaced = re.sub(r"[-_]", " ", text)
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), spaced)


def effect_options(snapshot: RegistrySnapshot) -> list[MenuOption]:
    if not snapshot.effects:
        placeholder = str(DEFAULTS.PLACEHOLDER_EFFECT_ID)
        return [(DEFAULTS.EFFECTS_NOT_LOADED_LABEL, placeholder)]
    return [
        (to_title_case(strip_ansi(effect.name)), str(effect.id))
        for effect in snapshot.effects
    ]


def effect_options_by_type(
    snapshot: RegistrySnapshot, effect_type: str
) -> list[MenuOption]:
    matching = [e for e in snapshot.effects if e.effect_type == effect_type]
    if not matching:
        return [("(No matching effects)", str(DEFAULTS.PLACEHOLDER_EFFECT_ID))]
    return [(to_title_case(strip_ansi(e.name)), str(e.id)) for e in matching]


def _zoned_label(entity: ZonedEntity) -> str:
    return f"{strip_ansi(entity.name)} [{entity.zone_key}]"


def _filter_zone(
    entities: tuple[ZonedEntity, ...], zone_id: int | None
) -> list[ZonedEntity]:
    """Filter to one zone and order by (zoneId, id); no filter keeps order."""
    if zone_id is None or zone_id == DEFAULTS.ALL_ZONES:
        return list(entities)
    filtered = [e for e in entities if e.zone_id == zone_id]
    return sorted(filtered, key=lambda e: (e.zone_id, e.id))


def mob_options(
    snapshot: RegistrySnapshot, zone_id: int | None = None
) -> list[MenuOption]:
    mobs = _filter_zone(snapshot.mobs, zone_id)
    if not mobs:
        empty = "(No mobs loaded)" if zone_id is None else "(No mobs in zone)"
        return [NO_SPECIFIC_MOB, (empty, "0:0")]
    return [NO_SPECIFIC_MOB, *((_zoned_label(m), m.zone_key) for m in mobs)]


def object_options(
    snapshot: RegistrySnapshot, zone_id: int | None = None
) -> list[MenuOption]:
    objects = _filter_zone(snapshot.objects, zone_id)
    if not objects:
        empty = "(No objects loaded)" if zone_id is None else "(No objects in zone)"
        return [(empty, "0:0")]
    return [(_zoned_label(o), o.zone_key) for o in objects]


def trigger_options(snapshot: RegistrySnapshot) -> list[MenuOption]:
    if not snapshot.triggers:
        return [("(No scripts loaded)", "0")]
    return [
        (f"{to_title_case(strip_ansi(t.name))} [{t.zone_id}:{t.id}]", str(t.id))
        for t in snapshot.triggers
    ]


def zone_options(snapshot: RegistrySnapshot) -> list[MenuOption]:
    if not snapshot.zones:
        return [("(No zones loaded)", str(DEFAULTS.ALL_ZONES))]
    ordered = sorted(snapshot.zones, key=lambda z: z.id)
    return [
        ("All Zones", str(DEFAULTS.ALL_ZONES)),
        *((f"{strip_ansi(z.name)} ({z.id})", str(z.id)) for z in ordered),
    ]
