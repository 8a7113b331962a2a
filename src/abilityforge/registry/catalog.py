"""Effect registry: the process-side view of the effect catalog.

The registry holds one immutable :class:`RegistrySnapshot` at a time.
``populate`` replaces the snapshot wholesale and rebuilds the id <-> block
type lookup tables; ``clear`` returns to the "not loaded" state. The
compiler receives a registry instance as a dependency, so tests and
concurrent editors can each hold their own.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from abilityforge.logging import get_logger
from abilityforge.pipeline.config import DEFAULTS
from abilityforge.pipeline.errors import (
    DocumentParseError,
    DuplicateEffectError,
    UnknownReferenceKindError,
)
from abilityforge.pipeline.types import EFFECT_PREFIX
from abilityforge.registry import options
from abilityforge.registry.options import MenuOption
from abilityforge.registry.snapshot import (
    EffectDefinition,
    ParamSchema,
    RegistrySnapshot,
    TriggerEntry,
    ZonedEntity,
    ZoneEntry,
    dedupe_by_zone_key,
    sort_current_zone_first,
)

__all__ = ["EffectRegistry", "REFERENCE_KINDS"]

logger = get_logger(__name__)

#: Accepted reference kinds and the snapshot table each one reads.
REFERENCE_KINDS: dict[str, str] = {
    "mobs": "mobs",
    "creatures": "mobs",
    "objects": "objects",
    "items": "objects",
    "triggers": "triggers",
}


class EffectRegistry:
    """Registry of effect definitions and reference tables.

    Example:
        ```python
        registry = EffectRegistry()
        registry.is_ready()  # False

        registry.populate({
            "effects": [
                {"id": 2, "name": "heal", "paramSchema": {
                    "properties": {"resource": {}, "amount": {}},
                }},
            ],
        })
        registry.effect_id_for_tag("effect_heal")  # 2
        registry.tag_for_effect_id(2)  # "effect_heal"
        ```
    """

    def __init__(self, snapshot: RegistrySnapshot | Mapping[str, Any] | None = None):
        self._snapshot = RegistrySnapshot()
        self._id_by_tag: dict[str, int] = {}
        self._definition_by_id: dict[int, EffectDefinition] = {}
        if snapshot is not None:
            self.populate(snapshot)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def populate(self, data: RegistrySnapshot | Mapping[str, Any]) -> None:
        """Replace the registry contents with ``data``.

        Tables missing from ``data`` become empty; nothing carries over from
        the previous snapshot. Mobs and objects are de-duplicated by
        ``zoneId:id`` and sorted current-zone-first, then by name.

        Raises:
            DocumentParseError: If ``data`` does not match the snapshot schema.
            DuplicateEffectError: If two effects share an id or block type.
        """
        if isinstance(data, RegistrySnapshot):
            raw = data
        else:
            try:
                raw = RegistrySnapshot.model_validate(dict(data))
            except ValidationError as e:
                raise DocumentParseError(
                    f"Invalid registry snapshot: {e.error_count()} error(s)",
                    parse_error=e,
                ) from e

        id_by_tag: dict[str, int] = {}
        definition_by_id: dict[int, EffectDefinition] = {}
        for definition in raw.effects:
            if definition.id in definition_by_id:
                raise DuplicateEffectError(definition.id)
            if definition.block_type in id_by_tag:
                raise DuplicateEffectError(definition.block_type)
            definition_by_id[definition.id] = definition
            id_by_tag[definition.block_type] = definition.id

        zone = raw.current_zone_id
        self._snapshot = raw.model_copy(
            update={
                "mobs": tuple(
                    sort_current_zone_first(dedupe_by_zone_key(raw.mobs), zone)
                ),
                "objects": tuple(
                    sort_current_zone_first(dedupe_by_zone_key(raw.objects), zone)
                ),
            }
        )
        self._id_by_tag = id_by_tag
        self._definition_by_id = definition_by_id

        logger.debug(
            "registry_populated",
            effects=len(raw.effects),
            mobs=len(self._snapshot.mobs),
            objects=len(self._snapshot.objects),
            triggers=len(raw.triggers),
            zones=len(raw.zones),
        )

    def clear(self) -> None:
        """Return to the empty, not-loaded state."""
        self._snapshot = RegistrySnapshot()
        self._id_by_tag = {}
        self._definition_by_id = {}
        logger.debug("registry_cleared")

    def is_ready(self) -> bool:
        """True once at least one effect definition is loaded."""
        return bool(self._definition_by_id)

    @property
    def snapshot(self) -> RegistrySnapshot:
        return self._snapshot

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def list_effect_definitions(self) -> list[EffectDefinition]:
        return list(self._snapshot.effects)

    def list_referenceable_entities(
        self, kind: str
    ) -> list[ZonedEntity] | list[TriggerEntry]:
        """List mobs/creatures, objects/items, or triggers.

        Raises:
            UnknownReferenceKindError: For any other kind.
        """
        table = REFERENCE_KINDS.get(kind)
        if table is None:
            raise UnknownReferenceKindError(kind, sorted(REFERENCE_KINDS))
        return list(getattr(self._snapshot, table))

    def list_zones(self) -> list[ZoneEntry]:
        return list(self._snapshot.zones)

    # ------------------------------------------------------------------
    # Type resolution
    # ------------------------------------------------------------------

    def effect_id_for_tag(self, block_type: str) -> int | None:
        """Return the effect id for ``effect_<name>``, or None."""
        return self._id_by_tag.get(block_type)

    def tag_for_effect_id(self, effect_id: int) -> str | None:
        """Return ``effect_<name>`` for an effect id, or None."""
        definition = self._definition_by_id.get(effect_id)
        return definition.block_type if definition else None

    def definition_for_id(self, effect_id: int) -> EffectDefinition | None:
        return self._definition_by_id.get(effect_id)

    def find_definition(self, block_type: str) -> EffectDefinition | None:
        """Find the definition whose lowercased name matches the tag suffix."""
        if not block_type.startswith(EFFECT_PREFIX):
            return None
        effect_id = self._id_by_tag.get(block_type.lower())
        if effect_id is None:
            return None
        return self._definition_by_id[effect_id]

    def param_schema_for_tag(self, block_type: str) -> ParamSchema | None:
        definition = self.find_definition(block_type)
        return definition.param_schema if definition else None

    def known_effect_ids(self) -> frozenset[int]:
        return frozenset(self._definition_by_id)

    def effect_label(self, effect_id: int) -> str:
        """Display label for an effect id.

        Returns the placeholder "not loaded" label while the registry is
        empty, and ``Unknown effect <id>`` for ids missing from a loaded one.
        """
        if not self.is_ready():
            return DEFAULTS.EFFECTS_NOT_LOADED_LABEL
        definition = self._definition_by_id.get(effect_id)
        if definition is None:
            return f"Unknown effect {effect_id}"
        return options.to_title_case(options.strip_ansi(definition.name))

    # ------------------------------------------------------------------
    # Dropdown options
    # ------------------------------------------------------------------

    def effect_options(self) -> list[MenuOption]:
        return options.effect_options(self._snapshot)

    def effect_options_by_type(self, effect_type: str) -> list[MenuOption]:
        return options.effect_options_by_type(self._snapshot, effect_type)

    def mob_options(self, zone_id: int | None = None) -> list[MenuOption]:
        return options.mob_options(self._snapshot, zone_id)

    def object_options(self, zone_id: int | None = None) -> list[MenuOption]:
        return options.object_options(self._snapshot, zone_id)

    def trigger_options(self) -> list[MenuOption]:
        return options.trigger_options(self._snapshot)

    def zone_options(self) -> list[MenuOption]:
        return options.zone_options(self._snapshot)
