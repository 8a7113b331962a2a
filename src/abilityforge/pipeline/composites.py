"""Composite field rules.

Some editor fields do not map one-to-one onto wire parameters:

- ``mobRef`` / ``objectRef`` hold a combined ``"zoneId:id"`` reference that
  the wire form splits into two integer parameters.
- ``targetRoomZoneId`` / ``targetRoomId`` are two editor fields that the
  wire form nests under ``targetRoom``.
- ``effect_damage`` blocks hold a nested chain of ``damage_component``
  blocks that the wire form flattens into a ``components`` list.

Each rule folds editor values into wire parameters (serialize) and unfolds
them back (deserialize). Keys a rule owns on the wire are excluded from
plain field mapping so a value is never applied twice.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from abilityforge.logging import get_logger
from abilityforge.pipeline.types import (
    COMPONENTS_SLOT,
    DAMAGE_COMPONENT_TAG,
    OverrideParams,
)
from abilityforge.visual.program import (
    Block,
    chain_from_blocks,
    get_field_value,
    get_nested_chain_slot,
    new_chain_node,
    set_field_value,
    set_nested_chain_slot,
    walk_chain,
)

__all__ = [
    "CompositeRule",
    "ZoneRefComposite",
    "CoordinateComposite",
    "DamageComponentsComposite",
    "COMPOSITE_RULES",
    "rules_for",
    "parse_zone_ref",
    "format_zone_ref",
    "to_int",
]

logger = get_logger(__name__)


def to_int(value: Any) -> int:
    """Coerce an editor value to int; anything unparsable becomes 0."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


def _to_number(value: Any) -> int | float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    return int(number) if number.is_integer() else number


def parse_zone_ref(value: str) -> tuple[int, int]:
    """Split ``"zoneId:id"``; missing or unparsable parts become 0.

    Examples:
        >>> parse_zone_ref("30:1201")
        (30, 1201)
        >>> parse_zone_ref("abc")
        (0, 0)
    """
    zone_part, _, id_part = value.partition(":")
    return to_int(zone_part), to_int(id_part)


def format_zone_ref(zone_id: int, entity_id: int) -> str:
    return f"{zone_id}:{entity_id}"


class CompositeRule(ABC):
    """Base class for a reversible editor <-> wire field transform.

    Attributes:
        block_fields: Editor fields the rule reads on fold and writes on
            unfold. Plain field mapping skips them.
        wire_keys: overrideParams keys the rule writes on fold and reads on
            unfold. Plain field mapping skips them.
    """

    block_fields: tuple[str, ...] = ()
    wire_keys: tuple[str, ...] = ()

    def applies_to(self, block_type: str, field_names: Sequence[str]) -> bool:
        return any(name in field_names for name in self.block_fields)

    @abstractmethod
    def fold(self, block: Block, params: OverrideParams) -> None:
        """Move the rule's block fields into ``params``."""

    @abstractmethod
    def unfold(self, params: OverrideParams, block: Block) -> None:
        """Restore the rule's block fields from ``params``."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(block_fields={self.block_fields!r})"


class ZoneRefComposite(CompositeRule):
    """``mobRef="30:1201"`` <-> ``mobZoneId=30, mobId=1201``."""

    def __init__(self, field: str, zone_key: str, id_key: str) -> None:
        self.field = field
        self.zone_key = zone_key
        self.id_key = id_key
        self.block_fields = (field,)
        self.wire_keys = (zone_key, id_key)

    def fold(self, block: Block, params: OverrideParams) -> None:
        value = get_field_value(block, self.field)
        # An empty reference means "no specific template"
        if value is None or value == "":
            return
        zone_id, entity_id = parse_zone_ref(str(value))
        params[self.zone_key] = zone_id
        params[self.id_key] = entity_id

    def unfold(self, params: OverrideParams, block: Block) -> None:
        if params.get(self.zone_key) is None:
            return
        ref = format_zone_ref(
            to_int(params[self.zone_key]), to_int(params.get(self.id_key) or 0)
        )
        set_field_value(block, self.field, ref)


class CoordinateComposite(CompositeRule):
    """``targetRoomZoneId`` + ``targetRoomId`` <-> ``targetRoom: {zoneId, id}``."""

    def __init__(self, zone_field: str, id_field: str, key: str) -> None:
        self.zone_field = zone_field
        self.id_field = id_field
        self.key = key
        self.block_fields = (zone_field, id_field)
        self.wire_keys = (key,)

    def fold(self, block: Block, params: OverrideParams) -> None:
        zone_value = get_field_value(block, self.zone_field)
        id_value = get_field_value(block, self.id_field)
        if zone_value is None and id_value is None:
            return
        params[self.key] = {
            "zoneId": to_int(zone_value) if zone_value is not None else 0,
            "id": to_int(id_value) if id_value is not None else 0,
        }

    def unfold(self, params: OverrideParams, block: Block) -> None:
        nested = params.get(self.key)
        if not isinstance(nested, dict):
            if nested is not None:
                logger.debug(
                    "composite_value_malformed", key=self.key, value=nested
                )
            return
        if nested.get("zoneId") is not None:
            set_field_value(block, self.zone_field, nested["zoneId"])
        if nested.get("id") is not None:
            set_field_value(block, self.id_field, nested["id"])


class DamageComponentsComposite(CompositeRule):
    """``components`` slot chain <-> ``components: [{type, percent}]``.

    When components are present the single ``type`` parameter is dropped.
    """

    wire_keys = (COMPONENTS_SLOT,)

    def __init__(self, block_type: str = "effect_damage") -> None:
        self.block_type = block_type

    def applies_to(self, block_type: str, field_names: Sequence[str]) -> bool:
        return block_type == self.block_type

    def fold(self, block: Block, params: OverrideParams) -> None:
        components: list[dict[str, Any]] = []
        for component in walk_chain(get_nested_chain_slot(block, COMPONENTS_SLOT)):
            if component.type_tag != DAMAGE_COMPONENT_TAG:
                continue
            damage_type = get_field_value(component, "type")
            percent = get_field_value(component, "percent")
            if damage_type and percent is not None:
                components.append(
                    {"type": str(damage_type), "percent": _to_number(percent)}
                )
        if components:
            params[COMPONENTS_SLOT] = components
            params.pop("type", None)

    def unfold(self, params: OverrideParams, block: Block) -> None:
        entries = params.get(COMPONENTS_SLOT)
        if not isinstance(entries, list):
            return
        blocks: list[Block] = []
        for entry in entries:
            if not isinstance(entry, dict):
                logger.debug("damage_component_malformed", value=entry)
                continue
            blocks.append(
                new_chain_node(
                    DAMAGE_COMPONENT_TAG,
                    type=entry.get("type"),
                    percent=entry.get("percent"),
                )
            )
        head = chain_from_blocks(blocks)
        if head is not None:
            set_nested_chain_slot(block, COMPONENTS_SLOT, head)


COMPOSITE_RULES: tuple[CompositeRule, ...] = (
    ZoneRefComposite(field="mobRef", zone_key="mobZoneId", id_key="mobId"),
    ZoneRefComposite(field="objectRef", zone_key="objectZoneId", id_key="objectId"),
    CoordinateComposite(
        zone_field="targetRoomZoneId", id_field="targetRoomId", key="targetRoom"
    ),
    DamageComponentsComposite(),
)


def rules_for(block_type: str, field_names: Sequence[str]) -> list[CompositeRule]:
    """Return the composite rules active for a block type and its fields."""
    return [
        rule for rule in COMPOSITE_RULES if rule.applies_to(block_type, field_names)
    ]
