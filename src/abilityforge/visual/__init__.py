"""Visual program model used on the editor side of the compiler."""

from __future__ import annotations

from abilityforge.visual.blocks import (
    BLOCKS_WITHOUT_COMMON_FIELDS,
    has_common_fields,
)
from abilityforge.visual.program import (
    Block,
    Chain,
    Position,
    VisualProgram,
    chain_from_blocks,
    connect_next,
    get_field_value,
    get_nested_chain_slot,
    new_chain_node,
    set_field_value,
    set_nested_chain_slot,
    walk_chain,
)

__all__ = [
    "Block",
    "Chain",
    "Position",
    "VisualProgram",
    "new_chain_node",
    "get_field_value",
    "set_field_value",
    "get_nested_chain_slot",
    "set_nested_chain_slot",
    "connect_next",
    "walk_chain",
    "chain_from_blocks",
    "BLOCKS_WITHOUT_COMMON_FIELDS",
    "has_common_fields",
]
