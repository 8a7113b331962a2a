"""Block catalog facts the compiler needs about the editor's block shapes."""

from __future__ import annotations

from abilityforge.pipeline.types import DAMAGE_COMPONENT_TAG, is_gate_block_type

__all__ = [
    "BLOCKS_WITHOUT_COMMON_FIELDS",
    "has_common_fields",
]

# Script and component blocks carry no trigger / chancePct inputs.
BLOCKS_WITHOUT_COMMON_FIELDS: frozenset[str] = frozenset(
    {"effect_script", DAMAGE_COMPONENT_TAG}
)


def has_common_fields(block_type: str) -> bool:
    """Whether blocks of this type expose ``trigger`` and ``chancePct``."""
    if is_gate_block_type(block_type):
        return False
    return block_type not in BLOCKS_WITHOUT_COMMON_FIELDS
