"""Pipeline document -> visual program.

Inverse of :mod:`abilityforge.pipeline.serializer`: for any program whose
blocks all resolve, ``serialize(deserialize(serialize(p)))`` equals
``serialize(p)``. Nodes are sorted by ``order`` (stable) at every nesting
level, turned into blocks, and linked into a single top-level chain whose
head sits at the layout origin.

Nodes that cannot be resolved (unknown effect id, unknown gate type) are
logged and skipped. Field values are stored on blocks exactly as they
appear in the document.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from abilityforge.logging import get_logger
from abilityforge.pipeline.composites import rules_for
from abilityforge.pipeline.config import DEFAULTS
from abilityforge.pipeline.parser import read_document
from abilityforge.pipeline.schema import (
    EffectInvocation,
    Gate,
    PipelineDocument,
    PipelineNode,
)
from abilityforge.pipeline.types import (
    BRANCH_KEYS,
    CHANCE_FIELD,
    TRIGGER_FIELD,
    OverrideParams,
)
from abilityforge.registry.fields import FieldSchemaResolver
from abilityforge.visual.blocks import has_common_fields
from abilityforge.visual.program import (
    Block,
    Position,
    VisualProgram,
    chain_from_blocks,
    new_chain_node,
    set_field_value,
    set_nested_chain_slot,
)

if TYPE_CHECKING:
    from abilityforge.registry.catalog import EffectRegistry

__all__ = ["PipelineDeserializer", "deserialize_document"]

logger = get_logger(__name__)


def _sorted_by_order(nodes: Sequence[PipelineNode]) -> list[PipelineNode]:
    # sorted() is stable, so equal orders keep document order
    return sorted(nodes, key=lambda node: node.order)


class PipelineDeserializer:
    """Rebuild a visual program from a pipeline document.

    Args:
        registry: Registry used for the effect id -> block type lookup and
            for each effect's parameter names.
        origin: Layout position of the first block.

    Example:
        ```python
        deserializer = PipelineDeserializer(registry)
        program = deserializer.deserialize(document)
        head = program.heads[0]
        ```
    """

    def __init__(
        self,
        registry: EffectRegistry,
        origin: Position = (DEFAULTS.LAYOUT_ORIGIN_X, DEFAULTS.LAYOUT_ORIGIN_Y),
    ) -> None:
        self._registry = registry
        self._fields = FieldSchemaResolver(registry)
        self._origin = origin

    def deserialize(
        self, document: PipelineDocument | Sequence[Any]
    ) -> VisualProgram:
        """Build a program holding a single chain of the document's nodes.

        Accepts a typed document or a wire-form list (read leniently).
        An empty document yields an empty program.
        """
        if not isinstance(document, PipelineDocument):
            document = read_document(document)

        program = VisualProgram()
        head = self._build_chain(document.nodes)
        if head is not None:
            program.add_chain(head, self._origin)
        logger.debug("document_deserialized", nodes=len(document.nodes))
        return program

    def _build_chain(self, nodes: Sequence[PipelineNode]) -> Block | None:
        blocks: list[Block] = []
        for node in _sorted_by_order(nodes):
            block = self._build_block(node)
            if block is not None:
                blocks.append(block)
        return chain_from_blocks(blocks)

    def _resolve_block_type(self, node: PipelineNode) -> str | None:
        if isinstance(node, Gate):
            return node.gate_type.block_type
        block_type = self._registry.tag_for_effect_id(node.effect_id)
        if block_type is None:
            logger.warning(
                "node_skipped_unknown_effect",
                effect_id=node.effect_id,
                order=node.order,
                registry_ready=self._registry.is_ready(),
            )
        return block_type

    def _build_block(self, node: PipelineNode) -> Block | None:
        block_type = self._resolve_block_type(node)
        if block_type is None:
            return None

        block = new_chain_node(block_type)
        self.apply_params(block, node.override_params)

        if isinstance(node, Gate):
            for slot, branch in node.branches():
                branch_head = self._build_chain(branch)
                if branch_head is not None:
                    set_nested_chain_slot(block, slot, branch_head)

        if isinstance(node, EffectInvocation) and has_common_fields(block_type):
            if node.trigger:
                set_field_value(block, TRIGGER_FIELD, node.trigger)
            if node.chance_pct != DEFAULTS.DEFAULT_CHANCE_PCT:
                set_field_value(block, CHANCE_FIELD, node.chance_pct)
        return block

    def apply_params(self, block: Block, params: OverrideParams) -> None:
        """Set block fields from wire parameters, unfolding composites.

        Keys owned by a composite rule are left to that rule. Keys that match
        no field of the block type are dropped.
        """
        block_type = block.type_tag
        field_names = self._fields.field_names(block_type)
        rules = rules_for(block_type, field_names)
        owned_keys = {key for rule in rules for key in rule.wire_keys}
        composite_fields = {name for rule in rules for name in rule.block_fields}

        for key, value in params.items():
            if key in owned_keys or key in BRANCH_KEYS:
                continue
            if key in field_names and key not in composite_fields:
                set_field_value(block, key, value)
            else:
                logger.debug(
                    "param_dropped_unknown_field", block_type=block_type, key=key
                )

        for rule in rules:
            rule.unfold(params, block)


def deserialize_document(
    document: PipelineDocument | Sequence[Any], registry: EffectRegistry
) -> VisualProgram:
    """Convenience wrapper around :class:`PipelineDeserializer`."""
    return PipelineDeserializer(registry).deserialize(document)
