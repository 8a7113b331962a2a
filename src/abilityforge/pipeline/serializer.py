"""Visual program -> pipeline document.

The serializer walks every top-level chain in program order and each gate's
``onPass`` / ``onFail`` chains recursively, numbering nodes with a single
counter shared across the whole call. A gate's branches are numbered before
the gate itself, so a gate's ``order`` is always greater than every order
inside its branches.

Blocks whose type cannot be resolved are skipped (and logged); the
serializer never raises on content problems and never mutates its input.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterator
from typing import TYPE_CHECKING

from abilityforge.logging import get_logger
from abilityforge.pipeline.composites import rules_for, to_int
from abilityforge.pipeline.config import DEFAULTS
from abilityforge.pipeline.schema import (
    EffectInvocation,
    Gate,
    PipelineDocument,
    PipelineNode,
)
from abilityforge.pipeline.types import (
    CHANCE_FIELD,
    ON_FAIL,
    ON_PASS,
    TRIGGER_FIELD,
    GateType,
    OverrideParams,
    is_effect_block_type,
)
from abilityforge.registry.fields import (
    OPTIONAL_EMPTY,
    FieldSchemaResolver,
    is_optional_field,
)
from abilityforge.visual.blocks import has_common_fields
from abilityforge.visual.program import (
    Block,
    VisualProgram,
    get_field_value,
    get_nested_chain_slot,
    walk_chain,
)

if TYPE_CHECKING:
    from abilityforge.registry.catalog import EffectRegistry

__all__ = ["PipelineSerializer", "serialize_program"]

logger = get_logger(__name__)


class PipelineSerializer:
    """Compile a visual program into a pipeline document.

    Args:
        registry: Registry used to resolve effect block types to ids and to
            look up each effect's parameter names.

    Example:
        ```python
        serializer = PipelineSerializer(registry)
        document = serializer.serialize(program)
        print(document.to_json())
        ```
    """

    def __init__(self, registry: EffectRegistry) -> None:
        self._registry = registry
        self._fields = FieldSchemaResolver(registry)

    def serialize(self, program: VisualProgram) -> PipelineDocument:
        counter = itertools.count(DEFAULTS.ORDER_START)
        nodes: list[PipelineNode] = []
        for head in program.heads:
            nodes.extend(self._serialize_chain(head, counter))
        logger.debug("program_serialized", chains=len(program.chains), nodes=len(nodes))
        return PipelineDocument(nodes=nodes)

    def extract_params(self, block: Block) -> OverrideParams:
        """Collect a block's wire parameters, with composite fields folded.

        ``None`` values are never written, and optional fields left at the
        empty sentinel are omitted.
        """
        block_type = block.type_tag
        field_names = self._fields.field_names(block_type)
        rules = rules_for(block_type, field_names)
        owner = {name: rule for rule in rules for name in rule.block_fields}

        params: OverrideParams = {}
        folded: set[int] = set()
        for name in field_names:
            rule = owner.get(name)
            if rule is not None:
                # Composite output lands where its first field appears
                if id(rule) not in folded:
                    rule.fold(block, params)
                    folded.add(id(rule))
                continue
            value = get_field_value(block, name)
            if value is None:
                continue
            if value == OPTIONAL_EMPTY and is_optional_field(block_type, name):
                continue
            params[name] = value

        # Rules without editor fields (damage components) run last
        for rule in rules:
            if id(rule) not in folded:
                rule.fold(block, params)
        return params

    def _serialize_chain(
        self, start: Block | None, counter: Iterator[int]
    ) -> list[PipelineNode]:
        nodes: list[PipelineNode] = []
        for block in walk_chain(start):
            node = self._serialize_block(block, counter)
            if node is not None:
                nodes.append(node)
        return nodes

    def _serialize_block(
        self, block: Block, counter: Iterator[int]
    ) -> PipelineNode | None:
        block_type = block.type_tag
        effect_id = self._registry.effect_id_for_tag(block_type)
        if effect_id is not None:
            return self._serialize_effect(block, effect_id, counter)

        gate_type = GateType.from_block_type(block_type)
        if gate_type is not None:
            return self._serialize_gate(block, gate_type, counter)

        if is_effect_block_type(block_type) and not self._registry.is_ready():
            logger.debug("block_skipped_registry_not_ready", block_type=block_type)
        else:
            logger.warning("block_skipped_unknown_type", block_type=block_type)
        return None

    def _serialize_effect(
        self, block: Block, effect_id: int, counter: Iterator[int]
    ) -> EffectInvocation:
        params = self.extract_params(block)
        trigger = chance = None
        if has_common_fields(block.type_tag):
            trigger = get_field_value(block, TRIGGER_FIELD)
            chance = get_field_value(block, CHANCE_FIELD)
        return EffectInvocation(
            effect_id=effect_id,
            override_params=params,
            order=next(counter),
            trigger=str(trigger) if trigger else None,
            chance_pct=(
                to_int(chance) if chance is not None else DEFAULTS.DEFAULT_CHANCE_PCT
            ),
        )

    def _serialize_gate(
        self, block: Block, gate_type: GateType, counter: Iterator[int]
    ) -> Gate:
        params = self.extract_params(block)
        on_pass = self._serialize_chain(get_nested_chain_slot(block, ON_PASS), counter)
        on_fail = self._serialize_chain(get_nested_chain_slot(block, ON_FAIL), counter)
        return Gate(
            gate_type=gate_type,
            override_params=params,
            order=next(counter),
            chance_pct=DEFAULTS.DEFAULT_CHANCE_PCT,
            on_pass=on_pass,
            on_fail=on_fail,
        )


def serialize_program(
    program: VisualProgram, registry: EffectRegistry
) -> PipelineDocument:
    """Convenience wrapper around :class:`PipelineSerializer`."""
    return PipelineSerializer(registry).serialize(program)
