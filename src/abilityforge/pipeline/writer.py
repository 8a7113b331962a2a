"""Pipeline writer for rendering PipelineDocument in wire form.

The wire form is an ordered array of node objects::

    {effectId?, gateType?, overrideParams, order, trigger?, chancePct}

Gate branches are written into ``overrideParams.onPass`` /
``overrideParams.onFail``; empty branches are omitted. Absent
``effectId`` / ``gateType`` / ``trigger`` keys are omitted rather than
written as null.

Usage:
    writer = PipelineWriter()

    data = writer.to_wire(document)
    json_str = writer.to_json(document, indent=2)
    yaml_str = writer.to_yaml(document)
"""

from __future__ import annotations

import json
from typing import Any

import yaml

from abilityforge.pipeline.schema import (
    EffectInvocation,
    Gate,
    PipelineDocument,
    PipelineNode,
)
from abilityforge.pipeline.types import ON_FAIL, ON_PASS, WireNode

__all__ = ["PipelineWriter"]


class PipelineWriter:
    """Serializes PipelineDocument to wire dicts, JSON, and YAML.

    Example:
        >>> writer = PipelineWriter()
        >>> writer.to_json(document)
        '[\\n  {\\n    "effectId": 3, ...'
    """

    def to_wire(self, document: PipelineDocument) -> list[WireNode]:
        """Convert a document to its wire-form list of dicts."""
        return [self._serialize_node(node) for node in document.nodes]

    def to_json(self, document: PipelineDocument, indent: int | None = 2) -> str:
        return json.dumps(self.to_wire(document), indent=indent, ensure_ascii=False)

    def to_yaml(self, document: PipelineDocument) -> str:
        result: str = yaml.safe_dump(
            self.to_wire(document),
            default_flow_style=False,
            sort_keys=False,  # Preserve wire key order
            allow_unicode=True,
        )
        return result

    def _serialize_node(self, node: PipelineNode) -> WireNode:
        if isinstance(node, Gate):
            return self._serialize_gate(node)
        return self._serialize_effect(node)

    def _serialize_effect(self, node: EffectInvocation) -> WireNode:
        result: dict[str, Any] = {
            "effectId": node.effect_id,
            "overrideParams": dict(node.override_params),
            "order": node.order,
        }
        if node.trigger:
            result["trigger"] = node.trigger
        result["chancePct"] = node.chance_pct
        return result

    def _serialize_gate(self, node: Gate) -> WireNode:
        params: dict[str, Any] = dict(node.override_params)
        if node.on_pass:
            params[ON_PASS] = [self._serialize_node(n) for n in node.on_pass]
        if node.on_fail:
            params[ON_FAIL] = [self._serialize_node(n) for n in node.on_fail]
        return {
            "gateType": node.gate_type.value,
            "overrideParams": params,
            "order": node.order,
            "chancePct": node.chance_pct,
        }
