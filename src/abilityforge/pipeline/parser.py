"""Pipeline document parser.

This module provides functions for reading pipeline documents:
- parse_json / parse_yaml: Text to wire-form list with syntax error handling
- read_document: Wire-form list to PipelineDocument (lenient)
- parse_document: Main entry point - text to PipelineDocument

Text-level problems (bad syntax, a top-level value that is not an array)
raise DocumentParseError. Node-level problems are tolerated: a node that
cannot be read is logged and skipped, the rest of the document is kept.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any, Literal

import yaml
from pydantic import ValidationError

from abilityforge.logging import get_logger
from abilityforge.pipeline.errors import DocumentParseError
from abilityforge.pipeline.schema import (
    EffectInvocation,
    Gate,
    PipelineDocument,
    PipelineNode,
)
from abilityforge.pipeline.types import BRANCH_KEYS, ON_FAIL, ON_PASS

__all__ = [
    "DocumentFormat",
    "parse_json",
    "parse_yaml",
    "parse_text",
    "read_document",
    "read_node",
    "parse_document",
]

logger = get_logger(__name__)

DocumentFormat = Literal["json", "yaml"]


# =============================================================================
# Text Parsing
# =============================================================================


def _require_array(data: Any) -> list[Any]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise DocumentParseError(
            f"Pipeline document must be an array, got {type(data).__name__}"
        )
    return data


def parse_json(text: str) -> list[Any]:
    """Parse JSON text to a wire-form list.

    Empty or whitespace-only text is an empty document.

    Raises:
        DocumentParseError: On JSON syntax errors or a non-array top level.

    Examples:
        >>> parse_json('[{"effectId": 3, "overrideParams": {}, "order": 0}]')
        [{'effectId': 3, 'overrideParams': {}, 'order': 0}]
    """
    if not text or text.isspace():
        return []
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DocumentParseError(
            f"Invalid JSON format: {e.msg}",
            line_number=e.lineno,
            parse_error=e,
        ) from e
    return _require_array(data)


def parse_yaml(text: str) -> list[Any]:
    """Parse YAML text to a wire-form list.

    Raises:
        DocumentParseError: On YAML syntax errors or a non-array top level.
    """
    if not text or text.isspace():
        return []
    try:
        # safe_load prevents arbitrary object construction
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        line_number = None
        if hasattr(e, "problem_mark") and e.problem_mark is not None:
            line_number = e.problem_mark.line + 1  # Convert to 1-indexed
        raise DocumentParseError(
            f"YAML syntax error: {e}",
            line_number=line_number,
            parse_error=e,
        ) from e
    return _require_array(data)


def parse_text(text: str, format: DocumentFormat = "json") -> list[Any]:
    if format == "yaml":
        return parse_yaml(text)
    return parse_json(text)


# =============================================================================
# Node Reading
# =============================================================================


def _present(raw: dict[str, Any], key: str) -> bool:
    return raw.get(key) is not None


def _read_branch(value: Any, path: str) -> list[PipelineNode]:
    if value is None:
        return []
    if not isinstance(value, list):
        logger.warning("branch_malformed", path=path, value_type=type(value).__name__)
        return []
    nodes: list[PipelineNode] = []
    for j, raw in enumerate(value):
        node = read_node(raw, f"{path}[{j}]")
        if node is not None:
            nodes.append(node)
    return nodes


def read_node(raw: Any, path: str = "Effect[0]") -> PipelineNode | None:
    """Read one wire node, returning None (logged) if it cannot be read.

    A node must carry exactly one of ``effectId`` / ``gateType``. For gates,
    ``overrideParams.onPass`` / ``onFail`` become the branch fields.
    """
    if not isinstance(raw, dict):
        logger.warning(
            "node_skipped_malformed", path=path, value_type=type(raw).__name__
        )
        return None

    has_effect = _present(raw, "effectId")
    has_gate = _present(raw, "gateType")
    if has_effect == has_gate:
        logger.warning(
            "node_skipped_ambiguous_kind",
            path=path,
            reason="both effectId and gateType" if has_effect else "neither",
        )
        return None

    data = {key: value for key, value in raw.items() if value is not None}
    params = data.get("overrideParams", {})
    try:
        if has_effect:
            return EffectInvocation.model_validate(data)

        if not isinstance(params, dict):
            logger.warning("node_skipped_invalid", path=path, error="overrideParams")
            return None
        data["overrideParams"] = {
            key: value for key, value in params.items() if key not in BRANCH_KEYS
        }
        data["onPass"] = _read_branch(params.get(ON_PASS), f"{path}.{ON_PASS}")
        data["onFail"] = _read_branch(params.get(ON_FAIL), f"{path}.{ON_FAIL}")
        data.pop("trigger", None)
        return Gate.model_validate(data)
    except ValidationError as e:
        logger.warning("node_skipped_invalid", path=path, error=str(e))
        return None


def read_document(data: Sequence[Any]) -> PipelineDocument:
    """Read a wire-form list into a PipelineDocument, skipping bad nodes.

    Node order is preserved as given; sorting by ``order`` is the
    deserializer's job.
    """
    nodes: list[PipelineNode] = []
    for i, raw in enumerate(data):
        node = read_node(raw, f"Effect[{i}]")
        if node is not None:
            nodes.append(node)
    return PipelineDocument(nodes=nodes)


def parse_document(text: str, format: DocumentFormat = "json") -> PipelineDocument:
    """Parse document text into a PipelineDocument.

    Raises:
        DocumentParseError: If the text is not a syntactically valid array.
    """
    return read_document(parse_text(text, format))
