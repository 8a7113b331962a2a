"""Load registry snapshots from YAML or JSON files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from abilityforge.logging import get_logger
from abilityforge.pipeline.errors import DocumentParseError
from abilityforge.registry.snapshot import RegistrySnapshot

__all__ = ["load_snapshot", "parse_snapshot"]

logger = get_logger(__name__)


def parse_snapshot(data: Any, source: str = "<snapshot>") -> RegistrySnapshot:
    """Validate already-decoded snapshot data.

    Raises:
        DocumentParseError: If ``data`` is not a mapping or fails validation.
    """
    if not isinstance(data, dict):
        raise DocumentParseError(
            f"Registry snapshot {source} must be an object, "
            f"got {type(data).__name__}"
        )
    try:
        return RegistrySnapshot.model_validate(data)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(x) for x in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise DocumentParseError(
            f"Invalid registry snapshot {source}: {details}", parse_error=e
        ) from e


def load_snapshot(path: Path) -> RegistrySnapshot:
    """Read a registry snapshot file.

    ``.json`` files are decoded as JSON; anything else as YAML.

    Raises:
        DocumentParseError: If the file cannot be read or decoded, or its
            contents do not describe a snapshot.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentParseError(
            f"Cannot read registry snapshot {path}: {e}", parse_error=e
        ) from e

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except json.JSONDecodeError as e:
        raise DocumentParseError(
            f"Invalid JSON in {path}: {e.msg}", line_number=e.lineno, parse_error=e
        ) from e
    except yaml.YAMLError as e:
        line_number = None
        if hasattr(e, "problem_mark") and e.problem_mark is not None:
            line_number = e.problem_mark.line + 1
        raise DocumentParseError(
            f"Invalid YAML in {path}: {e}", line_number=line_number, parse_error=e
        ) from e

    snapshot = parse_snapshot(data, source=str(path))
    logger.info(
        "registry_snapshot_loaded", path=str(path), effects=len(snapshot.effects)
    )
    return snapshot
