"""Output formatting helpers for the abilityforge CLI."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

__all__ = [
    "OutputFormat",
    "format_error",
    "format_json",
]


class OutputFormat(str, Enum):
    """Report formats for ``abilityforge validate``."""

    TEXT = "text"
    JSON = "json"


def format_error(
    message: str, details: list[str] | None = None, suggestion: str | None = None
) -> str:
    """Format an error message with optional details and suggestion.

    Example:
        >>> print(format_error(
        ...     "Cannot parse fireball.json",
        ...     details=["Line: 4"],
        ...     suggestion="Fix the JSON syntax and retry",
        ... ))
        Error: Cannot parse fireball.json
          Line: 4
        Suggestion: Fix the JSON syntax and retry
    """
    lines = [f"Error: {message}"]
    for detail in details or []:
        lines.append(f"  {detail}")
    if suggestion:
        lines.append(f"Suggestion: {suggestion}")
    return "\n".join(lines)


def format_json(data: Any) -> str:
    return json.dumps(data, indent=2)
