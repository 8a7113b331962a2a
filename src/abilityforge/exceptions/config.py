from __future__ import annotations

from typing import Any

from abilityforge.exceptions.base import AbilityForgeError


class ConfigError(AbilityForgeError):
    """Configuration could not be loaded, parsed, or validated.

    Attributes:
        message: Human-readable error message.
        field: Dotted field name that caused the error, if known
            (e.g. ``editor.json_indent``).
        value: The rejected value, if known.

    Examples:
        ```python
        raise ConfigError(
            "Invalid configuration: Input should be a valid integer",
            field="editor.layout_origin_x",
            value="left",
        )
        ```
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        self.field = field
        self.value = value
        super().__init__(message)
