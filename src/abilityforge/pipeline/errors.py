"""Error types for the pipeline compiler.

Exception Hierarchy:
    PipelineError
    └── PipelineDefinitionError
        ├── DocumentParseError (document text is not a valid pipeline array)
        ├── DuplicateEffectError (registry snapshot repeats an id or name)
        └── UnknownReferenceKindError (unsupported reference entity kind)

Content problems inside a well-formed document (unknown effect ids,
out-of-range chance values, ...) are not exceptions; the serializer and
deserializer skip and log them, and the validator reports them as
findings.
"""

from __future__ import annotations

from abilityforge.exceptions import AbilityForgeError


class PipelineError(AbilityForgeError):
    """Base exception for pipeline compiler errors."""


class PipelineDefinitionError(PipelineError):
    """A document or registry definition is malformed."""


class DocumentParseError(PipelineDefinitionError):
    """Document text could not be parsed into a pipeline array.

    Attributes:
        message: Human-readable error message.
        line_number: 1-indexed line of the syntax error, if known.
        parse_error: Underlying JSON/YAML/pydantic exception.

    Examples:
        ```python
        raise DocumentParseError(
            "Invalid JSON format: Expecting ',' delimiter",
            line_number=7,
        )
        ```
    """

    def __init__(
        self,
        message: str,
        line_number: int | None = None,
        parse_error: Exception | None = None,
    ) -> None:
        self.line_number = line_number
        self.parse_error = parse_error
        super().__init__(message)


class DuplicateEffectError(PipelineDefinitionError):
    """Two effect definitions in one snapshot share an id or block type.

    Attributes:
        key: The repeated id or block type tag.
    """

    def __init__(self, key: int | str) -> None:
        self.key = key
        super().__init__(f"Effect definition '{key}' appears more than once")


class UnknownReferenceKindError(PipelineDefinitionError):
    """A reference entity kind other than mobs/objects/triggers was requested.

    Attributes:
        kind: The requested kind.
        available_kinds: Kinds the registry understands.
    """

    def __init__(self, kind: str, available_kinds: list[str]) -> None:
        self.kind = kind
        self.available_kinds = available_kinds
        super().__init__(
            f"Unknown reference kind '{kind}'. "
            f"Available kinds: {', '.join(available_kinds)}"
        )
