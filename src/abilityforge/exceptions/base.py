from __future__ import annotations


class AbilityForgeError(Exception):
    """Base exception for all abilityforge errors.

    The compiler itself (serializer, deserializer, validator) reports
    content problems as skipped nodes or validation findings and never
    raises across its public boundary. Exceptions derived from this class
    come from the edges: text parsing, registry population, configuration,
    and the CLI.

    Attributes:
        message: Human-readable error message.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
