"""Tests for the exception hierarchy."""

from __future__ import annotations

from abilityforge.exceptions import AbilityForgeError, ConfigError
from abilityforge.pipeline.errors import (
    DocumentParseError,
    DuplicateEffectError,
    PipelineDefinitionError,
    PipelineError,
    UnknownReferenceKindError,
)


class TestHierarchy:
    """Every error derives from AbilityForgeError."""

    def test_config_error(self) -> None:
        error = ConfigError("bad", field="editor.json_indent", value=20)

        assert isinstance(error, AbilityForgeError)
        assert error.message == "bad"
        assert error.field == "editor.json_indent"
        assert error.value == 20

    def test_pipeline_errors(self) -> None:
        for error in (
            DocumentParseError("x"),
            DuplicateEffectError(3),
            UnknownReferenceKindError("spells", ["mobs"]),
        ):
            assert isinstance(error, PipelineDefinitionError)
            assert isinstance(error, PipelineError)
            assert isinstance(error, AbilityForgeError)


class TestErrorAttributes:
    """Structured attributes on domain errors."""

    def test_document_parse_error(self) -> None:
        cause = ValueError("boom")
        error = DocumentParseError("Invalid JSON", line_number=4, parse_error=cause)

        assert str(error) == "Invalid JSON"
        assert error.line_number == 4
        assert error.parse_error is cause

    def test_duplicate_effect_message(self) -> None:
        assert "'effect_heal'" in DuplicateEffectError("effect_heal").message

    def test_unknown_reference_kind_message(self) -> None:
        error = UnknownReferenceKindError("spells", ["mobs", "objects"])

        assert error.message == (
            "Unknown reference kind 'spells'. Available kinds: mobs, objects"
        )
