"""Editor session: the edit loop around the compiler.

An :class:`EditorSession` holds the current pipeline document for one
ability being edited and keeps three views of it in step:

- the visual program (block edits go through the serializer),
- the document text (manual edits go through the parser),
- the last-known-good wire array that validation and saving use.

A manual edit that does not parse records a blocking error and leaves the
last-known-good document untouched. A non-empty document loaded before the
registry leaves the visual program empty and stale: block edits are ignored
until :meth:`EditorSession.rebuild_program` runs against a loaded registry.
Saving is refused while validation reports errors; warnings do not block.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from abilityforge.logging import get_logger
from abilityforge.pipeline.config import DEFAULTS
from abilityforge.pipeline.deserializer import PipelineDeserializer
from abilityforge.pipeline.errors import DocumentParseError
from abilityforge.pipeline.parser import parse_json, read_document
from abilityforge.pipeline.schema import PipelineDocument, ValidationResult
from abilityforge.pipeline.serializer import PipelineSerializer
from abilityforge.pipeline.validation import PipelineValidator, format_issues
from abilityforge.pipeline.writer import PipelineWriter
from abilityforge.visual.program import Position, VisualProgram

if TYPE_CHECKING:
    from abilityforge.registry.catalog import EffectRegistry

__all__ = ["EditorSession", "SaveResult"]

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class SaveResult:
    """Outcome of :meth:`EditorSession.save`.

    Fields:
        saved: True if the document was handed to the save callback
        validation: Validation result the decision was based on
        document: The document that was (or would have been) saved
    """

    saved: bool
    validation: ValidationResult
    document: PipelineDocument


class EditorSession:
    """Edit loop for one ability's pipeline document.

    Args:
        registry: Registry shared by serializer, deserializer and validator.
        on_change: Called with the new document after every accepted edit.
        on_save: Called with the document when :meth:`save` succeeds.
        json_indent: Indentation of the document text.
        origin: Layout origin for programs rebuilt from documents.

    Example:
        ```python
        session = EditorSession(registry, on_save=store.write)
        program = session.load(saved_document)
        ...  # user edits blocks
        session.apply_program(program)
        result = session.save()
        ```
    """

    def __init__(
        self,
        registry: EffectRegistry,
        *,
        on_change: Callable[[PipelineDocument], None] | None = None,
        on_save: Callable[[PipelineDocument], None] | None = None,
        json_indent: int = 2,
        origin: Position = (DEFAULTS.LAYOUT_ORIGIN_X, DEFAULTS.LAYOUT_ORIGIN_Y),
    ) -> None:
        self._registry = registry
        self._serializer = PipelineSerializer(registry)
        self._deserializer = PipelineDeserializer(registry, origin=origin)
        self._validator = PipelineValidator(registry)
        self._writer = PipelineWriter()
        self._on_change = on_change
        self._on_save = on_save
        self._indent = json_indent

        self._wire: list[Any] = []
        self._document = PipelineDocument()
        self._program = VisualProgram()
        self._program_stale = False
        self._text = self._render(self._document)
        self._error: str | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def document(self) -> PipelineDocument:
        """Last-known-good document."""
        return self._document

    @property
    def program(self) -> VisualProgram:
        return self._program

    @property
    def program_ready(self) -> bool:
        """False while the program awaits a registry to be rebuilt against."""
        return not self._program_stale

    @property
    def text(self) -> str:
        """Document text as last entered or generated (may not parse)."""
        return self._text

    @property
    def error(self) -> str | None:
        """Blocking error from the last edit or validation, if any."""
        return self._error

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def load(self, document: PipelineDocument | Sequence[Any]) -> VisualProgram:
        """Replace the session contents and rebuild the visual program."""
        if isinstance(document, PipelineDocument):
            self._wire = self._writer.to_wire(document)
            self._document = document
        else:
            self._wire = list(document)
            self._document = read_document(self._wire)
        self._text = self._render(self._document)
        self._error = None
        return self.rebuild_program()

    def apply_program(self, program: VisualProgram) -> PipelineDocument:
        """Accept a block edit: serialize ``program`` and publish it.

        Ignored, returning the current document, while the program has not
        been built against a loaded registry.
        """
        if self._program_stale:
            logger.warning(
                "block_edit_ignored_registry_not_ready",
                nodes=self._document.count_nodes(),
            )
            return self._document
        document = self._serializer.serialize(program)
        self._program = program
        self._accept(document, self._writer.to_wire(document))
        self._text = self._render(document)
        return document

    def apply_text(self, text: str) -> bool:
        """Accept a manual text edit.

        Returns:
            True if the text parsed and became the current document. On a
            parse failure the error is recorded, False is returned, and the
            last-known-good document is kept.
        """
        self._text = text
        try:
            wire = parse_json(text)
        except DocumentParseError as e:
            logger.info(
                "document_parse_failed", error=str(e), line_number=e.line_number
            )
            self._error = str(e)
            return False
        self._accept(read_document(wire), wire)
        return True

    def rebuild_program(self) -> VisualProgram:
        """Rebuild the visual program from the current document.

        With no registry loaded the program is left empty and marked stale;
        call again once the registry is populated.
        """
        if not self._registry.is_ready() and self._document.count_nodes():
            logger.debug("program_rebuild_deferred_registry_not_ready")
            self._program = VisualProgram()
            self._program_stale = True
            return self._program
        self._program = self._deserializer.deserialize(self._document)
        self._program_stale = False
        return self._program

    def _accept(self, document: PipelineDocument, wire: list[Any]) -> None:
        self._document = document
        self._wire = wire
        self._error = None
        if self._on_change is not None:
            self._on_change(document)

    def _render(self, document: PipelineDocument) -> str:
        return self._writer.to_json(document, indent=self._indent)

    # ------------------------------------------------------------------
    # Validation and saving
    # ------------------------------------------------------------------

    def validate(self) -> ValidationResult:
        """Validate the current document; errors become the session error."""
        result = self._validator.validate(self._wire)
        self._error = None if result.valid else "\n".join(format_issues(result.errors))
        return result

    def save(self) -> SaveResult:
        """Validate and, if there are no errors, hand the document to ``on_save``."""
        result = self.validate()
        if not result.valid:
            logger.info("save_blocked", errors=len(result.errors))
            return SaveResult(saved=False, validation=result, document=self._document)
        if self._on_save is not None:
            self._on_save(self._document)
        logger.debug("document_saved", nodes=self._document.count_nodes())
        return SaveResult(saved=True, validation=result, document=self._document)
