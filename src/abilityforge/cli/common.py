"""Helpers shared by the abilityforge subcommands."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from abilityforge.cli.context import CLIContext
from abilityforge.config import AbilityForgeConfig, load_config
from abilityforge.logging import get_logger
from abilityforge.pipeline.errors import DocumentParseError, PipelineDefinitionError
from abilityforge.pipeline.parser import DocumentFormat, parse_text
from abilityforge.registry import EffectRegistry, effect_registry, load_snapshot

__all__ = [
    "registry_option",
    "get_config",
    "load_registry",
    "document_format_for",
    "read_wire_file",
    "parse_error_details",
]

logger = get_logger(__name__)

registry_option = click.option(
    "--registry",
    "registry_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Registry snapshot (YAML/JSON) with effect definitions.",
)


def get_config(ctx: click.Context) -> AbilityForgeConfig:
    """Return the config loaded by the root group, loading it if absent."""
    obj = ctx.find_root().obj or {}
    cli_ctx: CLIContext | None = obj.get("cli_ctx")
    if cli_ctx is not None:
        return cli_ctx.config
    return load_config()


def load_registry(ctx: click.Context, registry_path: Path | None) -> EffectRegistry:
    """Populate the process registry from ``--registry`` or the config.

    With no snapshot available the registry is left empty (not ready).

    Raises:
        DocumentParseError: If the snapshot file cannot be loaded.
    """
    path = registry_path or get_config(ctx).registry.snapshot_path
    if path is None:
        effect_registry.clear()
        logger.debug("registry_snapshot_not_configured")
        return effect_registry
    effect_registry.populate(load_snapshot(path))
    return effect_registry


def document_format_for(path: Path) -> DocumentFormat:
    return "yaml" if path.suffix.lower() in (".yaml", ".yml") else "json"


def read_wire_file(path: Path) -> list[Any]:
    """Read a pipeline document file into its wire-form list.

    Raises:
        DocumentParseError: If the file does not hold a valid array.
    """
    return parse_text(path.read_text(encoding="utf-8"), document_format_for(path))


def parse_error_details(error: PipelineDefinitionError) -> list[str]:
    details = []
    if isinstance(error, DocumentParseError) and error.line_number:
        details.append(f"Line: {error.line_number}")
    return details
