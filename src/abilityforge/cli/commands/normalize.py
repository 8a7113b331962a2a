"""``abilityforge normalize`` command.

Round-trips a document through the visual program model: nodes are
re-sorted and renumbered, composite parameters re-folded, and anything the
registry cannot resolve is dropped.
"""

from __future__ import annotations

from pathlib import Path

import click

from abilityforge.cli.common import (
    get_config,
    load_registry,
    parse_error_details,
    read_wire_file,
    registry_option,
)
from abilityforge.cli.context import ExitCode
from abilityforge.cli.output import format_error
from abilityforge.logging import get_logger
from abilityforge.pipeline.deserializer import PipelineDeserializer
from abilityforge.pipeline.errors import PipelineDefinitionError
from abilityforge.pipeline.serializer import PipelineSerializer
from abilityforge.pipeline.writer import PipelineWriter


@click.command("normalize")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@registry_option
@click.option(
    "--yaml",
    "as_yaml",
    is_flag=True,
    default=False,
    help="Write YAML instead of JSON.",
)
@click.pass_context
def normalize(
    ctx: click.Context, file: Path, registry_path: Path | None, as_yaml: bool
) -> None:
    """Print the canonical form of a pipeline document.

    Requires a registry snapshot, since effect ids are resolved through it.

    Examples:
        abilityforge normalize fireball.json --registry effects.yaml
        abilityforge normalize fireball.json --registry effects.yaml --yaml
    """
    logger = get_logger(__name__)
    config = get_config(ctx)

    try:
        registry = load_registry(ctx, registry_path)
        wire = read_wire_file(file)
    except PipelineDefinitionError as e:
        click.echo(
            format_error(
                f"Cannot normalize {file}: {e.message}",
                details=parse_error_details(e),
            ),
            err=True,
        )
        raise SystemExit(ExitCode.FAILURE) from e

    if not registry.is_ready():
        click.echo(
            format_error(
                "No effect definitions loaded",
                suggestion="Pass --registry or set registry.snapshot_path",
            ),
            err=True,
        )
        raise SystemExit(ExitCode.FAILURE)

    origin = (config.editor.layout_origin_x, config.editor.layout_origin_y)
    program = PipelineDeserializer(registry, origin=origin).deserialize(wire)
    document = PipelineSerializer(registry).serialize(program)
    logger.info(
        "document_normalized",
        nodes_in=len(wire),
        nodes_out=len(document.nodes),
    )

    writer = PipelineWriter()
    if as_yaml:
        click.echo(writer.to_yaml(document), nl=False)
    else:
        click.echo(writer.to_json(document, indent=config.editor.json_indent))
