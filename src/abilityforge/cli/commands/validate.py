"""``abilityforge validate`` command.

Parses a pipeline document file and runs the validator over it.
"""

from __future__ import annotations

from pathlib import Path

import click

from abilityforge.cli.common import (
    load_registry,
    parse_error_details,
    read_wire_file,
    registry_option,
)
from abilityforge.cli.context import ExitCode
from abilityforge.cli.output import OutputFormat, format_error, format_json
from abilityforge.logging import get_logger, log_context
from abilityforge.pipeline.errors import PipelineDefinitionError
from abilityforge.pipeline.validation import PipelineValidator, format_issues


@click.command("validate")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@registry_option
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat]),
    default=OutputFormat.TEXT.value,
    help="Report format.",
)
@click.pass_context
def validate(
    ctx: click.Context, file: Path, registry_path: Path | None, output_format: str
) -> None:
    """Validate a pipeline document.

    Without a registry snapshot, unknown-effect and registry-schema checks
    are skipped. Exits with status 1 if the document has errors.

    Examples:
        abilityforge validate fireball.json
        abilityforge validate fireball.json --registry effects.yaml
        abilityforge validate fireball.yaml --format json
    """
    logger = get_logger(__name__)

    with log_context(document=str(file)):
        try:
            registry = load_registry(ctx, registry_path)
            wire = read_wire_file(file)
        except PipelineDefinitionError as e:
            click.echo(
                format_error(
                    f"Cannot validate {file}: {e.message}",
                    details=parse_error_details(e),
                ),
                err=True,
            )
            raise SystemExit(ExitCode.FAILURE) from e

        result = PipelineValidator(registry).validate(wire)
        logger.info(
            "document_validated",
            valid=result.valid,
            errors=len(result.errors),
            warnings=len(result.warnings),
        )

    if output_format == OutputFormat.JSON.value:
        click.echo(
            format_json(
                {
                    "file": str(file),
                    "valid": result.valid,
                    "errors": [issue.to_dict() for issue in result.errors],
                    "warnings": [issue.to_dict() for issue in result.warnings],
                }
            )
        )
    else:
        for line in format_issues(result.issues):
            click.echo(line)
        status = (
            click.style("valid", fg="green", bold=True)
            if result.valid
            else click.style("invalid", fg="red", bold=True)
        )
        click.echo(
            f"{file.name}: {status} "
            f"({len(result.errors)} error(s), {len(result.warnings)} warning(s))"
        )

    if not result.valid:
        raise SystemExit(ExitCode.FAILURE)
