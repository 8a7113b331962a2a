"""``abilityforge show`` command.

Prints a pipeline document as a tree, gates with their pass/fail branches
nested beneath them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click
from rich.text import Text
from rich.tree import Tree

from abilityforge.cli.common import (
    load_registry,
    parse_error_details,
    read_wire_file,
    registry_option,
)
from abilityforge.cli.console import console
from abilityforge.cli.context import ExitCode
from abilityforge.cli.output import format_error
from abilityforge.pipeline.config import DEFAULTS
from abilityforge.pipeline.errors import PipelineDefinitionError
from abilityforge.pipeline.parser import read_document
from abilityforge.pipeline.schema import EffectInvocation, Gate, PipelineNode
from abilityforge.registry import EffectRegistry


def _format_params(params: dict[str, Any]) -> str:
    return ", ".join(f"{key}={value!r}" for key, value in params.items())


def node_label(node: PipelineNode, registry: EffectRegistry) -> Text:
    """One-line description of a node for the tree view."""
    label = Text(f"#{node.order} ", style="dim")
    if isinstance(node, Gate):
        label.append(f"gate {node.gate_type.value}", style="bold magenta")
    else:
        name = (
            registry.effect_label(node.effect_id)
            if registry.is_ready()
            else f"effect {node.effect_id}"
        )
        label.append(name, style="bold cyan")
        label.append(f" (id {node.effect_id})", style="dim")
        if node.trigger:
            label.append(f" {node.trigger}", style="yellow")
        if node.chance_pct != DEFAULTS.DEFAULT_CHANCE_PCT:
            label.append(f" {node.chance_pct}%", style="yellow")
    if node.override_params:
        label.append(f"  {_format_params(node.override_params)}")
    return label


def build_tree(
    nodes: list[PipelineNode], registry: EffectRegistry, title: str
) -> Tree:
    tree = Tree(Text(title, style="bold"))

    def add(parent: Tree, branch: list[PipelineNode]) -> None:
        for node in sorted(branch, key=lambda n: n.order):
            child = parent.add(node_label(node, registry))
            if isinstance(node, Gate):
                for key, nested in node.branches():
                    if nested:
                        add(child.add(Text(key, style="italic")), nested)

    add(tree, nodes)
    return tree


@click.command("show")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@registry_option
@click.pass_context
def show(ctx: click.Context, file: Path, registry_path: Path | None) -> None:
    """Display a pipeline document as a tree.

    With a registry snapshot, effects are shown by name.

    Examples:
        abilityforge show fireball.json
        abilityforge show fireball.json --registry effects.yaml
    """
    try:
        registry = load_registry(ctx, registry_path)
        wire = read_wire_file(file)
    except PipelineDefinitionError as e:
        click.echo(
            format_error(
                f"Cannot show {file}: {e.message}",
                details=parse_error_details(e),
            ),
            err=True,
        )
        raise SystemExit(ExitCode.FAILURE) from e

    document = read_document(wire)
    effects = sum(
        1 for node, _ in document.walk() if isinstance(node, EffectInvocation)
    )
    gates = document.count_nodes() - effects
    title = f"{file.name}: {effects} effect(s), {gates} gate(s)"
    console.print(build_tree(document.nodes, registry, title))
