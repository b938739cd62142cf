"""clue stats / clue show commands - read-only views of the classified model."""

import json

import click
from rich.console import Console
from rich.markup import escape

from clue.cli.utils import format_location, open_workspace, to_group
from clue.core.progress import make_count_table, make_tree
from clue.model.filters import filter_entities
from clue.model.models import ClassifiedModel, ResultGroup
from clue.model.stats import count_cda, summarize


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def stats_command(ctx: click.Context, as_json: bool) -> None:
    """Show entity, operation-type and tag counts per group."""
    model = open_workspace(ctx).model
    groups = summarize(model)

    if as_json:
        payload: dict[str, object] = {"groups": [g.to_dict() for g in groups]}
        if model.repository is not None:
            payload["repository"] = {"url": model.repository.url, "hash": model.repository.hash}
        click.echo(json.dumps(payload, indent=2))
        return

    console = Console()
    if model.repository is not None:
        console.print(f"Repository: {model.repository.url} @ {model.repository.hash[:12]}")
    for group in groups:
        console.print(f"[bold]{group.group.value}[/bold]: {group.entities} entities")
        if group.operation_types:
            console.print(make_count_table(group.operation_types, title="Operations"))
        if group.tags:
            console.print(make_count_table(group.tags, title="Tags"))


def _groups(name: str) -> list[ResultGroup]:
    if name == "all":
        return list(ResultGroup)
    return [to_group(name)]


def _show_flat(
    model: ClassifiedModel, groups: list[ResultGroup], filters: tuple[str, ...]
) -> None:
    for group in groups:
        for entity, operations in filter_entities(model.group(group), filters):
            for operation in operations:
                columns = [
                    group.value,
                    entity.name,
                    operation.name,
                    operation.type,
                    format_location(operation.location),
                    operation.note,
                ]
                click.echo("\t".join(columns))


def _label(text: str, note: str, *extra: str) -> str:
    parts = [escape(text), *extra]
    if note:
        parts.append(f"[yellow]{escape(note)}[/yellow]")
    return " ".join(parts)


def _show_tree(
    model: ClassifiedModel, groups: list[ResultGroup], filters: tuple[str, ...]
) -> None:
    console = Console()
    for group in groups:
        tree = make_tree(f"[bold]{group.value}[/bold]")
        for entity, operations in filter_entities(model.group(group), filters):
            summary = f"({len(entity.operations)} ops, {count_cda(entity)} cda)"
            if entity.is_custom:
                summary += " [dim]custom[/dim]"
            branch = tree.add(f"[cyan]{_label(entity.name, entity.note, summary)}[/cyan]")
            indexes = {id(op): i for i, op in enumerate(entity.operations)}
            for operation in operations:
                where = format_location(operation.location)
                details = escape(" ".join(filter(None, [operation.type, where])))
                op_label = _label(operation.name, operation.note, f"[dim]{details}[/dim]")
                op_branch = branch.add(f"{indexes[id(operation)]}: {op_label}")
                for index, argument in enumerate(operation.arguments):
                    op_branch.add(f"{index}: " + _label(argument.name, argument.note))
        console.print(tree, highlight=False)


@click.command()
@click.option(
    "--group",
    "group_name",
    type=click.Choice(["recognized", "unknown", "all"], case_sensitive=False),
    default="all",
    help="Group to list",
)
@click.option(
    "--filter",
    "-f",
    "filters",
    multiple=True,
    help="Case-insensitive substring of an entity or operation name or note",
)
@click.option("--flat", is_flag=True, help="One tab-separated line per operation")
@click.pass_context
def show_command(
    ctx: click.Context, group_name: str, filters: tuple[str, ...], flat: bool
) -> None:
    """List entities with their operations and arguments.

    The index printed before each operation and argument is the one the
    edit commands take.
    """
    model = open_workspace(ctx).model
    groups = _groups(group_name.lower())
    if flat:
        _show_flat(model, groups, filters)
    else:
        _show_tree(model, groups, filters)

