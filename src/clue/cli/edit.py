"""clue entity / operation / argument commands - edit the classified model.

Items created here are custom and can be removed again. Items that came from
the extractor can only be regrouped or merged; re-analysis rebuilds them.
"""

from typing import cast

import click
from rich.markup import escape

from clue.cli.utils import GROUP_CHOICE, cli_errors, open_workspace, parse_location, to_group
from clue.core.progress import pluralize, status
from clue.model.models import OPERATION_TYPES, Location, OperationType
from clue.reorganize.locators import Locator
from clue.reorganize.ops import (
    MOVED_BUCKET,
    add_argument,
    add_entity,
    add_operation,
    merge_entities,
    move_arguments,
    move_entity,
    move_operations,
    move_operations_to_unknown,
    remove_argument,
    remove_entity,
    remove_operation,
)

_group_option = click.option(
    "--group",
    "group_name",
    type=GROUP_CHOICE,
    default="recognized",
    show_default=True,
    help="Group holding the entity",
)
_at_option = click.option(
    "--at",
    "at",
    default=None,
    metavar="PATH:LINE:COL[-LINE:COL]",
    help="Source range of the new item",
)


def _location(at: str | None) -> Location | None:
    return parse_location(at) if at else None


# =============================================================================
# Entities
# =============================================================================


@click.group("entity")
def entity_group() -> None:
    """Add, remove, regroup and merge entities."""


@entity_group.command("add")
@click.argument("name")
@_group_option
@_at_option
@click.pass_context
def entity_add(ctx: click.Context, name: str, group_name: str, at: str | None) -> None:
    """Add a custom entity NAME."""
    workspace = open_workspace(ctx)
    with cli_errors():
        add_entity(workspace.model, name, to_group(group_name), _location(at))
        workspace.save()
    status(f"Added entity {escape(name)}", style="success")


@entity_group.command("remove")
@click.argument("name")
@_group_option
@click.pass_context
def entity_remove(ctx: click.Context, name: str, group_name: str) -> None:
    """Remove the custom entity NAME."""
    workspace = open_workspace(ctx)
    with cli_errors():
        remove_entity(workspace.model, to_group(group_name), name)
        workspace.save()
    status(f"Removed entity {escape(name)}", style="success")


@entity_group.command("move")
@click.argument("name")
@click.option("--to", "target", type=GROUP_CHOICE, required=True, help="Destination group")
@click.pass_context
def entity_move(ctx: click.Context, name: str, target: str) -> None:
    """Move entity NAME to another group."""
    workspace = open_workspace(ctx)
    model = workspace.model
    source = model.find_group(name)
    if source is None:
        raise click.ClickException(f'Entity "{name}" not found')
    with cli_errors():
        move_entity(model, name, source, to_group(target))
        workspace.save()
    status(f"Moved {escape(name)} to {to_group(target).value}", style="success")


@entity_group.command("merge")
@click.argument("source")
@click.argument("target")
@_group_option
@click.pass_context
def entity_merge(ctx: click.Context, source: str, target: str, group_name: str) -> None:
    """Move every operation of SOURCE into TARGET."""
    workspace = open_workspace(ctx)
    with cli_errors():
        moved = merge_entities(workspace.model, to_group(group_name), source, target)
        workspace.save()
    status(
        f"Merged {pluralize(moved, 'operation')} from {escape(source)} into {escape(target)}",
        style="success",
    )


# =============================================================================
# Operations
# =============================================================================


@click.group("operation")
def operation_group() -> None:
    """Add, remove and move operations."""


@operation_group.command("add")
@click.argument("entity")
@click.argument("name")
@click.option("--type", "op_type", type=click.Choice(OPERATION_TYPES), default="other")
@_group_option
@_at_option
@click.pass_context
def operation_add(
    ctx: click.Context, entity: str, name: str, op_type: str, group_name: str, at: str | None
) -> None:
    """Add a custom operation NAME to ENTITY."""
    workspace = open_workspace(ctx)
    with cli_errors():
        add_operation(
            workspace.model,
            to_group(group_name),
            entity,
            name,
            cast(OperationType, op_type),
            _location(at),
        )
        workspace.save()
    status(f"Added operation {escape(name)} to {escape(entity)}", style="success")


@operation_group.command("remove")
@click.argument("entity")
@click.argument("index", type=int)
@_group_option
@click.pass_context
def operation_remove(ctx: click.Context, entity: str, index: int, group_name: str) -> None:
    """Remove the custom operation at INDEX of ENTITY."""
    workspace = open_workspace(ctx)
    with cli_errors():
        removed = remove_operation(workspace.model, to_group(group_name), entity, index)
        workspace.save()
    status(f"Removed operation {escape(removed.name)} from {escape(entity)}", style="success")


@operation_group.command("move")
@click.argument("entity")
@click.argument("indexes", type=int, nargs=-1, required=True)
@_group_option
@click.option("--to", "target", default=None, help="Destination entity")
@click.option(
    "--target-group",
    type=GROUP_CHOICE,
    default="recognized",
    show_default=True,
    help="Group holding the destination entity",
)
@click.pass_context
def operation_move(
    ctx: click.Context,
    entity: str,
    indexes: tuple[int, ...],
    group_name: str,
    target: str | None,
    target_group: str,
) -> None:
    """Move the operations at INDEXES of ENTITY.

    Without --to the operations go to the Unknown "[moved]" bucket.
    """
    workspace = open_workspace(ctx)
    model = workspace.model
    source_group = to_group(group_name)
    source = model.group(source_group).get(entity)
    if source is None:
        raise click.ClickException(f'Entity "{entity}" not found in {source_group.value}')
    bad = [i for i in indexes if not 0 <= i < len(source.operations)]
    if bad:
        raise click.ClickException(f"No operation at index {bad[0]} of {entity}")
    locators = [Locator.of(source.operations[i], source.name) for i in indexes]

    with cli_errors():
        if target is None:
            result = move_operations_to_unknown(model, source_group, locators)
            destination = MOVED_BUCKET
        else:
            target_entity = model.group(to_group(target_group)).get(target)
            if target_entity is None:
                raise click.ClickException(f'Entity "{target}" not found')
            result = move_operations(model, source_group, target_entity, locators)
            destination = target
        workspace.save()
    moved = pluralize(result.moved, "operation")
    status(f"Moved {moved} to {escape(destination)}", style="success")


# =============================================================================
# Arguments
# =============================================================================


@click.group("argument")
def argument_group() -> None:
    """Add, remove and move arguments."""


@argument_group.command("add")
@click.argument("entity")
@click.argument("operation", type=int)
@click.argument("name")
@_group_option
@_at_option
@click.pass_context
def argument_add(
    ctx: click.Context, entity: str, operation: int, name: str, group_name: str, at: str | None
) -> None:
    """Add a custom argument NAME to operation OPERATION (an index) of ENTITY."""
    workspace = open_workspace(ctx)
    with cli_errors():
        add_argument(workspace.model, to_group(group_name), entity, operation, name, _location(at))
        workspace.save()
    status(f"Added argument {escape(name)}", style="success")


@argument_group.command("remove")
@click.argument("entity")
@click.argument("operation", type=int)
@click.argument("index", type=int)
@_group_option
@click.pass_context
def argument_remove(
    ctx: click.Context, entity: str, operation: int, index: int, group_name: str
) -> None:
    """Remove the custom argument at INDEX of operation OPERATION of ENTITY."""
    workspace = open_workspace(ctx)
    with cli_errors():
        removed = remove_argument(workspace.model, to_group(group_name), entity, operation, index)
        workspace.save()
    status(f"Removed argument {escape(removed.name)}", style="success")


@argument_group.command("move")
@click.argument("entity")
@click.argument("operation", type=int)
@click.argument("indexes", type=int, nargs=-1, required=True)
@click.option("--to", "target", required=True, help="Destination entity")
@click.option("--to-operation", "target_operation", type=int, required=True)
@_group_option
@click.pass_context
def argument_move(
    ctx: click.Context,
    entity: str,
    operation: int,
    indexes: tuple[int, ...],
    target: str,
    target_operation: int,
    group_name: str,
) -> None:
    """Move arguments at INDEXES of operation OPERATION of ENTITY to another operation."""
    workspace = open_workspace(ctx)
    model = workspace.model
    group = to_group(group_name)
    entities = model.group(group)
    if entity not in entities or target not in entities:
        raise click.ClickException(f"Both entities must be in {group.value}")
    source_ops = entities[entity].operations
    target_ops = entities[target].operations
    if not 0 <= operation < len(source_ops) or not 0 <= target_operation < len(target_ops):
        raise click.ClickException("Operation index out of range")
    source_op = source_ops[operation]
    bad = [i for i in indexes if not 0 <= i < len(source_op.arguments)]
    if bad:
        raise click.ClickException(f"No argument at index {bad[0]} of {source_op.name}")
    locators = [Locator.of(source_op.arguments[i], source_op.name) for i in indexes]

    with cli_errors():
        result = move_arguments(model, group, target_ops[target_operation], locators)
        workspace.save()
    status(f"Moved {pluralize(result.moved, 'argument')}", style="success")
