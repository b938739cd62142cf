"""Clue CLI - clue command."""

from pathlib import Path

import click

from clue import __version__
from clue.cli.analyze import analyze_command
from clue.cli.annotate import annotate_command
from clue.cli.edit import argument_group, entity_group, operation_group
from clue.cli.inspect import show_command, stats_command
from clue.cli.recognize import recognize_command
from clue.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="clue")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "-C",
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Project directory (default: walk up from the current directory)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, root: Path | None) -> None:
    """Clue - classify ORM call sites into data-model entities."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["root"] = root
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(analyze_command, name="analyze")
cli.add_command(annotate_command, name="annotate")
cli.add_command(stats_command, name="stats")
cli.add_command(show_command, name="show")
cli.add_command(recognize_command, name="recognize")
cli.add_command(entity_group, name="entity")
cli.add_command(operation_group, name="operation")
cli.add_command(argument_group, name="argument")


if __name__ == "__main__":
    cli()
