"""clue recognize command - aggressively recognize Unknown operations."""

import click
from rich.markup import escape

from clue.cli.utils import cli_errors, open_workspace
from clue.core.progress import get_console, pluralize, status
from clue.reorganize.suggest import RecognitionStep, apply_steps, suggest_recognition


@click.command()
@click.option("--apply", "apply_", is_flag=True, help="Move the suggested operations")
@click.option("--yes", "-y", is_flag=True, help="Apply every step without asking")
@click.pass_context
def recognize_command(ctx: click.Context, apply_: bool, yes: bool) -> None:
    """Suggest Unknown operations named after a Recognized entity.

    An operation is suggested when its name starts with the entity's base
    name (exact) or a snake_case singular or plural of it (convention).
    Nothing changes without --apply.
    """
    workspace = open_workspace(ctx)
    steps = suggest_recognition(workspace.model)
    if not steps:
        status("No recognizable operations in Unknown", style="info")
        return

    console = get_console()
    for step in steps:
        console.print(f"[bold]{escape(step.target)}[/bold] ({step.kind})", highlight=False)
        for candidate in step.candidates:
            console.print(
                f"  {escape(candidate.source)} :: {escape(candidate.operation.name)}",
                highlight=False,
            )

    if not apply_:
        status(f"{pluralize(len(steps), 'step')} suggested. Re-run with --apply to move them.")
        return

    def confirm(step: RecognitionStep) -> bool:
        return yes or click.confirm(f"Move {step.describe()}?", default=True)

    with cli_errors():
        moved = apply_steps(workspace.model, steps, confirm)
        workspace.save()
    status(f"Moved {pluralize(moved, 'operation')} to Recognized", style="success")
