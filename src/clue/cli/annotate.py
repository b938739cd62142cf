"""clue annotate command - apply or clear automatic tags."""

import click
from rich.markup import escape

from clue.annotate.ops import (
    SUPPORTED_AUTO_ANNOTATE_TAGS,
    auto_annotate,
    auto_annotate_all,
    clear_auto_annotations,
)
from clue.cli.utils import cli_errors, open_workspace
from clue.core.progress import pluralize, status


@click.command()
@click.argument("tag", type=click.Choice([*SUPPORTED_AUTO_ANNOTATE_TAGS, "all"]))
@click.option("--clear", is_flag=True, help="Remove automatic tags instead of computing them")
@click.pass_context
def annotate_command(ctx: click.Context, tag: str, clear: bool) -> None:
    """Compute automatic tags for the Recognized entities.

    TAG is one of full-scan, cda-tran, non-eq, non-trivial, or "all".
    Tags added by hand are never changed; a warning is printed when one no
    longer matches what the heuristics compute.
    """
    workspace = open_workspace(ctx)
    model = workspace.model
    double_check = workspace.config.annotate.double_check

    with cli_errors():
        if clear:
            changed = clear_auto_annotations(model, None if tag == "all" else tag)
            workspace.save()
            status(f"Cleared automatic tags from {pluralize(changed, 'note')}", style="success")
            return

        if tag == "all":
            diagnostics = auto_annotate_all(model, double_check=double_check)
        else:
            diagnostics = auto_annotate(model, tag, double_check=double_check)
        workspace.save()

    for line in diagnostics:
        status(escape(line), style="warning")
    status(f"Annotated {tag}", style="success")
