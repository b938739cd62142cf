"""clue analyze command - run the extractor and classify its output."""

import asyncio

import click
from rich.markup import escape

from clue.analysis.session import AnalysisOutcome, AnalysisSession
from clue.annotate.ops import auto_annotate_all
from clue.cli.utils import cli_errors, open_workspace
from clue.core.progress import pluralize, spinner, status


def _report(outcome: AnalysisOutcome) -> None:
    if outcome.status == "loaded":
        status("Loaded saved result (use --reanalyze to run the extractor again)", style="info")
        return
    if outcome.status == "cancelled":
        status("Analysis cancelled, previous result kept", style="warning")
        return
    if outcome.status == "failed":
        status(f"Extractor exited with status {outcome.returncode}", style="error")
        if outcome.stderr:
            click.echo(outcome.stderr, err=True)
        return

    for warning in outcome.warnings:
        status(escape(warning), style="warning")
    stats = outcome.stats
    if stats is not None:
        status(
            f"Classified {pluralize(stats.recognized + stats.unknown, 'operation')}: "
            f"{stats.recognized} recognized, {stats.unknown} unknown",
            style="success",
        )


@click.command()
@click.option(
    "--backend",
    type=click.Choice(["django", "typeorm", "custom"]),
    default=None,
    help="Override the configured extractor backend",
)
@click.option("--reanalyze", is_flag=True, help="Ignore the saved result and run the extractor")
@click.option("--annotate", "annotate", is_flag=True, help="Run every auto-annotation afterwards")
@click.pass_context
def analyze_command(
    ctx: click.Context, backend: str | None, reanalyze: bool, annotate: bool
) -> None:
    """Analyze the repository and save the classified model.

    A saved result is loaded instead of running the extractor unless
    --reanalyze is given. A failed or interrupted run keeps the previous
    result.
    """
    overrides = {"extractor": {"backend": backend}} if backend else {}
    workspace = open_workspace(ctx, require_result=False, **overrides)
    verbose = bool((ctx.find_root().obj or {}).get("verbose"))

    def on_progress(line: str) -> None:
        if verbose:
            status(escape(line), style="info", indent=2)

    session = AnalysisSession(
        workspace.model, workspace.config, workspace.repo_root, on_progress=on_progress
    )
    message = f"Analyzing {workspace.config.extractor.backend} project at {session.analysis_root}"
    with cli_errors():
        try:
            with spinner(message):
                outcome = asyncio.run(session.run(reanalyze=reanalyze))
        except KeyboardInterrupt:
            status("Analysis cancelled, previous result kept", style="warning")
            ctx.exit(130)

    _report(outcome)
    if not outcome.succeeded:
        ctx.exit(1)

    if annotate:
        diagnostics = auto_annotate_all(
            workspace.model, double_check=workspace.config.annotate.double_check
        )
        for line in diagnostics:
            status(escape(line), style="warning")
        with cli_errors():
            workspace.save()
        status("Auto-annotations updated", style="success")
