"""Update command: write the current snapshots as the new baseline."""

import typer

from ..snapshot import write_snapshots
from . import app
from ._common import RunContext, compute_snapshots, console, fail, get_run_context
from ._formatters import count_unique_workspaces, summarize_snapshots


@app.command()
def update(
    ctx: typer.Context,
    tolerant: bool = typer.Option(
        False,
        "--tolerant",
        help="Skip workspaces whose ESLint config cannot be extracted",
    ),
    prune: bool = typer.Option(
        True,
        "--prune/--no-prune",
        help="Delete baselines of groups that no longer exist",
    ),
) -> None:
    """Compute the current ESLint rules and store them as the baseline."""
    raise typer.Exit(run_update(get_run_context(ctx), tolerant, prune))


def run_update(run: RunContext, tolerant: bool, prune: bool = True) -> int:
    try:
        _source, _config, result = compute_snapshots(run, tolerant)
        write_snapshots(run.snapshot_path, result.snapshots, prune=prune)
    except Exception as e:
        fail(e)

    if not run.quiet:
        summary = summarize_snapshots(result.snapshots)
        console.print(
            f"[green]Baseline updated:[/green] {summary.groups} groups, {summary.rules} rules.\n"
            f"Workspaces scanned: {count_unique_workspaces(result.snapshots)}.\n"
            f"Severity mix: {summary.error} errors, {summary.warn} warnings, {summary.off} off."
        )
    return 0
