"""Check command and the top-level callback.

The bare invocation checks for drift; ``--update`` on the bare invocation
refreshes the baseline instead.
"""

from pathlib import Path
from typing import List, Optional

import click
import typer
from rich.text import Text

from ..logging_config import setup_logging
from ..pipeline import GroupChange, compare_snapshot_maps, resolve_group_eslint_versions
from ..snapshot import load_stored_snapshots
from . import app
from ._common import (
    DEFAULT_SNAPSHOT_DIR,
    UPDATE_HINT,
    RunContext,
    compute_snapshots,
    console,
    err_console,
    fail,
    get_run_context,
)
from ._formatters import (
    count_unique_workspaces,
    diff_line_style,
    format_diff,
    summarize_changes,
    summarize_snapshots,
)

_LINE_PREFIXES = {"green": "+ ", "red": "- ", "yellow": "~ "}


@app.callback(invoke_without_command=True, no_args_is_help=False)
def main(
    ctx: typer.Context,
    path: Optional[Path] = typer.Option(
        None,
        "-C",
        "--path",
        help="Project root (default: current directory)",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML or JSON), bypassing discovery",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    snapshot_dir: str = typer.Option(
        DEFAULT_SNAPSHOT_DIR,
        "--snapshot-dir",
        help="Baseline directory, relative to the project root",
    ),
    update: bool = typer.Option(
        False,
        "-u",
        "--update",
        help="Refresh the baseline instead of checking",
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Only report errors"),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Append a full debug log to this file",
        dir_okay=False,
        writable=True,
    ),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
):
    """
    Snapshot the effective ESLint rules of every workspace and detect drift.

    [bold cyan]Examples:[/bold cyan]

      eslint-config-snapshot

      eslint-config-snapshot --update

      eslint-config-snapshot check --format diff

      eslint-config-snapshot -C /path/to/monorepo print --format short
    """
    if version:
        from .. import __version__

        console.print(f"[bold cyan]eslint-config-snapshot[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)

    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    ctx.ensure_object(dict)
    ctx.obj["run"] = RunContext(
        path=(path or Path.cwd()).resolve(),
        config_file=config,
        snapshot_dir=snapshot_dir,
        verbose=verbose,
        quiet=quiet,
    )

    if ctx.invoked_subcommand is not None:
        return

    if update:
        from .update import run_update

        raise typer.Exit(run_update(ctx.obj["run"], tolerant=False))
    raise typer.Exit(run_check(ctx.obj["run"], "summary", tolerant=False))


@app.command()
def check(
    ctx: typer.Context,
    fmt: str = typer.Option(
        "summary",
        "--format",
        "-f",
        help="Output format: summary | status | diff",
        click_type=click.Choice(["summary", "status", "diff"], case_sensitive=False),
    ),
    tolerant: bool = typer.Option(
        False,
        "--tolerant",
        help="Skip workspaces whose ESLint config cannot be extracted",
    ),
) -> None:
    """Compare the current ESLint rules with the stored baseline (exit 1 on drift)."""
    raise typer.Exit(run_check(get_run_context(ctx), fmt.lower(), tolerant))


def run_check(run: RunContext, fmt: str, tolerant: bool) -> int:
    try:
        stored = load_stored_snapshots(run.snapshot_path)
        _source, config, result = compute_snapshots(run, tolerant)
        current = result.snapshots

        if not stored:
            summary = summarize_snapshots(current)
            typer.echo(
                f"Rules found in this analysis: {summary.groups} groups, {summary.rules} rules "
                f"(severity mix: {summary.error} errors, {summary.warn} warnings, {summary.off} off)."
            )
            typer.echo("You are almost set: no baseline snapshot found yet.")
            typer.echo("Run `eslint-config-snapshot --update` to create your first baseline.")
            return 1

        changes = compare_snapshot_maps(stored, current)
        versions = resolve_group_eslint_versions(run.path, config) if run.verbose else {}
    except Exception as e:
        fail(e)

    if fmt == "status":
        typer.echo("changes" if changes else "clean")
        return 1 if changes else 0

    if fmt == "diff":
        if not changes:
            typer.echo("Great news: no snapshot changes detected.")
            return 0
        for change in changes:
            typer.echo(format_diff(change.group_id, change.diff))
        _print_update_hint(run)
        return 1

    _print_summary(run, changes, current, versions)
    return 1 if changes else 0


def _print_summary(run: RunContext, changes: List[GroupChange], current: dict, versions: dict) -> None:
    snapshots_summary = summarize_snapshots(current)
    workspace_count = count_unique_workspaces(current)

    if not changes:
        console.print("[green]Great news: no snapshot drift detected.[/green]")
        console.print(
            f"- groups: {snapshots_summary.groups}\n"
            f"- rules: {snapshots_summary.rules}\n"
            f"- workspaces scanned: {workspace_count}\n"
            f"- severity mix: {snapshots_summary.error} errors, {snapshots_summary.warn} warnings, "
            f"{snapshots_summary.off} off"
        )
        _print_versions(versions)
        return

    totals = summarize_changes(change.diff for change in changes)
    console.print("[red]Heads up: snapshot drift detected.[/red]")
    console.print(
        f"- changed groups: {len(changes)}\n"
        f"- introduced rules: {totals.introduced}\n"
        f"- removed rules: {totals.removed}\n"
        f"- severity changes: {totals.severity}\n"
        f"- options changes: {totals.options}\n"
        f"- workspace membership changes: {totals.workspace}\n"
        f"- workspaces scanned: {workspace_count}\n"
        f"- current baseline: {snapshots_summary.groups} groups, {snapshots_summary.rules} rules"
    )
    _print_versions(versions)

    for change in changes:
        console.print()
        console.print(Text(f"group {change.group_id}", style="bold"))
        for line in format_diff(change.group_id, change.diff).split("\n")[1:]:
            style = diff_line_style(line)
            console.print(Text(_LINE_PREFIXES.get(style, "") + line, style=style))
    _print_update_hint(run)


def _print_versions(versions: dict) -> None:
    for group_id in sorted(versions):
        console.print(Text(f"- eslint {group_id}: {', '.join(versions[group_id])}", style="dim"))


def _print_update_hint(run: RunContext) -> None:
    if not run.quiet:
        err_console.print(Text(UPDATE_HINT, style="dim"))

