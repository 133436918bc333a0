"""Print and config commands: show aggregated rules or the effective configuration."""

import json

import click
import typer

from ..pipeline import resolve_workspace_assignments
from . import app
from ._common import compute_snapshots, describe_source, fail, get_run_context, resolve_config
from ._formatters import format_short_config, format_short_print

_FORMAT = typer.Option(
    "json",
    "--format",
    "-f",
    help="Output format: json | short",
    click_type=click.Choice(["json", "short"], case_sensitive=False),
)


@app.command(name="print")
def print_rules(
    ctx: typer.Context,
    fmt: str = _FORMAT,
    tolerant: bool = typer.Option(
        False,
        "--tolerant",
        help="Skip workspaces whose ESLint config cannot be extracted",
    ),
) -> None:
    """Print the aggregated rules of every group."""
    run = get_run_context(ctx)
    try:
        _source, _config, result = compute_snapshots(run, tolerant)
    except Exception as e:
        fail(e)

    snapshots = [result.snapshots[group_id] for group_id in sorted(result.snapshots)]
    if fmt.lower() == "short":
        typer.echo(format_short_print(snapshots), nl=False)
        return

    output = [{"groupId": snapshot.group_id, "rules": snapshot.rules} for snapshot in snapshots]
    print(json.dumps(output, indent=2, ensure_ascii=False))


@app.command(name="config")
def show_config(ctx: typer.Context, fmt: str = _FORMAT) -> None:
    """Print the effective configuration and the resolved groups."""
    run = get_run_context(ctx)
    try:
        source, config = resolve_config(run)
        discovery, assignments = resolve_workspace_assignments(run.path, config)
    except Exception as e:
        fail(e)

    settings = config.to_dict()
    payload = {
        "source": describe_source(run, source),
        "workspaceInput": settings["workspace_input"],
        "workspaces": discovery.workspaces_rel,
        "grouping": {
            "mode": config.grouping.mode,
            "allowEmptyGroups": config.grouping.allow_empty_groups,
            "groups": [{"name": group.name, "workspaces": group.workspaces} for group in assignments],
        },
        "sampling": settings["sampling"],
        "aggregation": settings["aggregation"],
    }

    if fmt.lower() == "short":
        typer.echo(format_short_config(payload), nl=False)
        return
    print(json.dumps(payload, indent=2, ensure_ascii=False))
