"""Init command: write a starter configuration file."""

import click
import typer

from ..config import config_scaffold, find_config_path
from . import app
from ._common import console, err_console, fail, get_run_context

CONFIG_FILENAME = "eslint-config-snapshot.toml"


@app.command()
def init(
    ctx: typer.Context,
    preset: str = typer.Option(
        "minimal",
        "--preset",
        help="Starter content: minimal | full",
        click_type=click.Choice(["minimal", "full"], case_sensitive=False),
    ),
    force: bool = typer.Option(False, "--force", help="Write even if a configuration already exists"),
) -> None:
    """Create eslint-config-snapshot.toml in the project root."""
    run = get_run_context(ctx)
    try:
        existing = find_config_path(run.path)
    except Exception as e:
        fail(e)

    if existing is not None and not force:
        err_console.print(
            f"[red]Existing config detected at {existing[0]}.[/red] Creating another config can cause "
            "conflicts. Remove the existing config or rerun with --force."
        )
        raise typer.Exit(1)

    target = run.path / CONFIG_FILENAME
    target.write_text(config_scaffold(preset.lower()), encoding="utf-8")
    console.print(f"[green]Created {target.name}[/green]")
