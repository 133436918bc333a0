"""Shared CLI helpers."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn, Optional, Sequence, Tuple

import typer
from rich.console import Console
from rich.markup import escape

from ..config import SnapshotConfig, apply_env_overrides, find_config_path, load_config
from ..exceptions import SnapshotterError
from ..extract import EslintRuleQuery, RuleQuery
from ..logging_config import get_logger
from ..pipeline import SkippedWorkspace, SnapshotRun, compute_current_snapshots
from ._formatters import format_skipped_hint

logger = get_logger(__name__)

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

DEFAULT_SNAPSHOT_DIR = ".eslint-config-snapshot"
UPDATE_HINT = (
    "Tip: when you intentionally accept changes, run `eslint-config-snapshot --update` "
    "to refresh the baseline."
)
NO_CONFIG_HINT = (
    "Tip: no explicit config found. Using safe built-in defaults. "
    "Run `eslint-config-snapshot init` to customize when needed."
)


@dataclass
class RunContext:
    """Options shared by every command, stored on ``ctx.obj`` by the callback."""

    path: Path
    config_file: Optional[Path] = None
    snapshot_dir: str = DEFAULT_SNAPSHOT_DIR
    verbose: bool = False
    quiet: bool = False

    @property
    def snapshot_path(self) -> Path:
        return self.path / self.snapshot_dir


def get_run_context(ctx: typer.Context) -> RunContext:
    obj = ctx.ensure_object(dict)
    run = obj.get("run")
    if run is None:
        run = RunContext(path=Path.cwd())
        obj["run"] = run
    return run


def resolve_config(run: RunContext) -> Tuple[Optional[Path], SnapshotConfig]:
    """Configuration for a run and the file it came from (None for built-in defaults)."""
    if run.config_file is not None:
        return run.config_file, load_config(run.path, run.config_file)
    found = find_config_path(run.path)
    if found is None:
        return None, load_config(run.path)
    source, config = found
    return source, apply_env_overrides(config, os.environ)


def create_rule_query(config: SnapshotConfig) -> RuleQuery:
    """Rule query backend used by the commands; tests replace it."""
    return EslintRuleQuery(
        node_binary=config.extraction.node_binary,
        timeout_seconds=config.extraction.timeout_seconds,
    )


def describe_source(run: RunContext, source: Optional[Path]) -> str:
    if source is None:
        return "built-in-defaults"
    try:
        return source.resolve().relative_to(run.path.resolve()).as_posix()
    except ValueError:
        return str(source)


def print_skipped_workspaces(skipped: Sequence[SkippedWorkspace]) -> None:
    """Warn about workspaces left out in tolerant mode, with reasons and a hint."""
    if not skipped:
        return
    workspaces = sorted({entry.workspace for entry in skipped})
    err_console.print(
        f"[yellow]Heads up: {len(workspaces)} workspace(s) were skipped because no effective "
        "ESLint config could be extracted for them.[/yellow]"
    )
    for entry in sorted(skipped, key=lambda s: (s.workspace, s.group_id)):
        err_console.print(f"  - {escape(entry.workspace)} (group {escape(entry.group_id)}): {escape(entry.reason)}")
    err_console.print(f"[dim]{escape(format_skipped_hint(workspaces))}[/dim]")


def compute_snapshots(run: RunContext, tolerant: bool) -> Tuple[Optional[Path], SnapshotConfig, SnapshotRun]:
    """Load configuration and compute current snapshots for a command."""
    source, config = resolve_config(run)
    if source is None and not run.quiet:
        err_console.print(f"[dim]{escape(NO_CONFIG_HINT)}[/dim]")
    result = compute_current_snapshots(run.path, config, create_rule_query(config), tolerant=tolerant)
    print_skipped_workspaces(result.skipped_workspaces)
    return source, config, result


def fail(error: Exception) -> NoReturn:
    """Report an error on stderr and exit with status 1."""
    if isinstance(error, SnapshotterError):
        err_console.print(f"[red]Error:[/red] {escape(str(error))}")
    else:
        logger.exception("Unexpected error")
        err_console.print(f"[red]Unexpected error:[/red] {escape(str(error))}")
    raise typer.Exit(1)
