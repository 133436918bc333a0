"""CLI entry point: registers all subcommands."""

import typer

app = typer.Typer(
    name="eslint-config-snapshot",
    help="Snapshot effective ESLint rules per workspace group and detect drift",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import subcommands to register them
from .check import main as _main_callback  # noqa: F401, E402
from .init import init as _init  # noqa: F401, E402
from .print_cmd import print_rules as _print_rules, show_config as _show_config  # noqa: F401, E402
from .update import update as _update  # noqa: F401, E402
