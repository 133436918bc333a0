"""
Logging for eslint-config-snapshot.

Console records go to stderr through rich so stdout stays clean for the JSON
emitted by ``print`` and ``config``. An optional log file always receives the
full debug trail (sampled files, query counts, timings), whatever the console
verbosity, so a quiet CI run can still be diagnosed afterwards.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "eslint_config_snapshot"

FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def console_level(verbose: bool = False, quiet: bool = False) -> int:
    """``-q`` wins over ``-v``; the default shows warnings and errors."""
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[Union[str, Path]] = None
) -> logging.Logger:
    """
    Route eslint_config_snapshot records to the terminal and, optionally, a file.

    Args:
        verbose: Show debug records on the console
        quiet: Show only errors on the console
        log_file: Append every record, debug included, to this file

    Returns:
        The package root logger
    """
    level = console_level(verbose, quiet)

    console_handler = RichHandler(
        console=Console(stderr=True),
        level=level,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_time=True,
        show_path=verbose,
    )
    handlers: list[logging.Handler] = [console_handler]

    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    # force=True replaces handlers left by an earlier invocation in the same process
    logging.basicConfig(format="%(message)s", datefmt="[%X]", handlers=handlers, force=True)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if log_file is not None else level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Logger for one module, namespaced under ``eslint_config_snapshot``.

    Args:
        name: Module name such as ``__name__``; None returns the package root logger
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER)

    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)
