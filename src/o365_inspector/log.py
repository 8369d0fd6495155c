"""Logging configuration.

Diagnostics go through the standard logging module under the
``o365_inspector`` logger and are rendered by rich on stderr, keeping
stdout free for the result table.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "o365_inspector"

status_console = Console(stderr=True)


def configure_logging(verbose: bool = False, console: Console | None = None) -> logging.Logger:
    """Install a single RichHandler on the package logger.

    Safe to call more than once; the previous handler is replaced.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or status_console,
        show_time=verbose,
        show_path=verbose,
        markup=False,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return logger
