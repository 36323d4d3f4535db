"""Centralised logging configuration."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def setup_logging(level: str = "WARNING", verbose: int = 0, console: Console | None = None) -> logging.Logger:
    """Attach a rich handler to the ``personachat`` logger.

    ``verbose`` lowers the threshold one step per increment (INFO, then DEBUG)
    regardless of *level*.
    """

    if verbose == 1:
        effective_level = logging.INFO
    elif verbose >= 2:
        effective_level = logging.DEBUG
    else:
        effective_level = LEVELS.get(level.upper(), logging.WARNING)

    logger = logging.getLogger("personachat")
    logger.setLevel(effective_level)
    logger.handlers.clear()

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=effective_level <= logging.DEBUG,
        rich_tracebacks=False,
        markup=False,
    )
    handler.setLevel(effective_level)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


__all__ = ["LEVELS", "setup_logging"]
