"""Logging setup for nmclean."""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(
    verbose: bool = False,
    log_file: Path | None = None,
    console: Console | None = None,
) -> None:
    """
    Configure the ``nmclean`` logger.

    Args:
        verbose: Log at DEBUG instead of INFO
        log_file: Optional file that receives every record
        console: Rich console for terminal output; None keeps the terminal
            quiet, which the TUI needs
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger("nmclean")
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if console is not None:
        rich_handler = RichHandler(console=console, show_path=False, markup=False)
        rich_handler.setLevel(level)
        logger.addHandler(rich_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
