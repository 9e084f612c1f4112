"""
Logging setup for riskmap.

Every module logs under the ``riskmap`` namespace. Commands that print to the
terminal get a rich handler on stderr; the TUI owns the screen, so it logs
to a file or not at all.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "riskmap"

FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Chatty at DEBUG and irrelevant to treemap troubleshooting.
_NOISY_LOGGERS = ("asyncio", "markdown_it")


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[str] = None,
    to_console: bool = True,
) -> logging.Logger:
    """
    Install handlers on the ``riskmap`` logger.

    Args:
        verbose: DEBUG level, with source paths and locals in tracebacks
        quiet: ERROR level only (wins over ``verbose``)
        log_file: Also append records to this file
        to_console: Attach the rich stderr handler; off while a full-screen
            app is running

    Returns:
        The ``riskmap`` logger
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if to_console:
        logger.addHandler(
            RichHandler(
                console=Console(stderr=True),
                rich_tracebacks=True,
                tracebacks_show_locals=verbose,
                markup=False,
                show_path=verbose,
            )
        )
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    logger.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for a module, e.g. ``get_logger(__name__)`` -> ``riskmap.session``."""
    if name is None or name == ROOT_LOGGER:
        return logging.getLogger(ROOT_LOGGER)
    if not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
