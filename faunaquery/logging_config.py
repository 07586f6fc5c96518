"""Logging setup for the faunaquery package.

The package logger carries a ``NullHandler`` so the library stays silent
until an application opts in with ``setup_logging``.
"""

import logging
import sys

LOGGER_NAME = "faunaquery"

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger in the faunaquery namespace.

    Args:
        name: Module path, usually ``__name__``. The package logger is
            returned when omitted.
    """
    return logging.getLogger(name if name is not None else LOGGER_NAME)


def setup_logging(level: int | str = "INFO", propagate: bool = False) -> logging.Logger:
    """Send faunaquery logs to stderr.

    Calling this again replaces the previous handler rather than adding a
    second one.

    Args:
        level: Logging threshold, e.g. ``"DEBUG"`` to see request payloads.
        propagate: Whether records also reach the root logger.
    """
    logger = get_logger()

    if logger.hasHandlers():
        logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate

    logger.debug("Logging initialized at level: %s", level)
    return logger
