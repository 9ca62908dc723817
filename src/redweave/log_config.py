# redweave/log_config.py
"""Logging configuration for the redweave library using Loguru.

redweave logs through the shared Loguru ``logger`` but keeps itself silent
until an application opts in: the package disables its own records on import,
and :func:`configure_logging` re-enables them alongside installing a sink.
"""

import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str = "INFO", sink=sys.stderr, *, serialize: bool = False):
    """
    Configures Loguru logger for redweave.

    Removes existing handlers, adds a new one with the specified level and sink,
    and enables records emitted by the ``redweave`` package.

    Args:
        level: The minimum logging level (e.g., "DEBUG", "INFO", "WARNING").
        sink: The output sink (e.g., sys.stderr, "redweave.log").
        serialize: Emit each record as a JSON document instead of the text format.
    """
    logger.remove()
    logger.enable("redweave")
    logger.add(
        sink,
        level=level.upper(),
        format=LOG_FORMAT,
        colorize=sink is sys.stderr and not serialize,
        serialize=serialize,
        backtrace=True,
        diagnose=False,
    )
    logger.info(f"redweave logging configured with level={level.upper()} writing to {sink}")


def disable_logging() -> None:
    """Stops redweave records from reaching any sink."""
    logger.disable("redweave")
