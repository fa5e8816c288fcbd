"""Logging configuration for hierarchy-locator."""

import sys

from loguru import logger


def configure_logging(*, verbose: bool = False, trace: bool = False) -> None:
    """Configure loguru for the CLI.

    ``trace`` also logs every hierarchy node as it is walked.
    """
    logger.remove()
    if trace:
        level = "TRACE"
    elif verbose:
        level = "DEBUG"
    else:
        level = "INFO"
    logger.add(sys.stderr, level=level, format="{level.icon} {message}")
