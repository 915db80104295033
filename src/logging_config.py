"""Logging configuration for the command line entry point.

Library modules only create module loggers ('logging.getLogger(__name__)'). Handlers are attached here, once, by the
application entry point.
"""

import logging
import sys

import constants

# The stderr handler installed by the last 'setup_logging()' call.
_console_handler: logging.Handler | None = None


def setup_logging(level: int | str = constants.LOG_LEVEL_DEFAULT) -> logging.Logger:
    """Configures a stderr handler on the root logger.

    Calling it again replaces the previously installed handler, so the level can be changed between runs.

    Args:
        level: Logging level name (e.g. "INFO") or number.

    Returns:
        The configured root logger.
    """
    global _console_handler

    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper() if isinstance(level, str) else level)

    if _console_handler is not None:
        root_logger.removeHandler(_console_handler)

    _console_handler = logging.StreamHandler(sys.stderr)
    _console_handler.setFormatter(logging.Formatter(fmt=constants.LOG_FORMAT, datefmt=constants.LOG_DATE_FORMAT))
    root_logger.addHandler(_console_handler)

    return root_logger
