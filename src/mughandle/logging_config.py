"""
Logging setup for the mughandle command line.

Library modules only create ``logging.getLogger(__name__)`` loggers; this
module attaches handlers to the ``mughandle`` logger when a command-line
run wants to see them. Records go to stderr because stdout carries the
CLI's progress lines.
"""

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "mughandle"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%H:%M:%S'


def _attach(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(handler)


def setup_logging(level: int = logging.WARNING, log_file: Optional[str] = None) -> logging.Logger:
    """
    Route mughandle log records to stderr and optionally a file.

    Calling again replaces the previous handlers, so repeated CLI runs in
    one process (tests, notebooks) never print a record twice.

    Args:
        level: Threshold for the package logger and its handlers
        log_file: Also write records here (overwritten each run)

    Returns:
        The ``mughandle`` logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    _attach(logger, logging.StreamHandler(sys.stderr), level)
    if log_file:
        _attach(logger, logging.FileHandler(log_file, mode='w', encoding='utf-8'), level)

    logger.debug(f"Logging at {logging.getLevelName(level)}")
    return logger
