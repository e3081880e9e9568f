"""Logging utilities for trtrimmer."""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

# -v count -> level; anything above the last entry logs everything
_VERBOSITY_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


def level_from_verbosity(verbose: int) -> int:
    """Map a repeated -v count to a logging level."""
    return _VERBOSITY_LEVELS[min(max(verbose, 0), len(_VERBOSITY_LEVELS) - 1)]


def setup_logger(
    level: int = logging.WARNING,
    log_file: Optional[str] = None,
    name: str = "trtrimmer",
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Set up the package logger.

    Messages go to stderr by default, since stdout carries sequence output.
    Calling it again replaces the previous handlers.

    Args:
        level: Logging level (default: WARNING)
        log_file: Optional path to a log file, which always records INFO
            and above
        name: Logger name
        stream: Console stream (default: sys.stderr at call time)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    logger_level = level
    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_level = min(level, logging.INFO)
        file_handler.setLevel(file_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        logger_level = file_level

    logger.setLevel(logger_level)
    return logger
