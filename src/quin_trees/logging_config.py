"""Logging setup for the ``quin_trees`` package.

Every module logs through a child of the ``quin_trees`` logger obtained from
:func:`get_logger`. The package logger writes to stdout and does not
propagate to the root logger.
"""

import logging
import os
import sys
from typing import Optional, Union

LOGGER_NAME = "quin_trees"
DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"unknown logging level {level!r}")
        return resolved
    return level


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    format_string: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """
    Configure the ``quin_trees`` logger.

    The stdout handler is installed once; later calls only adjust the level
    and add a file handler when ``log_file`` names a file not yet attached.

    Args:
        level: Level as an int or a name such as ``"DEBUG"``
        log_file: Optional path that also receives every record
        format_string: Format shared by all handlers

    Returns:
        The ``quin_trees`` logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    formatter = logging.Formatter(format_string)

    if not logger.handlers:
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    if log_file is not None:
        path = os.path.abspath(log_file)
        if all(getattr(h, "baseFilename", None) != path for h in logger.handlers):
            file_handler = logging.FileHandler(path, mode="a")
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    logger.setLevel(_resolve_level(level))
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Logger for a package module, normally called with ``__name__``.

    Names outside the package are nested under ``quin_trees``.
    """
    if not logging.getLogger(LOGGER_NAME).handlers:
        setup_logging()

    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
