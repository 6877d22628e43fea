#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Logging setup for the blockmark command line.

Library modules only create loggers (``logging.getLogger(__name__)``); the
handlers are installed here, on the ``blockmark`` package logger, so that a
host application's root logger configuration is left alone.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, Union

PACKAGE_LOGGER = "blockmark"

_PLAIN_FORMAT = "%(levelname)s: %(message)s"
_TRACE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s:%(lineno)d %(message)s"


def resolve_level(log_level: Union[int, str]) -> int:
    """Turn a level name such as ``"debug"`` into its numeric value.

    Raises
    ------
    ValueError
        If the name is not a standard logging level.

    """
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level!r}")
    return level


def configure_logging(
    log_level: Union[int, str] = logging.WARNING,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Install stderr (and optional file) handlers on the package logger.

    Calling it again replaces the handlers installed by the previous call.

    Parameters
    ----------
    log_level : int or str, default logging.WARNING
        Level for the package logger
    log_file : str, optional
        Also append log records to this file
    trace_mode : bool, default False
        Use a verbose format with timestamps, logger names and line numbers

    Returns
    -------
    logging.Logger
        The ``blockmark`` logger

    """
    level = resolve_level(log_level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    formatter = logging.Formatter(_TRACE_FORMAT if trace_mode else _PLAIN_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
        except OSError as e:
            logger.addHandler(handlers[0])
            handlers[0].setFormatter(formatter)
            logger.warning("Could not open log file %s: %s", log_file, e)
            return logger

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
