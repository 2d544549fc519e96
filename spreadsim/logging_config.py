"""
Logging Setup
=============
Each module logs through ``logging.getLogger(__name__)`` below the
``spreadsim`` namespace: Weibull fit results and skipped components at
INFO/WARNING, per-granule failures at DEBUG, run summaries at INFO. The
package installs no handlers of its own; scripts call setup_logging() once.
"""

import logging
import sys
from typing import Optional, TextIO, Union

from .errors import ConfigurationError

LOGGER_NAME = 'spreadsim'
LOG_FORMAT = '%(asctime)s %(levelname)-7s %(name)s: %(message)s'
DATE_FORMAT = '%H:%M:%S'


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ConfigurationError(f"Unknown log level {level!r}")
        return resolved
    return int(level)


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None,
                  stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Route the package's log records to a stream and optionally a file.

    Args:
        level: Level for the package logger and its handlers, as a number
            or a name such as ``'debug'``
        log_file: Optional path; the file is overwritten
        stream: Console stream, stderr by default

    Returns:
        The ``spreadsim`` logger. Calling again replaces its handlers.
    """
    level = _resolve_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler(stream if stream is not None else sys.stderr)]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("Logging at %s%s", logging.getLevelName(level),
                 f", file {log_file}" if log_file is not None else "")
    return logger
