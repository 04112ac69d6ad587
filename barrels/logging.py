"""Logger setup shared by the CLI, the watcher and the studio service.

Every module logs through ``get_logger(<component>)`` so output can be
tuned for the whole ``barrels`` hierarchy in one place.
"""

from __future__ import annotations

import logging
from typing import TextIO

_LOGGER_NAME = "barrels"

_PLAIN_FORMAT = "[barrels] %(levelname)s %(message)s"
# Long-running commands interleave log lines with update notices.
_TIMESTAMPED_FORMAT = "%(asctime)s [barrels] %(levelname)s %(message)s"


def get_logger(component: str | None = None) -> logging.Logger:
    """``barrels.<component>``, or the package logger itself."""
    return logging.getLogger(f"{_LOGGER_NAME}.{component}" if component else _LOGGER_NAME)


def configure_logging(
    *,
    verbose: bool = False,
    timestamps: bool = False,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Send ``barrels`` log records to ``stream`` (stderr by default).

    ``verbose`` lowers the threshold to DEBUG, which includes per-directory
    reconciliation detail. ``timestamps`` prefixes each line with the time,
    for ``watch`` and ``studio`` sessions. Calling this again replaces the
    previous handler.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(_TIMESTAMPED_FORMAT if timestamps else _PLAIN_FORMAT)
    )
    logger.addHandler(handler)
    return logger


__all__ = ["configure_logging", "get_logger"]
