"""Logging utilities for marginboost.

Every module logs through a child of the ``marginboost`` package logger,
which owns the only handler. Round-by-round bounds are emitted at DEBUG,
initialization and termination at INFO.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

PACKAGE = "marginboost"
_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def _package_logger() -> logging.Logger:
    logger = logging.getLogger(PACKAGE)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(logging.WARNING)
        logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the logger for ``name`` (typically ``__name__``) under ``marginboost``.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.debug("LPBoost round %d: primal %.6f", 3, 0.25)
    """
    package = _package_logger()
    if name is None or name == PACKAGE:
        return package
    if not name.startswith(PACKAGE + "."):
        name = f"{PACKAGE}.{name}"
    return logging.getLogger(name)


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Set the level and output of all marginboost loggers.

    ``configure_logging(level=logging.INFO)`` follows a booster's progress;
    ``logging.DEBUG`` adds the bounds of every round.

    Args:
        level: Logging level or its name.
        format_string: Record format; defaults to ``[LEVEL] name: message``.
        stream: Output stream; defaults to ``sys.stderr``.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown logging level {level!r}.")

    package = _package_logger()
    handler = logging.StreamHandler(sys.stderr if stream is None else stream)
    handler.setFormatter(logging.Formatter(format_string or _FORMAT))
    for old in package.handlers[:]:
        package.removeHandler(old)
    package.addHandler(handler)
    package.setLevel(level)


__all__ = ["get_logger", "configure_logging"]
