# Copyright 2026 Michael Ellis
# SPDX-License-Identifier: Apache-2.0
"""Logging for smcsmooth.

Modules obtain loggers with ``get_logger(__name__)``.  Handlers are only
ever attached to the ``smcsmooth`` package logger; the root logger is
left alone.
"""

import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = 'smcsmooth'

console = Console(stderr=True)


def _has_own_handler(logger: logging.Logger) -> bool:
    return any(h.get_name() == PACKAGE_LOGGER for h in logger.handlers)


def setup_logger(
    name: str = PACKAGE_LOGGER,
    level: str = 'WARNING',
    use_rich: bool = True,
) -> logging.Logger:
    """Configure the package logger.

    Calling again only updates the level; the handler is installed once.
    It is recognized by its name, so handlers added by others (such as
    pytest's log capture) do not count.

    Args:
        name: Logger name.
        level: Logging level name, e.g. ``'INFO'`` or ``'DEBUG'``.
        use_rich: Format records with :class:`rich.logging.RichHandler`
            instead of a plain stream handler.

    Returns:
        The configured logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))
    if _has_own_handler(logger):
        return logger

    if use_rich:
        handler: logging.Handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
        )
        handler.setFormatter(logging.Formatter('%(message)s', datefmt='[%X]'))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
        )

    handler.set_name(PACKAGE_LOGGER)
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger below the package logger.

    Args:
        name: Logger name, usually ``__name__``; defaults to the package
            logger itself.
    """
    if not _has_own_handler(logging.getLogger(PACKAGE_LOGGER)):
        setup_logger()
    return logging.getLogger(name or PACKAGE_LOGGER)
