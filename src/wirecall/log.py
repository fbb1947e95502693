# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging helpers for wirecall.

The library only ever configures its own `wirecall` logger; the root logger and its
handlers belong to the application.
"""

from __future__ import annotations

import logging
import os

LOGGER_NAME = "wirecall"
LOG_LEVEL_ENV = "WIRECALL_LOG_LEVEL"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


def setup_logging(level: str | None = None, *, handler: logging.Handler | None = None) -> logging.Logger:
    """
    Set the level of the `wirecall` logger and optionally attach `handler` to it.

    The level defaults to WIRECALL_LOG_LEVEL, then WARNING; unknown names fall back to
    WARNING. A handler without a formatter gets a `LEVEL name: message` one.
    """
    name = (level or os.getenv(LOG_LEVEL_ENV) or "WARNING").upper()
    effective_level = getattr(logging, name, None)
    if not isinstance(effective_level, int):
        effective_level = logging.WARNING

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(effective_level)
    if handler is not None and handler not in logger.handlers:
        if handler.formatter is None:
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger


__all__ = ["LOGGER_NAME", "setup_logging"]
